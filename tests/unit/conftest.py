import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.tax_document import DocumentStatus, DocumentType, TaxDocument
from src.domain.tax_document_item import TaxDocumentItem


@pytest.fixture
def mock_uow():
    """Unit of work with async commit/rollback"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def mock_document_repo():
    return MagicMock()


@pytest.fixture
def make_document():
    """Factory for TaxDocument instances with sensible defaults"""

    def _make(**overrides):
        values = dict(
            id=1,
            tenant_id="tenant_a",
            customer_id=12,
            document_type=DocumentType.INVOICE,
            number="F-00000001",
            status=DocumentStatus.DRAFT,
            issue_date=date(2024, 3, 1),
            due_date=date(2024, 3, 31),
            subtotal=Decimal("2500"),
            tax_amount=Decimal("475.00"),
            total=Decimal("2975.00"),
            created_at=datetime(2024, 3, 1, 10, 0, 0),
            updated_at=datetime(2024, 3, 1, 10, 0, 0),
        )
        values.update(overrides)
        return TaxDocument(**values)

    return _make


@pytest.fixture
def sample_items():
    return [
        TaxDocumentItem(
            id=1,
            document_id=1,
            product_id=7,
            position=0,
            description="Widget",
            quantity=Decimal("2"),
            unit_price=Decimal("1000"),
            line_total=Decimal("2000"),
        ),
        TaxDocumentItem(
            id=2,
            document_id=1,
            product_id=9,
            position=1,
            description="Setup",
            quantity=Decimal("1"),
            unit_price=Decimal("500"),
            line_total=Decimal("500"),
        ),
    ]
