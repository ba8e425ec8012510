"""Tax Document Domain Entity

Billing record (invoice, receipt, credit note or debit note) with a number
that is sequential per tenant and document type.
"""

import re
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, Date, DateTime, Numeric, String, UniqueConstraint
from src.domain.base import BaseModel, IdType
from src.domain.exceptions import SequenceExhaustedError


class DocumentType(str, Enum):
    """Tax document types"""
    INVOICE = "invoice"
    RECEIPT = "receipt"
    CREDIT_NOTE = "credit_note"
    DEBIT_NOTE = "debit_note"


class DocumentStatus(str, Enum):
    """Tax document lifecycle states"""
    DRAFT = "draft"
    SENT = "sent"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


NUMBER_PREFIXES = {
    DocumentType.INVOICE: "F-",
    DocumentType.RECEIPT: "B-",
    DocumentType.CREDIT_NOTE: "NC-",
    DocumentType.DEBIT_NOTE: "ND-",
}
DEFAULT_NUMBER_PREFIX = "D-"
NUMBER_WIDTH = 8
MAX_SEQUENCE = 10 ** NUMBER_WIDTH - 1
NUMBER_PATTERN = re.compile(r"^[A-Z]{1,3}-\d{8}$")


def number_prefix(document_type) -> str:
    """Prefix for a document type; unknown types fall back to "D-"."""
    try:
        return NUMBER_PREFIXES[DocumentType(document_type)]
    except ValueError:
        return DEFAULT_NUMBER_PREFIX


def format_document_number(document_type, sequence: int) -> str:
    """Format e.g. (invoice, 42) -> "F-00000042"."""
    if sequence > MAX_SEQUENCE:
        raise SequenceExhaustedError(
            f"No {NUMBER_WIDTH}-digit numbers left for {number_prefix(document_type)} documents",
            reason=f"sequence={sequence}",
        )
    return f"{number_prefix(document_type)}{sequence:0{NUMBER_WIDTH}d}"


def parse_document_sequence(number: Optional[str]) -> int:
    """Numeric suffix of a stored number, 0 when absent."""
    if not number:
        return 0
    return int(number.rsplit("-", 1)[-1])


class TaxDocument(BaseModel, table=True):
    """
    TaxDocument - Billing document issued by a tenant to a customer

    Domain Rules:
    - number is unique within (tenant_id, document_type)
    - total = subtotal + tax_amount
    - Header and items are mutable only while status == draft
    - Status transitions: draft -> sent (irreversible); never back to draft
    - Only drafts may be deleted
    """

    __tablename__ = "tax_documents"
    __table_args__ = (
        UniqueConstraint(
            "tenant_id", "document_type", "number",
            name="uq_tax_documents_tenant_type_number",
        ),
        Index("ix_tax_documents_tenant_id", "tenant_id"),
        Index("ix_tax_documents_status", "status"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique document identifier (auto-increment)"
    )

    tenant_id: str = Field(
        description="Owning tenant"
    )

    customer_id: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Customer the document is issued to"
    )

    document_type: DocumentType = Field(
        description="invoice, receipt, credit_note or debit_note"
    )

    number: str = Field(
        sa_column=Column(String(20), nullable=False),
        description="Sequential number, e.g. F-00000042"
    )

    status: DocumentStatus = Field(
        default=DocumentStatus.DRAFT,
        description="draft, sent, accepted or rejected"
    )

    issue_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    due_date: date = Field(
        sa_column=Column(Date, nullable=False),
    )

    subtotal: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="Sum of line totals"
    )

    tax_amount: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="round_half_up(subtotal * tax_rate, 2)"
    )

    total: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="subtotal + tax_amount"
    )

    paid_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime, nullable=True),
        description="Timestamp when the document was paid"
    )

    external_tracking_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
        description="Tracking id returned by the tax authority on send"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )

    @property
    def is_draft(self) -> bool:
        return self.status == DocumentStatus.DRAFT
