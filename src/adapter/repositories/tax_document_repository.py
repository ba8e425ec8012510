"""SQLAlchemy Tax Document Repository Implementation

Persists tax documents and their items through an async session. Totals come
from DocumentTotalsCalculator and numbers from DocumentNumberingService, both
running in the same session so one unit of work covers the whole change.
"""

import logging
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence
from sqlalchemy import case, delete, func, or_
from sqlalchemy.exc import DBAPIError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.services.unit_of_work import translate_db_error
from src.app.repositories.product_repository import ProductRepository
from src.app.repositories.tax_document_repository import (
    DocumentFilters,
    DocumentHeader,
    DocumentItemInput,
    DocumentStats,
    TaxDocumentRepository,
)
from src.app.services.numbering_service import DocumentNumberingService
from src.app.services.totals_calculator import DocumentTotalsCalculator
from src.domain.exceptions import (
    DocumentValidationError,
    InvalidDocumentStatusError,
    InvalidLineItem,
    TenantMismatchError,
)
from src.domain.tax_document import DocumentStatus, DocumentType, TaxDocument
from src.domain.tax_document_item import TaxDocumentItem

logger = logging.getLogger(__name__)


def ensure_mutable(document: TaxDocument, tenant_id: str) -> None:
    """
    Raise unless ``tenant_id`` owns the document and it is still a draft

    Ownership is checked first so a foreign document never reveals its status.
    """
    if document.tenant_id != tenant_id:
        raise TenantMismatchError(
            "You do not have access to this document",
            reason=f"document {document.id} belongs to another tenant",
        )
    if document.status != DocumentStatus.DRAFT:
        raise InvalidDocumentStatusError(
            f"Only draft documents can be modified. Current status: {document.status.value}",
            reason=f"document {document.id} is {document.status.value}",
        )


class SqlAlchemyTaxDocumentRepository(TaxDocumentRepository):
    """
    SQLAlchemy implementation of TaxDocumentRepository

    Features:
    - Header and items written in one session, committed by the caller's unit of work
    - Replace-on-update: existing items are deleted and the submitted set reinserted
    - Driver errors translated to ConcurrencyError / PersistenceError
    """

    def __init__(
        self,
        session: AsyncSession,
        numbering_service: DocumentNumberingService,
        product_repo: ProductRepository,
        calculator: Optional[DocumentTotalsCalculator] = None,
    ):
        self.session = session
        self.numbering_service = numbering_service
        self.product_repo = product_repo
        self.calculator = calculator or DocumentTotalsCalculator()

    async def create(
        self,
        tenant_id: str,
        document_type: DocumentType,
        header: DocumentHeader,
        items: Sequence[DocumentItemInput],
    ) -> TaxDocument:
        if header.customer_id is None:
            raise DocumentValidationError("customer_id is required")

        totals = self.calculator.calculate((item.quantity, item.unit_price) for item in items)
        descriptions = await self._resolve_descriptions(tenant_id, items)

        try:
            number = await self.numbering_service.allocate(tenant_id, document_type)

            document = TaxDocument(
                tenant_id=tenant_id,
                customer_id=header.customer_id,
                document_type=document_type,
                number=number,
                status=DocumentStatus.DRAFT,
                issue_date=header.issue_date,
                due_date=header.due_date,
                subtotal=totals.subtotal,
                tax_amount=totals.tax_amount,
                total=totals.total,
            )
            self.session.add(document)
            await self.session.flush()

            await self._insert_items(document.id, items, descriptions)
            await self.session.refresh(document)
        except DBAPIError as e:
            raise translate_db_error(e) from e

        logger.info(
            f"Created {document_type.value} {document.number} for tenant {tenant_id} "
            f"with {len(items)} items, total {document.total}"
        )
        return document

    async def update(
        self,
        document: TaxDocument,
        tenant_id: str,
        header: DocumentHeader,
        items: Sequence[DocumentItemInput],
    ) -> TaxDocument:
        ensure_mutable(document, tenant_id)

        totals = self.calculator.calculate((item.quantity, item.unit_price) for item in items)
        descriptions = await self._resolve_descriptions(tenant_id, items)

        try:
            if header.customer_id is not None:
                document.customer_id = header.customer_id
            document.issue_date = header.issue_date
            document.due_date = header.due_date
            document.subtotal = totals.subtotal
            document.tax_amount = totals.tax_amount
            document.total = totals.total
            document.updated_at = datetime.utcnow()
            self.session.add(document)

            await self.session.execute(
                delete(TaxDocumentItem).where(TaxDocumentItem.document_id == document.id)
            )
            await self._insert_items(document.id, items, descriptions)
            await self.session.refresh(document)
        except DBAPIError as e:
            raise translate_db_error(e) from e

        logger.info(f"Updated {document.number} for tenant {tenant_id}, total {document.total}")
        return document

    async def delete(self, document: TaxDocument, tenant_id: str) -> None:
        ensure_mutable(document, tenant_id)

        try:
            await self.session.execute(
                delete(TaxDocumentItem).where(TaxDocumentItem.document_id == document.id)
            )
            await self.session.delete(document)
            await self.session.flush()
        except DBAPIError as e:
            raise translate_db_error(e) from e

        logger.info(f"Deleted {document.number} for tenant {tenant_id}")

    async def mark_sent(
        self, document: TaxDocument, tenant_id: str, tracking_id: Optional[str]
    ) -> TaxDocument:
        ensure_mutable(document, tenant_id)

        try:
            document.status = DocumentStatus.SENT
            document.external_tracking_id = tracking_id
            document.updated_at = datetime.utcnow()
            self.session.add(document)
            await self.session.flush()
            await self.session.refresh(document)
        except DBAPIError as e:
            raise translate_db_error(e) from e

        logger.info(f"Marked {document.number} as sent (tracking {tracking_id})")
        return document

    async def get_by_id(self, document_id: int, for_update: bool = False) -> Optional[TaxDocument]:
        statement = select(TaxDocument).where(TaxDocument.id == document_id)

        if for_update:
            statement = statement.with_for_update()

        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    async def get_items(self, document_id: int) -> List[TaxDocumentItem]:
        statement = (
            select(TaxDocumentItem)
            .where(TaxDocumentItem.document_id == document_id)
            .order_by(TaxDocumentItem.position)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def list_by_tenant(
        self,
        tenant_id: str,
        filters: Optional[DocumentFilters] = None,
        limit: int = 15,
        offset: int = 0,
    ) -> List[TaxDocument]:
        statement = self._filtered(select(TaxDocument), tenant_id, filters)
        statement = statement.order_by(TaxDocument.created_at.desc(), TaxDocument.id.desc())
        statement = statement.limit(limit).offset(offset)

        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def count_by_tenant(
        self, tenant_id: str, filters: Optional[DocumentFilters] = None
    ) -> int:
        statement = self._filtered(
            select(func.count()).select_from(TaxDocument), tenant_id, filters
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def get_stats(self, tenant_id: str, today: date) -> DocumentStats:
        statement = select(
            func.count(case((TaxDocument.status == DocumentStatus.DRAFT, 1))),
            func.count(case((TaxDocument.status == DocumentStatus.SENT, 1))),
            func.count(case((TaxDocument.status == DocumentStatus.ACCEPTED, 1))),
            func.count(
                case(
                    (
                        (TaxDocument.status == DocumentStatus.ACCEPTED)
                        & (TaxDocument.paid_at.is_(None))
                        & (TaxDocument.due_date < today),
                        1,
                    )
                )
            ),
        ).where(TaxDocument.tenant_id == tenant_id)

        result = await self.session.execute(statement)
        draft, sent, accepted, overdue = result.one()
        return DocumentStats(
            total_draft=draft or 0,
            total_sent=sent or 0,
            total_accepted=accepted or 0,
            total_overdue=overdue or 0,
        )

    def _filtered(self, statement, tenant_id: str, filters: Optional[DocumentFilters]):
        statement = statement.where(TaxDocument.tenant_id == tenant_id)
        if not filters:
            return statement

        if filters.search:
            pattern = f"%{filters.search}%"
            conditions = [TaxDocument.number.ilike(pattern)]
            if filters.search.isdigit():
                conditions.append(TaxDocument.customer_id == int(filters.search))
            statement = statement.where(or_(*conditions))
        if filters.status:
            statement = statement.where(TaxDocument.status == filters.status)
        if filters.document_type:
            statement = statement.where(TaxDocument.document_type == filters.document_type)
        if filters.from_date:
            statement = statement.where(TaxDocument.issue_date >= filters.from_date)
        if filters.to_date:
            statement = statement.where(TaxDocument.issue_date <= filters.to_date)
        return statement

    async def _resolve_descriptions(
        self, tenant_id: str, items: Sequence[DocumentItemInput]
    ) -> List[str]:
        """
        Description per item, falling back to the product name

        Raises:
            InvalidLineItem: A product does not exist for this tenant
        """
        names: Dict[int, str] = await self.product_repo.resolve_names(
            tenant_id, {item.product_id for item in items}
        )

        descriptions = []
        for index, item in enumerate(items):
            if item.product_id not in names:
                raise InvalidLineItem(
                    f"Item {index}: product {item.product_id} does not exist",
                    reason=f"product_id={item.product_id}",
                )
            descriptions.append(item.description or names[item.product_id])
        return descriptions

    async def _insert_items(
        self,
        document_id: int,
        items: Sequence[DocumentItemInput],
        descriptions: Sequence[str],
    ) -> None:
        for position, (item, description) in enumerate(zip(items, descriptions)):
            self.session.add(
                TaxDocumentItem(
                    document_id=document_id,
                    product_id=item.product_id,
                    position=position,
                    description=description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=self.calculator.line_total(item.quantity, item.unit_price, position),
                )
            )
        await self.session.flush()
