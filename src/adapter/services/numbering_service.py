"""SQLAlchemy Document Numbering Service

Allocates tax document numbers from a counter row per (tenant, document
type). The counter is bumped with a single atomic
``UPDATE ... SET current_value = current_value + 1``; the row stays locked
until the caller's transaction ends, so allocations for the same pair are
serialized and a rollback gives the number back.
"""

import logging
from datetime import datetime
from typing import Optional
from sqlalchemy import func, update
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.services.unit_of_work import translate_db_error
from src.app.services.numbering_service import DocumentNumberingService
from src.domain.document_sequence import DocumentSequence
from src.domain.exceptions import ConcurrencyError
from src.domain.tax_document import (
    DocumentType,
    TaxDocument,
    format_document_number,
    parse_document_sequence,
)

logger = logging.getLogger(__name__)


def _sequence_key(document_type) -> str:
    if isinstance(document_type, DocumentType):
        return document_type.value
    return str(document_type)


class SqlAlchemyDocumentNumberingService(DocumentNumberingService):
    """
    Counter-row implementation of DocumentNumberingService

    Features:
    - Atomic increment, never read-max-then-insert
    - Counter rows created lazily inside a savepoint, seeded from numbers already stored
    - Lock waits bounded by the engine's lock/busy timeout
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def allocate(self, tenant_id: str, document_type: DocumentType) -> str:
        try:
            value = await self._increment(tenant_id, document_type)
            if value is None:
                value = await self._create_counter(tenant_id, document_type)
        except DBAPIError as e:
            raise translate_db_error(e) from e

        number = format_document_number(document_type, value)
        logger.info(
            f"Allocated document number {number} for tenant {tenant_id} "
            f"({_sequence_key(document_type)})"
        )
        return number

    async def peek(self, tenant_id: str, document_type: DocumentType) -> str:
        statement = (
            select(DocumentSequence.current_value)
            .where(DocumentSequence.tenant_id == tenant_id)
            .where(DocumentSequence.document_type == _sequence_key(document_type))
        )
        result = await self.session.execute(statement)
        current = result.scalar_one_or_none()
        if current is None:
            current = await self._highest_stored_sequence(tenant_id, document_type)
        return format_document_number(document_type, current + 1)

    async def _increment(self, tenant_id: str, document_type) -> Optional[int]:
        """
        Bump the counter row and read the new value back

        Returns:
            New value, or None when no counter row exists yet
        """
        key = _sequence_key(document_type)
        statement = (
            update(DocumentSequence)
            .where(DocumentSequence.tenant_id == tenant_id)
            .where(DocumentSequence.document_type == key)
            .values(
                current_value=DocumentSequence.current_value + 1,
                updated_at=datetime.utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(statement)
        if result.rowcount == 0:
            return None

        # Same transaction as the UPDATE: the row is still locked by us
        statement = (
            select(DocumentSequence.current_value)
            .where(DocumentSequence.tenant_id == tenant_id)
            .where(DocumentSequence.document_type == key)
        )
        result = await self.session.execute(statement)
        return result.scalar_one()

    async def _create_counter(self, tenant_id: str, document_type) -> int:
        """
        First allocation for this pair: insert the counter row

        A concurrent first allocation makes the insert hit the unique
        constraint; the savepoint is rolled back and the increment retried
        against the row the other transaction created.
        """
        first_value = await self._highest_stored_sequence(tenant_id, document_type) + 1

        savepoint = await self.session.begin_nested()
        try:
            self.session.add(
                DocumentSequence(
                    tenant_id=tenant_id,
                    document_type=_sequence_key(document_type),
                    current_value=first_value,
                )
            )
            await self.session.flush()
            await savepoint.commit()
            return first_value
        except IntegrityError:
            logger.debug(f"Counter creation race for tenant {tenant_id}, retrying increment")
            await savepoint.rollback()

        value = await self._increment(tenant_id, document_type)
        if value is None:
            raise ConcurrencyError(
                "Could not allocate a document number, retry the operation",
                reason=f"counter row for {tenant_id}/{_sequence_key(document_type)} vanished",
            )
        return value

    async def _highest_stored_sequence(self, tenant_id: str, document_type) -> int:
        """Highest suffix among stored documents (numbers are zero-padded, so max() is numeric)"""
        if not isinstance(document_type, DocumentType):
            return 0
        statement = (
            select(func.max(TaxDocument.number))
            .where(TaxDocument.tenant_id == tenant_id)
            .where(TaxDocument.document_type == document_type)
        )
        result = await self.session.execute(statement)
        return parse_document_sequence(result.scalar_one_or_none())
