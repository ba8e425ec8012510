"""DeleteTaxDocument Use Case

Deletes a draft tax document together with its items.
"""

import logging
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.repositories.tax_document_repository import TaxDocumentRepository
from .dtos import DeleteTaxDocumentResponseDTO
from .mappers import (
    error_from_exception,
    forbidden_error,
    invalid_status_error,
    not_found_error,
)

logger = logging.getLogger(__name__)


class DeleteTaxDocument:
    """
    Use Case: Delete a draft tax document

    Business Rules:
    1. Document must exist and belong to the requesting tenant
    2. Only drafts can be deleted; sent documents keep their number forever
    3. Header and items are removed in the same transaction
    """

    def __init__(self, uow: UnitOfWork, document_repo: TaxDocumentRepository):
        self.uow = uow
        self.document_repo = document_repo

    async def execute(self, document_id: int, tenant_id: str) -> Result[DeleteTaxDocumentResponseDTO]:
        """
        Execute tax document deletion

        Args:
            document_id: Document to delete
            tenant_id: Requesting tenant

        Returns:
            Result[DeleteTaxDocumentResponseDTO]
        """
        try:
            document = await self.document_repo.get_by_id(document_id, for_update=True)

            if not document:
                await self.uow.rollback()
                return Return.err(not_found_error(document_id))

            if document.tenant_id != tenant_id:
                await self.uow.rollback()
                logger.warning(f"Tenant {tenant_id} tried to delete document {document_id}")
                return Return.err(forbidden_error(document_id))

            if not document.is_draft:
                error = invalid_status_error(document, "deleted")
                await self.uow.rollback()
                return Return.err(error)

            number = document.number
            await self.document_repo.delete(document, tenant_id)
            await self.uow.commit()

            return Return.ok(DeleteTaxDocumentResponseDTO(document_id=document_id, number=number))

        except Exception as e:
            await self.uow.rollback()
            error = error_from_exception(e, "Failed to delete tax document")
            logger.error(f"Delete of document {document_id} failed: {error.code} {error.reason}")
            return Return.err(error)
