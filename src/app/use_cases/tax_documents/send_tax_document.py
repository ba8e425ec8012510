"""SendTaxDocument Use Case

Finalizes a draft: submits it to the tax authority gateway and moves it to
status=sent. The default gateway is a stub that only generates a tracking id.
"""

import logging
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.tax_authority_gateway import TaxAuthorityGateway
from src.app.repositories.tax_document_repository import TaxDocumentRepository
from .dtos import TaxDocumentResponseDTO
from .mappers import (
    error_from_exception,
    forbidden_error,
    invalid_status_error,
    not_found_error,
    to_response_dto,
)

logger = logging.getLogger(__name__)


class SendTaxDocument:
    """
    Use Case: Send a draft tax document

    Business Rules:
    1. Document must exist and belong to the requesting tenant
    2. Only drafts can be sent, and only once (draft -> sent is irreversible)
    3. The tracking id returned by the gateway is stored on the document
    """

    def __init__(
        self,
        uow: UnitOfWork,
        document_repo: TaxDocumentRepository,
        gateway: TaxAuthorityGateway,
    ):
        self.uow = uow
        self.document_repo = document_repo
        self.gateway = gateway

    async def execute(self, document_id: int, tenant_id: str) -> Result[TaxDocumentResponseDTO]:
        """
        Execute send

        Args:
            document_id: Document to send
            tenant_id: Requesting tenant

        Returns:
            Result[TaxDocumentResponseDTO]: Sent document or error
        """
        try:
            document = await self.document_repo.get_by_id(document_id, for_update=True)

            if not document:
                await self.uow.rollback()
                return Return.err(not_found_error(document_id))

            if document.tenant_id != tenant_id:
                await self.uow.rollback()
                logger.warning(f"Tenant {tenant_id} tried to send document {document_id}")
                return Return.err(forbidden_error(document_id))

            if not document.is_draft:
                error = invalid_status_error(document, "sent")
                await self.uow.rollback()
                return Return.err(error)

            tracking_id = await self.gateway.submit(document)
            document = await self.document_repo.mark_sent(document, tenant_id, tracking_id)
            items = await self.document_repo.get_items(document.id)
            response = to_response_dto(document, items)

            await self.uow.commit()

            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            error = error_from_exception(e, "Failed to send tax document")
            logger.error(f"Send of document {document_id} failed: {error.code} {error.reason}")
            return Return.err(error)
