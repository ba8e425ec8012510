"""UpdateTaxDocument Use Case

Replaces header fields and the full item set of a draft tax document.
"""

import logging
from typing import Optional
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.totals_calculator import DocumentTotalsCalculator
from src.app.repositories.tax_document_repository import TaxDocumentRepository
from src.domain.exceptions import DocumentValidationError
from .dtos import UpdateTaxDocumentCommandDTO, TaxDocumentResponseDTO
from .mappers import (
    date_range_error,
    error_from_exception,
    forbidden_error,
    invalid_status_error,
    not_found_error,
    to_header,
    to_item_inputs,
    to_response_dto,
)

logger = logging.getLogger(__name__)


class UpdateTaxDocument:
    """
    Use Case: Update a draft tax document

    Business Rules:
    1. Document must exist
    2. Document must belong to the requesting tenant (FORBIDDEN otherwise)
    3. Document must be a draft (INVALID_DOCUMENT_STATUS otherwise, nothing written)
    4. Totals are recomputed; items are replaced as a whole set
    5. Number and document type never change

    Flow:
    1. Validate dates and items
    2. Load document with row lock
    3. Check tenant and status
    4. Update header, replace items
    5. Commit transaction
    """

    def __init__(
        self,
        uow: UnitOfWork,
        document_repo: TaxDocumentRepository,
        calculator: Optional[DocumentTotalsCalculator] = None,
    ):
        self.uow = uow
        self.document_repo = document_repo
        self.calculator = calculator or DocumentTotalsCalculator()

    async def execute(self, command: UpdateTaxDocumentCommandDTO) -> Result[TaxDocumentResponseDTO]:
        """
        Execute tax document update

        Args:
            command: UpdateTaxDocumentCommandDTO

        Returns:
            Result[TaxDocumentResponseDTO]: Updated document or error
        """
        error = date_range_error(command.issue_date, command.due_date)
        if error:
            return Return.err(error)

        try:
            self.calculator.calculate((item.quantity, item.unit_price) for item in command.items)
        except DocumentValidationError as e:
            return Return.err(error_from_exception(e, "Invalid document items"))

        try:
            document = await self.document_repo.get_by_id(command.document_id, for_update=True)

            if not document:
                await self.uow.rollback()
                return Return.err(not_found_error(command.document_id))

            if document.tenant_id != command.tenant_id:
                await self.uow.rollback()
                logger.warning(
                    f"Tenant {command.tenant_id} tried to update document {command.document_id}"
                )
                return Return.err(forbidden_error(command.document_id))

            if not document.is_draft:
                error = invalid_status_error(document, "edited")
                await self.uow.rollback()
                return Return.err(error)

            document = await self.document_repo.update(
                document,
                tenant_id=command.tenant_id,
                header=to_header(command.issue_date, command.due_date, command.customer_id),
                items=to_item_inputs(command.items),
            )
            items = await self.document_repo.get_items(document.id)
            response = to_response_dto(document, items)

            await self.uow.commit()

            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            error = error_from_exception(e, "Failed to update tax document")
            logger.error(f"Update of document {command.document_id} failed: {error.code} {error.reason}")
            return Return.err(error)
