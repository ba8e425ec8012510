"""CreateTaxDocument Use Case

Creates a draft tax document with its line items and a freshly allocated
sequential number, all in one unit of work.
"""

import logging
from typing import Optional
from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.totals_calculator import DocumentTotalsCalculator
from src.app.repositories.tax_document_repository import TaxDocumentRepository
from src.domain.exceptions import DocumentValidationError
from .dtos import CreateTaxDocumentCommandDTO, TaxDocumentResponseDTO
from .mappers import (
    date_range_error,
    error_from_exception,
    to_header,
    to_item_inputs,
    to_response_dto,
)

logger = logging.getLogger(__name__)


class CreateTaxDocument:
    """
    Use Case: Create a draft tax document

    Business Rules:
    1. due_date >= issue_date; at least one item; quantity > 0; unit_price >= 0
    2. Totals: subtotal = sum(qty * price), tax = round_half_up(subtotal * rate, 2)
    3. Number is allocated per (tenant, document type), gap-free
    4. Document is created with status=draft
    5. Header, items and the number allocation commit together or not at all

    Flow:
    1. Validate dates and items (no store access yet)
    2. Create document through the repository (allocates number, inserts header and items)
    3. Build response from the flushed header and items
    4. Commit transaction
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

    async def execute(self, command: CreateTaxDocumentCommandDTO) -> Result[TaxDocumentResponseDTO]:
        """
        Execute tax document creation

        Args:
            command: CreateTaxDocumentCommandDTO with tenant, customer, type, dates, items

        Returns:
            Result[TaxDocumentResponseDTO]: Created document or error
            (VALIDATION_ERROR, CONCURRENCY_ERROR, PERSISTENCE_ERROR)
        """
        # Step 1: Validate input before touching the store
        error = date_range_error(command.issue_date, command.due_date)
        if error:
            return Return.err(error)

        try:
            self.calculator.calculate((item.quantity, item.unit_price) for item in command.items)
        except DocumentValidationError as e:
            return Return.err(error_from_exception(e, "Invalid document items"))

        try:
            # Step 2: Allocate number and insert header + items
            document = await self.document_repo.create(
                tenant_id=command.tenant_id,
                document_type=command.document_type,
                header=to_header(command.issue_date, command.due_date, command.customer_id),
                items=to_item_inputs(command.items),
            )

            # Step 3: Build response from the flushed header and items
            items = await self.document_repo.get_items(document.id)
            response = to_response_dto(document, items)

            # Step 4: Commit transaction
            await self.uow.commit()

            return Return.ok(response)

        except Exception as e:
            await self.uow.rollback()
            error = error_from_exception(e, "Failed to create tax document")
            logger.error(
                f"Create {command.document_type.value} failed for tenant {command.tenant_id}: "
                f"{error.code} {error.reason}"
            )
            return Return.err(error)
