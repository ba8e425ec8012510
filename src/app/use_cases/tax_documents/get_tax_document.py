"""GetTaxDocument Use Case

Loads a tax document with its items for the requesting tenant.
"""

from libs.result import Result, Return
from src.app.repositories.tax_document_repository import TaxDocumentRepository
from .dtos import TaxDocumentResponseDTO
from .mappers import error_from_exception, forbidden_error, not_found_error, to_response_dto


class GetTaxDocument:
    """
    Use Case: Get a tax document

    Header and items are fetched explicitly and returned as one DTO.
    A document of another tenant is reported as FORBIDDEN.
    """

    def __init__(self, document_repo: TaxDocumentRepository):
        self.document_repo = document_repo

    async def execute(self, document_id: int, tenant_id: str) -> Result[TaxDocumentResponseDTO]:
        try:
            document = await self.document_repo.get_by_id(document_id)

            if not document:
                return Return.err(not_found_error(document_id))

            if document.tenant_id != tenant_id:
                return Return.err(forbidden_error(document_id))

            items = await self.document_repo.get_items(document.id)
            return Return.ok(to_response_dto(document, items))

        except Exception as e:
            return Return.err(error_from_exception(e, "Failed to load tax document"))
