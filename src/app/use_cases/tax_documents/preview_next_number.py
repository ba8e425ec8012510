"""PreviewNextNumber Use Case

Shows the number the next document of a type would get. Nothing is
reserved: a concurrent create may still take it.
"""

from libs.result import Result, Return
from src.app.services.numbering_service import DocumentNumberingService
from src.domain.tax_document import DocumentType
from .dtos import NextNumberResponseDTO
from .mappers import error_from_exception


class PreviewNextNumber:

    def __init__(self, numbering_service: DocumentNumberingService):
        self.numbering_service = numbering_service

    async def execute(self, tenant_id: str, document_type: DocumentType) -> Result[NextNumberResponseDTO]:
        try:
            next_number = await self.numbering_service.peek(tenant_id, document_type)
            return Return.ok(
                NextNumberResponseDTO(
                    tenant_id=tenant_id,
                    document_type=document_type,
                    next_number=next_number,
                )
            )
        except Exception as e:
            return Return.err(error_from_exception(e, "Failed to preview next number"))
