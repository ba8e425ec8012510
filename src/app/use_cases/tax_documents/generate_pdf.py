"""GenerateTaxDocumentPdf Use Case

Renders a tax document as PDF through the PdfService collaborator.
"""

import base64
from datetime import datetime
from libs.result import Result, Return
from src.app.repositories.tax_document_repository import TaxDocumentRepository
from src.app.services.pdf_service import PdfService
from .dtos import TaxDocumentPdfResponseDTO
from .mappers import error_from_exception, forbidden_error, not_found_error


class GenerateTaxDocumentPdf:
    """
    Use Case: Export a tax document as PDF

    Business Rules:
    1. Document must exist and belong to the requesting tenant
    2. Any status can be exported; drafts are marked as not valid
    3. Filename is the document number with unsafe characters replaced
    """

    def __init__(
        self,
        document_repo: TaxDocumentRepository,
        pdf_service: PdfService,
        company_name: str,
        company_address: str,
    ):
        self.document_repo = document_repo
        self.pdf_service = pdf_service
        self.company_name = company_name
        self.company_address = company_address

    async def execute(self, document_id: int, tenant_id: str) -> Result[TaxDocumentPdfResponseDTO]:
        try:
            document = await self.document_repo.get_by_id(document_id)

            if not document:
                return Return.err(not_found_error(document_id))

            if document.tenant_id != tenant_id:
                return Return.err(forbidden_error(document_id))

            items = await self.document_repo.get_items(document.id)

            pdf_bytes = self.pdf_service.generate_tax_document(
                document=document,
                items=items,
                company_name=self.company_name,
                company_address=self.company_address,
            )

            return Return.ok(
                TaxDocumentPdfResponseDTO(
                    document_id=document.id,
                    number=document.number,
                    filename=PdfService.build_filename(document),
                    pdf_base64=base64.b64encode(pdf_bytes).decode("utf-8"),
                    generated_at=datetime.utcnow(),
                )
            )

        except Exception as e:
            return Return.err(error_from_exception(e, "Failed to generate tax document PDF"))
