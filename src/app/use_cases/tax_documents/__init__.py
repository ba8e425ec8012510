"""Tax document use cases"""
from .create_tax_document import CreateTaxDocument
from .update_tax_document import UpdateTaxDocument
from .delete_tax_document import DeleteTaxDocument
from .send_tax_document import SendTaxDocument
from .get_tax_document import GetTaxDocument
from .list_tax_documents import ListTaxDocuments
from .generate_pdf import GenerateTaxDocumentPdf
from .preview_next_number import PreviewNextNumber
from .dtos import (
    TaxDocumentItemCommandDTO,
    CreateTaxDocumentCommandDTO,
    UpdateTaxDocumentCommandDTO,
    TaxDocumentItemResponseDTO,
    TaxDocumentResponseDTO,
    DeleteTaxDocumentResponseDTO,
    TaxDocumentStatsDTO,
    ListTaxDocumentsQueryDTO,
    ListTaxDocumentsResponseDTO,
    TaxDocumentPdfResponseDTO,
    NextNumberResponseDTO,
)

__all__ = [
    "CreateTaxDocument",
    "UpdateTaxDocument",
    "DeleteTaxDocument",
    "SendTaxDocument",
    "GetTaxDocument",
    "ListTaxDocuments",
    "GenerateTaxDocumentPdf",
    "PreviewNextNumber",
    "TaxDocumentItemCommandDTO",
    "CreateTaxDocumentCommandDTO",
    "UpdateTaxDocumentCommandDTO",
    "TaxDocumentItemResponseDTO",
    "TaxDocumentResponseDTO",
    "DeleteTaxDocumentResponseDTO",
    "TaxDocumentStatsDTO",
    "ListTaxDocumentsQueryDTO",
    "ListTaxDocumentsResponseDTO",
    "TaxDocumentPdfResponseDTO",
    "NextNumberResponseDTO",
]
