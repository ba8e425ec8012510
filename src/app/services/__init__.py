from .unit_of_work import UnitOfWork
from .numbering_service import DocumentNumberingService
from .totals_calculator import DocumentTotals, DocumentTotalsCalculator
from .tax_authority_gateway import TaxAuthorityGateway
from .pdf_service import PdfService

__all__ = [
    "UnitOfWork",
    "DocumentNumberingService",
    "DocumentTotals",
    "DocumentTotalsCalculator",
    "TaxAuthorityGateway",
    "PdfService",
]
