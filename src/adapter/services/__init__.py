from .unit_of_work import SqlAlchemyUnitOfWork
from .numbering_service import SqlAlchemyDocumentNumberingService
from .pdf_service import ReportLabPdfService
from .tax_authority_gateway import StubTaxAuthorityGateway

__all__ = [
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyDocumentNumberingService",
    "ReportLabPdfService",
    "StubTaxAuthorityGateway",
]
