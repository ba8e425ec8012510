from .tax_document_repository import SqlAlchemyTaxDocumentRepository
from .product_repository import SqlAlchemyProductRepository

__all__ = [
    "SqlAlchemyTaxDocumentRepository",
    "SqlAlchemyProductRepository",
]
