from .tax_document_repository import (
    DocumentFilters,
    DocumentHeader,
    DocumentItemInput,
    DocumentStats,
    TaxDocumentRepository,
)
from .product_repository import ProductRepository

__all__ = [
    "DocumentFilters",
    "DocumentHeader",
    "DocumentItemInput",
    "DocumentStats",
    "TaxDocumentRepository",
    "ProductRepository",
]
