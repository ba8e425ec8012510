from .base import BaseModel
from .tax_document import (
    TaxDocument,
    DocumentType,
    DocumentStatus,
    format_document_number,
    number_prefix,
)
from .tax_document_item import TaxDocumentItem
from .document_sequence import DocumentSequence
from .product import Product

__all__ = [
    "BaseModel",
    "TaxDocument",
    "DocumentType",
    "DocumentStatus",
    "format_document_number",
    "number_prefix",
    "TaxDocumentItem",
    "DocumentSequence",
    "Product",
]
