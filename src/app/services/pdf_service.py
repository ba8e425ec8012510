"""PDF Generation Service Interface

Defines the contract for rendering tax documents as PDF.
"""

import re
from abc import ABC, abstractmethod
from typing import List
from src.domain.tax_document import TaxDocument
from src.domain.tax_document_item import TaxDocumentItem


class PdfService(ABC):
    """
    Service interface for PDF generation

    Provides PDF export for tax documents.
    """

    @abstractmethod
    def generate_tax_document(
        self,
        document: TaxDocument,
        items: List[TaxDocumentItem],
        company_name: str,
        company_address: str,
    ) -> bytes:
        """
        Render a tax document PDF

        Args:
            document: Tax document header with totals
            items: Line items in position order
            company_name: Issuer name printed in the header
            company_address: Issuer address printed in the header

        Returns:
            PDF document as bytes
        """
        pass

    @staticmethod
    def build_filename(document: TaxDocument, customer_label: str = "") -> str:
        """Download filename; anything outside [A-Za-z0-9_-] becomes "_"."""
        stem = document.number if not customer_label else f"{document.number}_{customer_label}"
        return re.sub(r"[^A-Za-z0-9_\-]", "_", stem) + ".pdf"
