"""ReportLab PDF Generation Service Implementation

Renders tax documents using ReportLab.
"""

from io import BytesIO
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService
from src.domain.tax_document import DocumentStatus, DocumentType, TaxDocument
from src.domain.tax_document_item import TaxDocumentItem

DOCUMENT_TITLES = {
    DocumentType.INVOICE: "INVOICE",
    DocumentType.RECEIPT: "RECEIPT",
    DocumentType.CREDIT_NOTE: "CREDIT NOTE",
    DocumentType.DEBIT_NOTE: "DEBIT NOTE",
}


def _money(amount) -> str:
    return f"{amount:,.2f}"


def _quantity(amount) -> str:
    return f"{amount:,.6f}".rstrip("0").rstrip(".")


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Layout: issuer header, document title and number, details table,
    line items, totals block. Drafts carry a "not valid as tax document" note.
    """

    def generate_tax_document(
        self,
        document: TaxDocument,
        items: List[TaxDocumentItem],
        company_name: str,
        company_address: str,
    ) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=document.number,
        )

        styles = getSampleStyleSheet()
        elements = []

        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=24,
            spaceAfter=10,
            textColor=colors.HexColor("#2C3E50"),
        )
        document_style = ParagraphStyle(
            "DocumentStyle",
            parent=styles["Heading2"],
            fontSize=14,
            textColor=colors.HexColor("#E74C3C"),
            spaceAfter=20,
        )
        header_style = ParagraphStyle(
            "HeaderStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.HexColor("#7F8C8D"),
        )

        elements.append(Paragraph(escape(company_name), title_style))
        elements.append(Paragraph(escape(company_address), header_style))
        elements.append(Spacer(1, 10 * mm))
        title = DOCUMENT_TITLES.get(document.document_type, "TAX DOCUMENT")
        elements.append(Paragraph(f"{title} {document.number}", document_style))

        details = [
            ["Number:", document.number],
            ["Status:", document.status.value.upper()],
            ["Customer:", str(document.customer_id)],
            ["Issue Date:", document.issue_date.strftime("%Y-%m-%d")],
            ["Due Date:", document.due_date.strftime("%Y-%m-%d")],
        ]
        if document.external_tracking_id:
            details.append(["Tracking Id:", document.external_tracking_id])

        details_table = Table(details, colWidths=[40 * mm, 100 * mm])
        details_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#7F8C8D")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(details_table)
        elements.append(Spacer(1, 10 * mm))

        line_data = [["Description", "Quantity", "Unit Price", "Total"]]
        for item in items:
            line_data.append(
                [
                    Paragraph(escape(item.description), styles["Normal"]),
                    _quantity(item.quantity),
                    _money(item.unit_price),
                    _money(item.line_total),
                ]
            )

        line_table = Table(line_data, colWidths=[80 * mm, 25 * mm, 30 * mm, 35 * mm])
        line_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, colors.HexColor("#F8F9F9")],
                    ),
                ]
            )
        )
        elements.append(line_table)
        elements.append(Spacer(1, 5 * mm))

        totals_data = [
            ["", "", "Subtotal:", _money(document.subtotal)],
            ["", "", "Tax:", _money(document.tax_amount)],
            ["", "", "Total:", _money(document.total)],
        ]
        totals_table = Table(totals_data, colWidths=[80 * mm, 25 * mm, 30 * mm, 35 * mm])
        totals_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (2, 0), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("FONTSIZE", (0, -1), (-1, -1), 11),
                    ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                    ("LINEABOVE", (2, -1), (-1, -1), 1.5, colors.HexColor("#2C3E50")),
                    ("TOPPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )
        elements.append(totals_table)

        if document.status == DocumentStatus.DRAFT:
            elements.append(Spacer(1, 15 * mm))
            elements.append(
                Paragraph(
                    "<i>Draft document. Not valid as a tax document until it has been sent.</i>",
                    ParagraphStyle(
                        "FooterNote",
                        parent=styles["Normal"],
                        fontSize=9,
                        textColor=colors.HexColor("#95A5A6"),
                    ),
                )
            )

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes
