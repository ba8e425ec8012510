"""Data Transfer Objects for Tax Document Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field
from src.domain.tax_document import DocumentStatus, DocumentType


class TaxDocumentItemCommandDTO(BaseModel):
    """
    Line item supplied on create/update

    Quantity and price ranges are enforced by the use case, so that
    out-of-range values surface as VALIDATION_ERROR results.
    """

    product_id: int = Field(
        ...,
        description="Product identifier"
    )

    quantity: Decimal = Field(
        ...,
        description="Quantity (must be > 0)"
    )

    unit_price: Decimal = Field(
        ...,
        description="Unit price (must be >= 0)"
    )

    description: Optional[str] = Field(
        default=None,
        description="Item description; defaults to the product name"
    )


class CreateTaxDocumentCommandDTO(BaseModel):
    """
    Command DTO for creating a tax document

    Used as input to CreateTaxDocument use case.
    """

    tenant_id: str = Field(
        ...,
        description="Tenant identifier"
    )

    customer_id: int = Field(
        ...,
        description="Customer the document is issued to"
    )

    document_type: DocumentType = Field(
        ...,
        description="invoice, receipt, credit_note or debit_note"
    )

    issue_date: date = Field(
        ...,
        description="Issue date"
    )

    due_date: date = Field(
        ...,
        description="Due date (on or after issue_date)"
    )

    items: List[TaxDocumentItemCommandDTO] = Field(
        ...,
        description="Line items, in display order"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "tenant_id": "tenant_xyz789",
                "customer_id": 12,
                "document_type": "invoice",
                "issue_date": "2024-03-01",
                "due_date": "2024-03-31",
                "items": [
                    {"product_id": 7, "quantity": "2", "unit_price": "1000"},
                    {"product_id": 9, "quantity": "1", "unit_price": "500", "description": "Setup"}
                ]
            }
        }


class UpdateTaxDocumentCommandDTO(BaseModel):
    """
    Command DTO for updating a draft tax document

    The item list replaces every existing item.
    """

    document_id: int = Field(
        ...,
        description="Document to update"
    )

    tenant_id: str = Field(
        ...,
        description="Requesting tenant"
    )

    customer_id: Optional[int] = Field(
        default=None,
        description="New customer; keeps the current one when omitted"
    )

    issue_date: date = Field(
        ...,
        description="Issue date"
    )

    due_date: date = Field(
        ...,
        description="Due date (on or after issue_date)"
    )

    items: List[TaxDocumentItemCommandDTO] = Field(
        ...,
        description="Replacement item set"
    )


class TaxDocumentItemResponseDTO(BaseModel):
    """Line item of a tax document response"""

    item_id: int
    product_id: int
    position: int
    description: str
    quantity: Decimal
    unit_price: Decimal
    line_total: Decimal


class TaxDocumentResponseDTO(BaseModel):
    """
    Response DTO for a tax document

    Returned by create, update, send and get operations. ``items`` is
    empty in list responses.
    """

    document_id: int = Field(
        ...,
        description="Document ID"
    )

    tenant_id: str = Field(
        ...,
        description="Owning tenant"
    )

    customer_id: int = Field(
        ...,
        description="Customer ID"
    )

    document_type: DocumentType = Field(
        ...,
        description="Document type"
    )

    number: str = Field(
        ...,
        description="Sequential number, e.g. F-00000001"
    )

    status: DocumentStatus = Field(
        ...,
        description="Lifecycle status"
    )

    issue_date: date
    due_date: date

    subtotal: Decimal = Field(
        ...,
        description="Sum of line totals"
    )

    tax_amount: Decimal = Field(
        ...,
        description="Tax, rounded half-up to 2 decimals"
    )

    total: Decimal = Field(
        ...,
        description="subtotal + tax_amount"
    )

    paid_at: Optional[datetime] = None
    external_tracking_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    items: List[TaxDocumentItemResponseDTO] = Field(
        default_factory=list,
        description="Line items in position order"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "document_id": 1,
                "tenant_id": "tenant_xyz789",
                "customer_id": 12,
                "document_type": "invoice",
                "number": "F-00000001",
                "status": "draft",
                "issue_date": "2024-03-01",
                "due_date": "2024-03-31",
                "subtotal": "2500.000000",
                "tax_amount": "475.000000",
                "total": "2975.000000",
                "paid_at": None,
                "external_tracking_id": None,
                "created_at": "2024-03-01T10:00:00Z",
                "updated_at": "2024-03-01T10:00:00Z",
                "items": []
            }
        }


class DeleteTaxDocumentResponseDTO(BaseModel):
    document_id: int
    number: str
    deleted: bool = True


class TaxDocumentStatsDTO(BaseModel):
    """Status counters shown above the document list"""

    total_draft: int = 0
    total_sent: int = 0
    total_accepted: int = 0
    total_overdue: int = 0


class ListTaxDocumentsQueryDTO(BaseModel):
    """
    Query DTO for listing tax documents

    Used as input to ListTaxDocuments use case.
    """

    tenant_id: str
    search: Optional[str] = Field(
        default=None,
        description="Matches document number, or customer id when numeric"
    )
    status: Optional[DocumentStatus] = None
    document_type: Optional[DocumentType] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    limit: int = Field(default=15, ge=1, le=100)
    offset: int = Field(default=0, ge=0)


class ListTaxDocumentsResponseDTO(BaseModel):
    documents: List[TaxDocumentResponseDTO]
    total_count: int
    limit: int
    offset: int
    stats: TaxDocumentStatsDTO


class TaxDocumentPdfResponseDTO(BaseModel):
    """
    Response DTO for PDF export

    PDF bytes are base64 encoded so the DTO stays JSON serializable.
    """

    document_id: int
    number: str
    filename: str
    pdf_base64: str
    generated_at: datetime


class NextNumberResponseDTO(BaseModel):
    tenant_id: str
    document_type: DocumentType
    next_number: str
