"""Request schemas for Tax Document API

Pydantic models for validating incoming HTTP requests. The tenant comes from
the X-Tenant-ID header, not from the body.
"""

from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator
from src.domain.tax_document import DocumentType


class TaxDocumentItemRequestSchema(BaseModel):
    product_id: int = Field(
        ...,
        gt=0,
        description="Product identifier"
    )

    quantity: Decimal = Field(
        ...,
        gt=0,
        max_digits=9,
        decimal_places=4,
        description="Quantity (must be > 0, up to 5 integer digits and 4 decimals)"
    )

    unit_price: Decimal = Field(
        ...,
        ge=0,
        max_digits=11,
        decimal_places=2,
        description="Unit price (must be >= 0, up to 9 integer digits and 2 decimals)"
    )

    description: Optional[str] = Field(
        default=None,
        max_length=255,
        description="Item description; defaults to the product name"
    )


class _DocumentBodySchema(BaseModel):
    issue_date: date = Field(
        ...,
        description="Issue date"
    )

    due_date: date = Field(
        ...,
        description="Due date (on or after issue_date)"
    )

    items: List[TaxDocumentItemRequestSchema] = Field(
        ...,
        min_length=1,
        description="Line items, in display order (at least one)"
    )

    @model_validator(mode="after")
    def validate_dates(self):
        if self.due_date < self.issue_date:
            raise ValueError("due_date must be on or after issue_date")
        return self


class CreateTaxDocumentRequestSchema(_DocumentBodySchema):
    """
    Request schema for creating a tax document

    Used for POST /tax-documents endpoint.
    """

    customer_id: int = Field(
        ...,
        gt=0,
        description="Customer the document is issued to"
    )

    document_type: DocumentType = Field(
        ...,
        description="invoice, receipt, credit_note or debit_note"
    )

    class Config:
        json_schema_extra = {
            "example": {
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


class UpdateTaxDocumentRequestSchema(_DocumentBodySchema):
    """
    Request schema for updating a draft tax document

    Used for PUT /tax-documents/{document_id}. Items replace the current set.
    """

    customer_id: Optional[int] = Field(
        default=None,
        gt=0,
        description="New customer; keeps the current one when omitted"
    )

