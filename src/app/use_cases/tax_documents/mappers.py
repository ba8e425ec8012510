"""Shared conversions for tax document use cases"""

from typing import List, Optional, Sequence
from libs.result import Error
from src.app.repositories.tax_document_repository import DocumentHeader, DocumentItemInput
from src.domain.exceptions import TaxDocumentError
from src.domain.tax_document import TaxDocument
from src.domain.tax_document_item import TaxDocumentItem
from .dtos import (
    TaxDocumentItemCommandDTO,
    TaxDocumentItemResponseDTO,
    TaxDocumentResponseDTO,
)

DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
FORBIDDEN = "FORBIDDEN"
INVALID_DOCUMENT_STATUS = "INVALID_DOCUMENT_STATUS"
VALIDATION_ERROR = "VALIDATION_ERROR"
PERSISTENCE_ERROR = "PERSISTENCE_ERROR"


def not_found_error(document_id: int) -> Error:
    return Error(
        code=DOCUMENT_NOT_FOUND,
        message=f"Tax document with ID {document_id} not found",
        reason="Document does not exist",
    )


def forbidden_error(document_id: int) -> Error:
    return Error(
        code=FORBIDDEN,
        message="You do not have access to this document",
        reason=f"document {document_id} belongs to another tenant",
    )


def invalid_status_error(document: TaxDocument, action: str) -> Error:
    return Error(
        code=INVALID_DOCUMENT_STATUS,
        message=f"Only draft documents can be {action}. Current status: {document.status.value}",
        reason=f"document {document.id} is {document.status.value}",
    )


def error_from_exception(e: Exception, fallback_message: str) -> Error:
    """Typed domain errors keep their code; anything else is a persistence failure"""
    if isinstance(e, TaxDocumentError):
        return Error(code=e.code, message=e.message, reason=e.reason)
    return Error(code=PERSISTENCE_ERROR, message=fallback_message, reason=str(e))


def date_range_error(issue_date, due_date) -> Optional[Error]:
    if due_date < issue_date:
        return Error(
            code=VALIDATION_ERROR,
            message="due_date must be on or after issue_date",
            reason=f"issue_date={issue_date}, due_date={due_date}",
        )
    return None


def to_header(issue_date, due_date, customer_id=None) -> DocumentHeader:
    return DocumentHeader(issue_date=issue_date, due_date=due_date, customer_id=customer_id)


def to_item_inputs(items: Sequence[TaxDocumentItemCommandDTO]) -> List[DocumentItemInput]:
    return [
        DocumentItemInput(
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            description=item.description,
        )
        for item in items
    ]


def to_response_dto(
    document: TaxDocument, items: Sequence[TaxDocumentItem] = ()
) -> TaxDocumentResponseDTO:
    return TaxDocumentResponseDTO(
        document_id=document.id,
        tenant_id=document.tenant_id,
        customer_id=document.customer_id,
        document_type=document.document_type,
        number=document.number,
        status=document.status,
        issue_date=document.issue_date,
        due_date=document.due_date,
        subtotal=document.subtotal,
        tax_amount=document.tax_amount,
        total=document.total,
        paid_at=document.paid_at,
        external_tracking_id=document.external_tracking_id,
        created_at=document.created_at,
        updated_at=document.updated_at,
        items=[
            TaxDocumentItemResponseDTO(
                item_id=item.id,
                product_id=item.product_id,
                position=item.position,
                description=item.description,
                quantity=item.quantity,
                unit_price=item.unit_price,
                line_total=item.line_total,
            )
            for item in items
        ],
    )
