"""Tax Document API Routes

FastAPI routes for creating, editing, sending and exporting tax documents.
Every route is scoped to the tenant named in the X-Tenant-ID header.
"""

import base64
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Header, Query, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.error import ClientError
from src.api.schemas.tax_document_request import (
    CreateTaxDocumentRequestSchema,
    UpdateTaxDocumentRequestSchema,
)
from src.app.services.totals_calculator import DocumentTotalsCalculator
from src.app.use_cases.tax_documents import (
    CreateTaxDocument,
    CreateTaxDocumentCommandDTO,
    DeleteTaxDocument,
    DeleteTaxDocumentResponseDTO,
    GenerateTaxDocumentPdf,
    GetTaxDocument,
    ListTaxDocuments,
    ListTaxDocumentsQueryDTO,
    ListTaxDocumentsResponseDTO,
    NextNumberResponseDTO,
    PreviewNextNumber,
    SendTaxDocument,
    TaxDocumentItemCommandDTO,
    TaxDocumentResponseDTO,
    UpdateTaxDocument,
    UpdateTaxDocumentCommandDTO,
)
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.repositories.tax_document_repository import SqlAlchemyTaxDocumentRepository
from src.adapter.services.numbering_service import SqlAlchemyDocumentNumberingService
from src.adapter.services.pdf_service import ReportLabPdfService
from src.adapter.services.tax_authority_gateway import StubTaxAuthorityGateway
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session, get_totals_calculator
from src.domain.tax_document import DocumentStatus, DocumentType

router = APIRouter(prefix="/tax-documents", tags=["Tax Documents"])


def _error_response(code: str, message: str, description: str) -> dict:
    return {
        "description": description,
        "content": {"application/json": {"example": {"error": {"code": code, "message": message}}}},
    }


NOT_FOUND_RESPONSE = _error_response(
    "DOCUMENT_NOT_FOUND", "Tax document with ID 123 not found", "Document not found"
)
FORBIDDEN_RESPONSE = _error_response(
    "FORBIDDEN", "You do not have access to this document", "Document belongs to another tenant"
)
CONFLICT_RESPONSE = _error_response(
    "INVALID_DOCUMENT_STATUS",
    "Only draft documents can be edited. Current status: sent",
    "Document is no longer a draft",
)
VALIDATION_RESPONSE = _error_response(
    "VALIDATION_ERROR", "Item 0: quantity must be greater than 0", "Validation error"
)
BUSY_RESPONSE = _error_response(
    "CONCURRENCY_ERROR", "The document store is busy, retry the operation", "Lock wait exceeded"
)


async def get_tenant_id(x_tenant_id: str = Header(..., min_length=1)) -> str:
    return x_tenant_id


def _document_repository(
    session: AsyncSession, calculator: DocumentTotalsCalculator
) -> SqlAlchemyTaxDocumentRepository:
    return SqlAlchemyTaxDocumentRepository(
        session,
        numbering_service=SqlAlchemyDocumentNumberingService(session),
        product_repo=SqlAlchemyProductRepository(session),
        calculator=calculator,
    )


def _raise_for(result) -> None:
    if result.is_err():
        raise ClientError.from_error(result.error)


@router.post(
    "",
    response_model=TaxDocumentResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={400: VALIDATION_RESPONSE, 503: BUSY_RESPONSE},
)
async def create_tax_document(
    request: CreateTaxDocumentRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session),
    calculator: DocumentTotalsCalculator = Depends(get_totals_calculator),
):
    """
    Create a draft tax document.

    The document gets the next number for the tenant and document type
    (F-, B-, NC- or ND- followed by eight digits). Header, items and the
    number are committed together; on failure nothing is stored and the
    number is not consumed.

    **Returns:**
    - 201: Document created
    - 400: Validation error (dates, items, unknown product)
    - 503: Lock wait exceeded, retry
    """
    command = CreateTaxDocumentCommandDTO(
        tenant_id=tenant_id,
        customer_id=request.customer_id,
        document_type=request.document_type,
        issue_date=request.issue_date,
        due_date=request.due_date,
        items=[TaxDocumentItemCommandDTO(**item.model_dump()) for item in request.items],
    )

    use_case = CreateTaxDocument(
        SqlAlchemyUnitOfWork(session), _document_repository(session, calculator), calculator
    )
    result = await use_case.execute(command)
    _raise_for(result)

    return result.value


@router.get(
    "",
    response_model=ListTaxDocumentsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_tax_documents(
    search: Optional[str] = Query(default=None, description="Number or customer id"),
    document_status: Optional[DocumentStatus] = Query(default=None, alias="status"),
    document_type: Optional[DocumentType] = Query(default=None),
    from_date: Optional[date] = Query(default=None),
    to_date: Optional[date] = Query(default=None),
    limit: int = Query(default=15, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session),
    calculator: DocumentTotalsCalculator = Depends(get_totals_calculator),
):
    """
    List the tenant's tax documents, newest first, with status counters.
    """
    query = ListTaxDocumentsQueryDTO(
        tenant_id=tenant_id,
        search=search,
        status=document_status,
        document_type=document_type,
        from_date=from_date,
        to_date=to_date,
        limit=limit,
        offset=offset,
    )

    result = await ListTaxDocuments(_document_repository(session, calculator)).execute(query)
    _raise_for(result)

    return result.value


@router.get(
    "/next-number",
    response_model=NextNumberResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def preview_next_number(
    document_type: DocumentType = Query(...),
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session),
):
    """
    Preview the number the next document of this type would receive.

    Nothing is reserved; the actual number is assigned on create.
    """
    use_case = PreviewNextNumber(SqlAlchemyDocumentNumberingService(session))
    result = await use_case.execute(tenant_id, document_type)
    _raise_for(result)

    return result.value


@router.get(
    "/{document_id}",
    response_model=TaxDocumentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={403: FORBIDDEN_RESPONSE, 404: NOT_FOUND_RESPONSE},
)
async def get_tax_document(
    document_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session),
    calculator: DocumentTotalsCalculator = Depends(get_totals_calculator),
):
    result = await GetTaxDocument(_document_repository(session, calculator)).execute(
        document_id, tenant_id
    )
    _raise_for(result)

    return result.value


@router.put(
    "/{document_id}",
    response_model=TaxDocumentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        400: VALIDATION_RESPONSE,
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
        409: CONFLICT_RESPONSE,
        503: BUSY_RESPONSE,
    },
)
async def update_tax_document(
    document_id: int,
    request: UpdateTaxDocumentRequestSchema,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session),
    calculator: DocumentTotalsCalculator = Depends(get_totals_calculator),
):
    """
    Replace header fields and items of a draft document.

    Totals are recomputed from the submitted items. Documents that have
    left draft status are rejected with 409 and stay unchanged.
    """
    command = UpdateTaxDocumentCommandDTO(
        document_id=document_id,
        tenant_id=tenant_id,
        customer_id=request.customer_id,
        issue_date=request.issue_date,
        due_date=request.due_date,
        items=[TaxDocumentItemCommandDTO(**item.model_dump()) for item in request.items],
    )

    use_case = UpdateTaxDocument(
        SqlAlchemyUnitOfWork(session), _document_repository(session, calculator), calculator
    )
    result = await use_case.execute(command)
    _raise_for(result)

    return result.value


@router.delete(
    "/{document_id}",
    response_model=DeleteTaxDocumentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={403: FORBIDDEN_RESPONSE, 404: NOT_FOUND_RESPONSE, 409: CONFLICT_RESPONSE},
)
async def delete_tax_document(
    document_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session),
    calculator: DocumentTotalsCalculator = Depends(get_totals_calculator),
):
    """
    Delete a draft document and its items.
    """
    use_case = DeleteTaxDocument(
        SqlAlchemyUnitOfWork(session), _document_repository(session, calculator)
    )
    result = await use_case.execute(document_id, tenant_id)
    _raise_for(result)

    return result.value


@router.post(
    "/{document_id}/send",
    response_model=TaxDocumentResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={403: FORBIDDEN_RESPONSE, 404: NOT_FOUND_RESPONSE, 409: CONFLICT_RESPONSE},
)
async def send_tax_document(
    document_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session),
    calculator: DocumentTotalsCalculator = Depends(get_totals_calculator),
):
    """
    Submit a draft to the tax authority and mark it as sent.

    The tracking id returned by the authority is stored on the document.
    A sent document can no longer be edited or deleted.
    """
    use_case = SendTaxDocument(
        SqlAlchemyUnitOfWork(session),
        _document_repository(session, calculator),
        StubTaxAuthorityGateway(),
    )
    result = await use_case.execute(document_id, tenant_id)
    _raise_for(result)

    return result.value


@router.get(
    "/{document_id}/pdf",
    responses={
        200: {"content": {"application/pdf": {}}, "description": "PDF document"},
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
)
async def download_tax_document_pdf(
    document_id: int,
    tenant_id: str = Depends(get_tenant_id),
    session: AsyncSession = Depends(get_session),
    calculator: DocumentTotalsCalculator = Depends(get_totals_calculator),
):
    """
    Download a tax document as PDF file.
    """
    use_case = GenerateTaxDocumentPdf(
        _document_repository(session, calculator),
        ReportLabPdfService(),
        company_name=ApplicationConfig.COMPANY_NAME,
        company_address=ApplicationConfig.COMPANY_ADDRESS,
    )
    result = await use_case.execute(document_id, tenant_id)
    _raise_for(result)

    pdf_bytes = base64.b64decode(result.value.pdf_base64)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={result.value.filename}"},
    )
