"""ListTaxDocuments Use Case

Paginated, filterable document list with status counters.
"""

from datetime import date
from typing import Callable, Optional
from libs.result import Result, Return
from src.app.repositories.tax_document_repository import DocumentFilters, TaxDocumentRepository
from .dtos import ListTaxDocumentsQueryDTO, ListTaxDocumentsResponseDTO, TaxDocumentStatsDTO
from .mappers import error_from_exception, to_response_dto


class ListTaxDocuments:
    """
    Use Case: List tax documents of a tenant

    Business Rules:
    1. Only the tenant's own documents are returned, newest first
    2. Filters: number/customer search, status, type, issue date range
    3. Stats count drafts, sent, accepted and overdue (accepted, unpaid, past due)
    """

    def __init__(
        self,
        document_repo: TaxDocumentRepository,
        today: Optional[Callable[[], date]] = None,
    ):
        self.document_repo = document_repo
        self.today = today or date.today

    async def execute(self, query: ListTaxDocumentsQueryDTO) -> Result[ListTaxDocumentsResponseDTO]:
        try:
            filters = DocumentFilters(
                search=query.search,
                status=query.status,
                document_type=query.document_type,
                from_date=query.from_date,
                to_date=query.to_date,
            )

            documents = await self.document_repo.list_by_tenant(
                query.tenant_id, filters=filters, limit=query.limit, offset=query.offset
            )
            total_count = await self.document_repo.count_by_tenant(query.tenant_id, filters=filters)
            stats = await self.document_repo.get_stats(query.tenant_id, self.today())

            return Return.ok(
                ListTaxDocumentsResponseDTO(
                    documents=[to_response_dto(document) for document in documents],
                    total_count=total_count,
                    limit=query.limit,
                    offset=query.offset,
                    stats=TaxDocumentStatsDTO(
                        total_draft=stats.total_draft,
                        total_sent=stats.total_sent,
                        total_accepted=stats.total_accepted,
                        total_overdue=stats.total_overdue,
                    ),
                )
            )

        except Exception as e:
            return Return.err(error_from_exception(e, "Failed to list tax documents"))
