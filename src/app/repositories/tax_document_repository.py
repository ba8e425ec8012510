"""Tax Document Repository Interface

Defines the contract for tax document persistence operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence
from src.domain.tax_document import DocumentStatus, DocumentType, TaxDocument
from src.domain.tax_document_item import TaxDocumentItem


@dataclass(frozen=True)
class DocumentHeader:
    """Header fields supplied on create/update. customer_id None keeps the current customer on update."""
    issue_date: date
    due_date: date
    customer_id: Optional[int] = None


@dataclass(frozen=True)
class DocumentItemInput:
    product_id: int
    quantity: Decimal
    unit_price: Decimal
    description: Optional[str] = None


@dataclass(frozen=True)
class DocumentFilters:
    search: Optional[str] = None
    status: Optional[DocumentStatus] = None
    document_type: Optional[DocumentType] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None


@dataclass(frozen=True)
class DocumentStats:
    total_draft: int = 0
    total_sent: int = 0
    total_accepted: int = 0
    total_overdue: int = 0


class TaxDocumentRepository(ABC):
    """
    Repository interface for TaxDocument persistence

    Every mutating method checks tenant ownership first (TenantMismatchError)
    and then the draft status (InvalidDocumentStatusError). Methods only
    flush; the caller's unit of work commits or rolls back the whole change.
    """

    @abstractmethod
    async def create(
        self,
        tenant_id: str,
        document_type: DocumentType,
        header: DocumentHeader,
        items: Sequence[DocumentItemInput],
    ) -> TaxDocument:
        """
        Create a draft document with its items

        Computes totals, allocates the number, inserts the header and then
        every item in submitted order.

        Args:
            tenant_id: Owning tenant
            document_type: Document type (selects numbering sequence)
            header: Customer and dates (customer_id required)
            items: Line items, at least one

        Returns:
            Created TaxDocument with generated ID and number

        Raises:
            InvalidLineItem: Invalid items or unknown product
            ConcurrencyError: Number allocation timed out
            PersistenceError: Store failure
        """
        pass

    @abstractmethod
    async def update(
        self,
        document: TaxDocument,
        tenant_id: str,
        header: DocumentHeader,
        items: Sequence[DocumentItemInput],
    ) -> TaxDocument:
        """
        Replace header fields and the full item set of a draft

        Args:
            document: Document loaded by the caller
            tenant_id: Requesting tenant
            header: New dates and optional customer
            items: New item set, replaces every existing item

        Returns:
            Updated TaxDocument
        """
        pass

    @abstractmethod
    async def delete(self, document: TaxDocument, tenant_id: str) -> None:
        """
        Delete a draft and all of its items

        Args:
            document: Document loaded by the caller
            tenant_id: Requesting tenant
        """
        pass

    @abstractmethod
    async def mark_sent(
        self, document: TaxDocument, tenant_id: str, tracking_id: Optional[str]
    ) -> TaxDocument:
        """
        Transition draft -> sent

        Args:
            document: Document loaded by the caller
            tenant_id: Requesting tenant
            tracking_id: Tracking id from the tax authority

        Returns:
            Updated TaxDocument
        """
        pass

    @abstractmethod
    async def get_by_id(self, document_id: int, for_update: bool = False) -> Optional[TaxDocument]:
        """
        Retrieve document by ID

        Args:
            document_id: Document ID
            for_update: Lock the row (SELECT FOR UPDATE) until the transaction ends

        Returns:
            TaxDocument if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_items(self, document_id: int) -> List[TaxDocumentItem]:
        """
        Items of a document in position order

        Args:
            document_id: Document ID

        Returns:
            List of TaxDocumentItem
        """
        pass

    @abstractmethod
    async def list_by_tenant(
        self,
        tenant_id: str,
        filters: Optional[DocumentFilters] = None,
        limit: int = 15,
        offset: int = 0,
    ) -> List[TaxDocument]:
        """
        Documents of a tenant, newest first

        Args:
            tenant_id: Tenant identifier
            filters: Optional search/status/type/date filters
            limit: Page size
            offset: Offset for pagination

        Returns:
            List of TaxDocument
        """
        pass

    @abstractmethod
    async def count_by_tenant(
        self, tenant_id: str, filters: Optional[DocumentFilters] = None
    ) -> int:
        """Number of documents matching the filters"""
        pass

    @abstractmethod
    async def get_stats(self, tenant_id: str, today: date) -> DocumentStats:
        """
        Status counters for a tenant

        Overdue = accepted, unpaid and due before ``today``.
        """
        pass
