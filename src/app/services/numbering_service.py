"""Document Numbering Service Interface

Defines the contract for allocating sequential tax document numbers.
"""

from abc import ABC, abstractmethod
from src.domain.tax_document import DocumentType


class DocumentNumberingService(ABC):
    """
    Allocates numbers of the form <prefix><8-digit sequence>

    Guarantees:
    - Unique and strictly increasing per (tenant_id, document_type)
    - Allocations for the same pair are serialized; different pairs never block each other
    - The allocation belongs to the caller's transaction: a rollback releases the number
    """

    @abstractmethod
    async def allocate(self, tenant_id: str, document_type: DocumentType) -> str:
        """
        Allocate the next number

        Args:
            tenant_id: Tenant identifier
            document_type: Document type (selects the prefix)

        Returns:
            Formatted number, e.g. "F-00000001"

        Raises:
            ConcurrencyError: Counter lock could not be acquired in time
        """
        pass

    @abstractmethod
    async def peek(self, tenant_id: str, document_type: DocumentType) -> str:
        """
        Number the next allocation would return, without consuming it

        Args:
            tenant_id: Tenant identifier
            document_type: Document type

        Returns:
            Formatted number
        """
        pass
