"""Tax Authority Gateway Interface

Submission of finalized documents to the tax authority.
"""

from abc import ABC, abstractmethod
from src.domain.tax_document import TaxDocument


class TaxAuthorityGateway(ABC):

    @abstractmethod
    async def submit(self, document: TaxDocument) -> str:
        """
        Submit a document

        Args:
            document: Draft document being sent

        Returns:
            Tracking id assigned by the authority
        """
        pass
