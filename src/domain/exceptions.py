"""Tax Document Domain Exceptions

Raised by calculators, repositories and adapters. Use cases translate them
into ``Error`` results using the ``code`` attribute.
"""

from typing import Optional


class TaxDocumentError(Exception):
    """Base class for tax document failures"""

    code = "TAX_DOCUMENT_ERROR"

    def __init__(self, message: str, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.reason = reason


class DocumentValidationError(TaxDocumentError):
    """Malformed or out-of-range input, detected before anything is written"""

    code = "VALIDATION_ERROR"


class InvalidLineItem(DocumentValidationError):
    """Empty item list, non-positive quantity, negative or non-finite price, unknown product"""


class TenantMismatchError(TaxDocumentError):
    """Document belongs to another tenant. Reported as forbidden, never as not-found."""

    code = "FORBIDDEN"


class InvalidDocumentStatusError(TaxDocumentError):
    """Mutation attempted on a document that is no longer a draft"""

    code = "INVALID_DOCUMENT_STATUS"


class ConcurrencyError(TaxDocumentError):
    """Lock timeout, deadlock or serialization failure. Safe to retry."""

    code = "CONCURRENCY_ERROR"


class PersistenceError(TaxDocumentError):
    """Any other store failure. The unit of work has been rolled back."""

    code = "PERSISTENCE_ERROR"


class SequenceExhaustedError(TaxDocumentError):
    """Sequence would need more than eight digits"""

    code = "SEQUENCE_EXHAUSTED"
