import logging
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork
from src.domain.exceptions import ConcurrencyError, PersistenceError, TaxDocumentError

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, lock_not_available, query_canceled
RETRYABLE_SQLSTATES = {"40001", "40P01", "55P03", "57014"}


def is_retryable_db_error(exc: DBAPIError) -> bool:
    """True for lock timeouts, deadlocks and serialization failures"""
    orig = getattr(exc, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in RETRYABLE_SQLSTATES:
        return True
    return isinstance(exc, OperationalError) and "database is locked" in str(orig).lower()


def translate_db_error(exc: DBAPIError) -> TaxDocumentError:
    """Map a driver error to ConcurrencyError or PersistenceError"""
    if is_retryable_db_error(exc):
        return ConcurrencyError(
            "The document store is busy, retry the operation",
            reason=str(exc.orig),
        )
    return PersistenceError("Failed to persist tax document", reason=str(exc.orig))


class SqlAlchemyUnitOfWork(UnitOfWork):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        try:
            await self.session.commit()
        except DBAPIError as e:
            logger.warning(f"Commit failed: {e.orig}")
            await self.session.rollback()
            raise translate_db_error(e) from e

    async def rollback(self):
        await self.session.rollback()
