"""Unit of Work Interface

Transaction boundary for a use case. Repositories only flush; the use case
decides when the whole unit commits or rolls back.
"""

from abc import ABC, abstractmethod


class UnitOfWork(ABC):

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    @abstractmethod
    async def commit(self):
        """
        Commit every change made in this unit of work

        Raises:
            ConcurrencyError: Lock timeout, deadlock or serialization failure
            PersistenceError: Any other store failure
        """
        pass

    @abstractmethod
    async def rollback(self):
        """Discard every uncommitted change"""
        pass
