"""Product Repository Interface"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable


class ProductRepository(ABC):

    @abstractmethod
    async def resolve_names(self, tenant_id: str, product_ids: Iterable[int]) -> Dict[int, str]:
        """
        Names of the tenant's products

        Args:
            tenant_id: Tenant identifier
            product_ids: Product IDs to resolve

        Returns:
            Mapping product_id -> name; unknown or foreign IDs are absent
        """
        pass
