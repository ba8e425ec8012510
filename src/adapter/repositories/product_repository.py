"""SQLAlchemy Product Repository Implementation"""

from typing import Dict, Iterable
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.product_repository import ProductRepository
from src.domain.product import Product


class SqlAlchemyProductRepository(ProductRepository):

    def __init__(self, session: AsyncSession):
        self.session = session

    async def resolve_names(self, tenant_id: str, product_ids: Iterable[int]) -> Dict[int, str]:
        ids = list(set(product_ids))
        if not ids:
            return {}

        statement = (
            select(Product.id, Product.name)
            .where(Product.tenant_id == tenant_id)
            .where(Product.id.in_(ids))
        )
        result = await self.session.execute(statement)
        return {product_id: name for product_id, name in result.all()}
