"""Product Domain Entity

Catalog entry referenced by tax document items. Read-only for this service.
"""

from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import Numeric, String
from src.domain.base import BaseModel, IdType


class Product(BaseModel, table=True):
    __tablename__ = "products"
    __table_args__ = (
        Index("ix_products_tenant_id", "tenant_id"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    tenant_id: str = Field(
        description="Owning tenant"
    )

    name: str = Field(
        sa_column=Column(String(255), nullable=False),
    )

    sku: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True),
    )

    sale_price: Decimal = Field(
        default=Decimal("0"),
        sa_column=Column(Numeric(18, 6), nullable=False),
    )
