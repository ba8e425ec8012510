"""Tax Document Item Domain Entity

Line item owned by exactly one TaxDocument.
"""

from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import BigInteger, ForeignKey, Integer, Numeric, String
from src.domain.base import BaseModel, IdType


class TaxDocumentItem(BaseModel, table=True):
    """
    TaxDocumentItem - Line of a tax document

    Domain Rules:
    - Belongs to exactly one document; deleted together with it
    - line_total = quantity * unit_price
    - position keeps the order in which items were submitted
    - Replaced as a whole set whenever the document is updated
    """

    __tablename__ = "tax_document_items"
    __table_args__ = (
        Index("ix_tax_document_items_document_id", "document_id"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    document_id: int = Field(
        sa_column=Column(
            BigInteger, ForeignKey("tax_documents.id", ondelete="CASCADE"), nullable=False
        ),
        description="Owning document"
    )

    product_id: int = Field(
        sa_column=Column(BigInteger, nullable=False),
        description="Referenced product (non-owning)"
    )

    position: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Zero-based insertion order"
    )

    description: str = Field(
        sa_column=Column(String(255), nullable=False),
        description="Item description, defaults to the product name"
    )

    quantity: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
    )

    line_total: Decimal = Field(
        sa_column=Column(Numeric(18, 6), nullable=False),
        description="quantity * unit_price"
    )
