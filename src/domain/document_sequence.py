"""Document Sequence Domain Entity

Counter row backing gap-free numbering per (tenant, document type).
"""

from datetime import datetime
from typing import Optional
from sqlmodel import Field, Column
from sqlalchemy import BigInteger, DateTime, String, UniqueConstraint
from src.domain.base import BaseModel, IdType


class DocumentSequence(BaseModel, table=True):
    """
    DocumentSequence - Last number allocated for a tenant and document type

    Domain Rules:
    - Exactly one row per (tenant_id, document_type)
    - current_value only ever grows, and only through an atomic increment
    - The increment commits or rolls back with the document that uses it
    """

    __tablename__ = "document_sequences"
    __table_args__ = (
        UniqueConstraint("tenant_id", "document_type", name="uq_document_sequences_tenant_type"),
    )

    id: Optional[int] = Field(
        default=None,
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
    )

    tenant_id: str = Field(
        sa_column=Column(String(64), nullable=False),
    )

    document_type: str = Field(
        sa_column=Column(String(20), nullable=False),
    )

    current_value: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0),
        description="Last allocated sequence value"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime, nullable=False),
    )
