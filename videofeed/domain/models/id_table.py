from __future__ import annotations
from datetime import datetime
from uuid import uuid4, UUID

from sqlalchemy import DateTime, String, UniqueConstraint, Index, func
from sqlalchemy.dialects.postgresql import UUID as PGUUID
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database.base import Base


class IDTableEntry(Base):
    """
    Durable mapping of a remote feed token to the host ID minted for it.

    `id` is the host ID. A row is created the first time a token is seen under
    a folder and keeps the same `id` for the lifetime of the table.
    """

    __tablename__ = "id_table"
    __table_args__ = (
        UniqueConstraint("namespace", "key", "parent_id", name="uq_id_table_namespace_key_parent"),
        Index("ix_id_table_namespace_parent", "namespace", "parent_id"),
    )

    id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), primary_key=True, default=uuid4)
    namespace: Mapped[str] = mapped_column(String(255), nullable=False)
    key: Mapped[str] = mapped_column(String(512), nullable=False)
    parent_id: Mapped[UUID] = mapped_column(PGUUID(as_uuid=True), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
