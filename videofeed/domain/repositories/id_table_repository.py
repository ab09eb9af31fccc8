from __future__ import annotations

import logging
from typing import List, Optional, Sequence
from uuid import UUID, uuid4

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError

from videofeed.domain.models.id_table import IDTableEntry
from shared.abstracts.abstract_repository import AbstractRepository

logger = logging.getLogger(__name__)


class IDTableRepository(AbstractRepository):
    """
    Stable (namespace, remote token) -> host ID map.

    Every lookup is scoped by namespace so several provider instances can
    share one table without seeing each other's rows.
    """

    # ---------- Lookups ----------

    async def lookup(self, namespace: str, host_id: UUID) -> Optional[IDTableEntry]:
        rows = await self.keys(namespace, host_id)
        return rows[0] if rows else None

    async def lookup_by_token(self, namespace: str, token: str, parent_id: UUID) -> Optional[UUID]:
        res = await self.db.execute(
            select(IDTableEntry.id).where(
                IDTableEntry.namespace == namespace,
                IDTableEntry.key == token,
                IDTableEntry.parent_id == parent_id,
            )
        )
        return res.scalars().first()

    async def keys(self, namespace: str, host_id: UUID) -> List[IDTableEntry]:
        res = await self.db.execute(
            select(IDTableEntry).where(IDTableEntry.namespace == namespace, IDTableEntry.id == host_id)
        )
        return list(res.scalars().all())

    # ---------- Mutations ----------

    async def create(self, namespace: str, token: str, parent_id: UUID, name: str) -> UUID:
        """
        Return the host ID for (namespace, token, parent_id), minting it on first sight.

        Compare-and-create: an existing row wins. If a concurrent creator commits
        the same key first, the unique constraint rejects our insert and we
        re-read theirs, so every caller ends up with the same host ID.
        """
        existing = await self.lookup_by_token(namespace, token, parent_id)
        if existing is not None:
            return existing

        self.db.add(IDTableEntry(id=uuid4(), namespace=namespace, key=token, parent_id=parent_id, name=name[:255]))
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.debug("Concurrent create for %s/%s under %s, re-reading", namespace, token, parent_id)

        host_id = await self.lookup_by_token(namespace, token, parent_id)
        if host_id is None:
            raise RuntimeError(f"id table row for {namespace}/{token} vanished after create")
        return host_id

    async def delete_by_parent(self, namespace: str, parent_id: UUID) -> int:
        res = await self.db.execute(
            delete(IDTableEntry).where(IDTableEntry.namespace == namespace, IDTableEntry.parent_id == parent_id)
        )
        await self.db.commit()
        return res.rowcount or 0

    # ---------- AbstractRepository ----------

    async def get(self, entity_id: UUID) -> Optional[IDTableEntry]:
        res = await self.db.execute(select(IDTableEntry).where(IDTableEntry.id == entity_id))
        return res.scalars().first()

    async def get_by_parent_id(self, id: UUID) -> Sequence[IDTableEntry]:
        res = await self.db.execute(
            select(IDTableEntry).where(IDTableEntry.parent_id == id).order_by(IDTableEntry.created_at)
        )
        return res.scalars().all()
