from __future__ import annotations
from typing import Any
from uuid import UUID

from hosttree.ports.outbound.host_cache_port import HostCachePort, descriptor_key, child_info_key
from app.core.cache import cache  # <- shared singleton managed in app lifespan


class RedisHostCacheAdapter(HostCachePort):
    """
    Host item cache (descriptors) and data cache (child lists) on the shared
    Redis client from app.core.cache.
    """

    async def get(self, key: str) -> Any | None:
        return await cache.get(key)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        await cache.set(key, value, ttl)

    async def evict_descriptor(self, item_id: UUID) -> None:
        await cache.delete(descriptor_key(item_id))

    async def evict_child_info(self, item_id: UUID) -> None:
        await cache.delete(child_info_key(item_id))
