# app/core/cache.py
from __future__ import annotations

from typing import Any, Optional
import json
import logging

import redis.asyncio as redis

from app.core.config import settings

logger = logging.getLogger(__name__)


class Cache:
    """
    Process-wide async Redis client backing the host item and data caches.

    Until `init()` has run every call is a no-op miss, so the tree keeps
    answering (uncached) when Redis is not configured.
    """

    def __init__(self) -> None:
        self._redis: Optional[redis.Redis] = None

    async def init(self) -> None:
        client = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
        )
        try:
            await client.ping()
        except redis.RedisError as e:
            logger.warning("Redis not reachable at %s, running without host cache: %s", settings.redis_url, e)
            await client.aclose()
            return
        self._redis = client

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

    async def get(self, key: str) -> Any | None:
        if self._redis is None:
            return None
        val = await self._redis.get(key)
        if val is None:
            return None
        try:
            return json.loads(val)
        except ValueError:
            return val

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if self._redis is None:
            return False
        payload = json.dumps(value, default=str)
        if ttl and ttl > 0:
            return await self._redis.set(key, payload, ex=ttl)
        return await self._redis.set(key, payload)

    async def delete(self, *keys: str) -> int:
        if self._redis is None or not keys:
            return 0
        return await self._redis.delete(*keys)


cache = Cache()
