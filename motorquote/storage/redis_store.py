"""Redis-backed persistence service.

Uses redis-py's asyncio client with decoded (str) responses.

Usage:
    from motorquote.storage.redis_store import RedisStore, create_redis_client

    store = RedisStore(create_redis_client(settings.store.redis_url))
"""

from __future__ import annotations

import logging

import redis.asyncio as aioredis

logger = logging.getLogger(__name__)


def create_redis_client(url: str) -> aioredis.Redis:
    """Build an asyncio Redis client returning str values."""
    return aioredis.from_url(url, decode_responses=True)


class RedisStore:
    """PersistenceService over GET / SET / DEL, with an optional key prefix."""

    def __init__(self, redis: aioredis.Redis, prefix: str = "motorquote:") -> None:
        self._redis = redis
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> str | None:
        return await self._redis.get(self._key(key))

    async def set(self, key: str, value: str) -> None:
        await self._redis.set(self._key(key), value)

    async def remove(self, key: str) -> None:
        await self._redis.delete(self._key(key))

    async def ping(self) -> bool:
        """Connectivity check for the health endpoint."""
        try:
            return bool(await self._redis.ping())
        except Exception:
            logger.warning("Redis ping failed", exc_info=True)
            return False

    async def close(self) -> None:
        await self._redis.aclose()
