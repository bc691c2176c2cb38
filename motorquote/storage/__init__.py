"""Persistence services — abstract key-value interface plus backends."""

from __future__ import annotations

from motorquote.config import settings
from motorquote.storage.base import InMemoryStore, PersistenceService
from motorquote.storage.redis_store import RedisStore, create_redis_client

__all__ = ["InMemoryStore", "PersistenceService", "RedisStore", "create_store"]


def create_store() -> PersistenceService:
    """Build the store configured by STORE_BACKEND."""
    if settings.store.store_backend == "redis":
        return RedisStore(create_redis_client(settings.store.redis_url))
    return InMemoryStore()
