"""Tests for persistence services and the histories built on them.

Covers:
- InMemoryStore get/set/remove and protocol conformance
- RedisStore key prefixing, ping and close (redis client mocked)
- create_store backend selection
- QuoteHistory: newest first, bounded, lookup, tolerant of bad data and store errors
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from motorquote.models.enums import CoverageTier, UsageClass
from motorquote.quotes.history import QUOTE_HISTORY_KEY, QuoteHistory
from motorquote.schemas.quote import Quote, QuoteRequest
from motorquote.storage import InMemoryStore, PersistenceService, RedisStore, create_store

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def _quote(quote_id: str) -> Quote:
    return Quote(
        quote_id=quote_id,
        coverage_tier=CoverageTier.STANDARD,
        coverage_details=["Comprehensive coverage for your Toyota Hilux (2020)"],
        created_at=NOW,
        valid_until=NOW + timedelta(days=30),
        base_premium_annual=Decimal("2100.00"),
        vat_annual=Decimal("336.00"),
        total_premium_annual=Decimal("2436.00"),
        quarterly_premium=Decimal("609.00"),
    )


_REQUEST = QuoteRequest(
    vehicle_value=Decimal("50000"),
    vehicle_year=2020,
    usage=UsageClass.PERSONAL,
    coverage_tier=CoverageTier.STANDARD,
    vehicle_make="Toyota",
    vehicle_model="Hilux",
)


class _BrokenStore:
    async def get(self, key: str) -> str | None:
        raise ConnectionError("store down")

    async def set(self, key: str, value: str) -> None:
        raise ConnectionError("store down")

    async def remove(self, key: str) -> None:
        raise ConnectionError("store down")


class TestInMemoryStore:
    @pytest.mark.asyncio
    async def test_roundtrip_and_remove(self):
        store = InMemoryStore()
        assert await store.get("k") is None
        await store.set("k", "v")
        assert await store.get("k") == "v"
        assert "k" in store
        await store.remove("k")
        assert await store.get("k") is None
        assert len(store) == 0

    @pytest.mark.asyncio
    async def test_remove_missing_key_is_noop(self):
        store = InMemoryStore({"a": "1"})
        await store.remove("missing")
        assert len(store) == 1

    def test_satisfies_protocol(self):
        assert isinstance(InMemoryStore(), PersistenceService)


class TestRedisStore:
    @pytest.mark.asyncio
    async def test_prefixes_keys(self):
        client = MagicMock()
        client.get = AsyncMock(return_value="payload")
        client.set = AsyncMock()
        client.delete = AsyncMock()
        store = RedisStore(client, prefix="mq:")

        assert await store.get("form") == "payload"
        await store.set("form", "x")
        await store.remove("form")

        client.get.assert_awaited_once_with("mq:form")
        client.set.assert_awaited_once_with("mq:form", "x")
        client.delete.assert_awaited_once_with("mq:form")

    @pytest.mark.asyncio
    async def test_ping_failure_returns_false(self):
        client = MagicMock()
        client.ping = AsyncMock(side_effect=ConnectionError("refused"))
        assert await RedisStore(client).ping() is False

    @pytest.mark.asyncio
    async def test_close(self):
        client = MagicMock()
        client.aclose = AsyncMock()
        await RedisStore(client).close()
        client.aclose.assert_awaited_once()

    def test_satisfies_protocol(self):
        assert isinstance(RedisStore(MagicMock()), PersistenceService)


class TestCreateStore:
    def test_memory_backend(self):
        with patch("motorquote.storage.settings") as mock_settings:
            mock_settings.store.store_backend = "memory"
            assert isinstance(create_store(), InMemoryStore)

    def test_redis_backend(self):
        with (
            patch("motorquote.storage.settings") as mock_settings,
            patch("motorquote.storage.create_redis_client") as mock_client,
        ):
            mock_settings.store.store_backend = "redis"
            mock_settings.store.redis_url = "redis://cache:6379/1"
            store = create_store()
        assert isinstance(store, RedisStore)
        mock_client.assert_called_once_with("redis://cache:6379/1")


class TestQuoteHistory:
    @pytest.mark.asyncio
    async def test_newest_first(self):
        history = QuoteHistory(InMemoryStore())
        await history.record(_quote("a"), _REQUEST)
        await history.record(_quote("b"), _REQUEST)
        assert [e.quote_id for e in await history.entries()] == ["b", "a"]

    @pytest.mark.asyncio
    async def test_bounded_to_limit(self):
        history = QuoteHistory(InMemoryStore(), limit=10)
        for i in range(12):
            await history.record(_quote(f"q{i}"), _REQUEST)
        entries = await history.entries()
        assert len(entries) == 10
        assert entries[0].quote_id == "q11"
        assert entries[-1].quote_id == "q2"

    @pytest.mark.asyncio
    async def test_find_keeps_request(self):
        store = InMemoryStore()
        history = QuoteHistory(store)
        await history.record(_quote("abc"), _REQUEST)

        entry = await history.find("abc")
        assert entry is not None
        assert entry.request.vehicle_model == "Hilux"
        assert entry.total_premium_annual == Decimal("2436.00")
        assert await history.find("nope") is None
        assert QUOTE_HISTORY_KEY in store

    @pytest.mark.asyncio
    async def test_unreadable_history_is_empty(self):
        history = QuoteHistory(InMemoryStore({QUOTE_HISTORY_KEY: "{not json"}))
        assert await history.entries() == []

    @pytest.mark.asyncio
    async def test_store_errors_are_swallowed(self):
        history = QuoteHistory(_BrokenStore())
        await history.record(_quote("x"), _REQUEST)
        assert await history.entries() == []
