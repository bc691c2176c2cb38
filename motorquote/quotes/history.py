"""Quote history — the most recent quotes, newest first, kept in the store."""

from __future__ import annotations

import logging

from pydantic import TypeAdapter, ValidationError

from motorquote.config import settings
from motorquote.schemas.quote import Quote, QuoteRequest
from motorquote.storage.base import PersistenceService

logger = logging.getLogger(__name__)

QUOTE_HISTORY_KEY = "motor_insurance_quote_history"


class QuoteHistoryEntry(Quote):
    """A stored quote together with the request that produced it."""

    request: QuoteRequest


_entries_adapter = TypeAdapter(list[QuoteHistoryEntry])


class QuoteHistory:
    """Bounded newest-first list of quotes in a PersistenceService."""

    def __init__(
        self,
        store: PersistenceService,
        key: str = QUOTE_HISTORY_KEY,
        limit: int | None = None,
    ) -> None:
        self._store = store
        self._key = key
        self._limit = settings.quote.quote_history_limit if limit is None else limit

    async def entries(self) -> list[QuoteHistoryEntry]:
        """All stored entries; unreadable history counts as empty."""
        try:
            raw = await self._store.get(self._key)
        except Exception:
            logger.exception("Error loading quote history")
            return []
        if not raw:
            return []
        try:
            return _entries_adapter.validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable quote history under %s", self._key)
            return []

    async def record(self, quote: Quote, request: QuoteRequest) -> None:
        """Prepend a quote, trimming to the configured limit.

        Storage failures are logged and swallowed; losing history never
        fails the quote itself.
        """
        entries = await self.entries()
        entries.insert(0, QuoteHistoryEntry(**quote.model_dump(), request=request))
        del entries[self._limit:]
        try:
            await self._store.set(self._key, _entries_adapter.dump_json(entries).decode())
        except Exception:
            logger.exception("Error saving quote %s to history", quote.quote_id)

    async def find(self, quote_id: str) -> QuoteHistoryEntry | None:
        for entry in await self.entries():
            if entry.quote_id == quote_id:
                return entry
        return None
