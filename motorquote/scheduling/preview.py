"""Live recalculation call sites built on DebounceScheduler.

Two independent debouncers with their own windows:
- LivePreview: quick preview card, PREVIEW_CARD_DEBOUNCE_MS (500 ms)
- LiveQuote: debounced full quote, FULL_QUOTE_DEBOUNCE_MS (800 ms)

Both take the raw form field map on every change and keep only the result
of the most recent change.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from motorquote.config import settings
from motorquote.forms.fields import to_quote_request
from motorquote.pricing.calculator import InvalidInputError
from motorquote.quotes.service import IncompleteRequestError, QuoteService
from motorquote.scheduling.debounce import DebounceScheduler
from motorquote.schemas.quote import PremiumBreakdown, Quote, QuoteRequest

logger = logging.getLogger(__name__)


class LivePreview:
    """Quick preview card state, refreshed after the user stops typing."""

    def __init__(self, service: QuoteService, delay_ms: int | None = None) -> None:
        self._service = service
        self.breakdown: PremiumBreakdown | None = None
        self.is_loading = False
        self.scheduler = DebounceScheduler(
            settings.preview.preview_card_debounce_ms if delay_ms is None else delay_ms,
            name="preview_card",
            on_result=self._apply,
        )

    def on_change(self, data: Mapping[str, Any]) -> int:
        """Schedule a recalculation for the current field map."""
        self.is_loading = True
        return self.scheduler.schedule(self._preview, to_quote_request(data))

    def close(self) -> None:
        self.scheduler.close()
        self.is_loading = False

    def _preview(self, request: QuoteRequest) -> PremiumBreakdown | None:
        try:
            return self._service.generate_quick_preview(request)
        except InvalidInputError as exc:
            # Half-typed values (0, a future year) are expected while editing
            logger.debug("Preview skipped: %s", exc)
            return None

    def _apply(self, result: PremiumBreakdown | None) -> None:
        self.is_loading = False
        if result is not None:
            self.breakdown = result


class LiveQuote:
    """Full quote recomputed once the field map is complete and stable."""

    def __init__(self, service: QuoteService, delay_ms: int | None = None) -> None:
        self._service = service
        self.quote: Quote | None = None
        self.scheduler = DebounceScheduler(
            settings.preview.full_quote_debounce_ms if delay_ms is None else delay_ms,
            name="full_quote",
            on_result=self._apply,
        )

    def on_change(self, data: Mapping[str, Any]) -> int:
        return self.scheduler.schedule(self._quote, to_quote_request(data))

    def close(self) -> None:
        self.scheduler.close()

    async def _quote(self, request: QuoteRequest) -> Quote | None:
        try:
            return await self._service.generate_full_quote(request)
        except (IncompleteRequestError, InvalidInputError) as exc:
            logger.debug("Full quote skipped: %s", exc)
            return None

    def _apply(self, result: Quote | None) -> None:
        if result is not None:
            self.quote = result
