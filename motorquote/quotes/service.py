"""Quote service — the two call sites of the premium calculator.

- generate_full_quote: complete request → Quote (id, narrative, 30-day validity)
- generate_quick_preview: partial request → PremiumBreakdown, or None while
  the user has not yet entered enough data

Both use PRIMARY_RATE_POLICY and the calculator's rounding, so the live
preview and the final quote always agree.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Protocol

from motorquote.config import settings
from motorquote.events.bus import emit
from motorquote.formatters import format_currency
from motorquote.models.enums import UsageClass
from motorquote.pricing.calculator import compute_premium
from motorquote.pricing.rates import PRIMARY_RATE_POLICY
from motorquote.quotes.coverage import coverage_narrative
from motorquote.schemas.events import EventType, SystemEvent
from motorquote.schemas.quote import PremiumBreakdown, Quote, QuoteRequest

logger = logging.getLogger(__name__)

FULL_QUOTE_FIELDS: tuple[str, ...] = (
    "vehicle_make",
    "vehicle_model",
    "vehicle_year",
    "vehicle_value",
    "usage",
    "coverage_tier",
)
PREVIEW_FIELDS: tuple[str, ...] = ("vehicle_value", "coverage_tier")


class IncompleteRequestError(ValueError):
    """Raised when a full quote is requested without every required field."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Quote request is missing required fields: {', '.join(missing)}")


class IdGenerator(Protocol):
    """Source of opaque quote identifiers."""

    def new_id(self) -> str: ...


class UuidGenerator:
    """Random UUID4 identifiers (122 random bits)."""

    def new_id(self) -> str:
        return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuoteService:
    """Produces full quotes and quick previews."""

    def __init__(
        self,
        id_generator: IdGenerator | None = None,
        latency_seconds: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._ids = id_generator or UuidGenerator()
        self._latency = settings.quote.quote_latency_seconds if latency_seconds is None else latency_seconds
        self._clock = clock or _utcnow
        self._validity = timedelta(days=settings.quote.quote_validity_days)

    async def generate_full_quote(self, request: QuoteRequest) -> Quote:
        """Price a complete request and wrap it as a Quote.

        The simulated network delay is shielded: once started, the quote
        resolves even if the caller is cancelled, and the caller simply
        never sees the result.

        Raises:
            IncompleteRequestError: any of FULL_QUOTE_FIELDS is absent.
            InvalidInputError: value or year rejected by the calculator.
        """
        missing = request.missing_fields(FULL_QUOTE_FIELDS)
        if missing:
            raise IncompleteRequestError(missing)

        return await asyncio.shield(self._resolve_full_quote(request))

    async def _resolve_full_quote(self, request: QuoteRequest) -> Quote:
        assert request.vehicle_value is not None
        assert request.vehicle_year is not None
        assert request.usage is not None
        assert request.coverage_tier is not None

        now = self._clock()
        breakdown = compute_premium(
            request.vehicle_value,
            request.vehicle_year,
            request.usage,
            request.coverage_tier,
            policy=PRIMARY_RATE_POLICY,
            current_year=now.year,
        )

        if self._latency > 0:
            await asyncio.sleep(self._latency)

        quote = Quote(
            **breakdown.model_dump(),
            quote_id=self._ids.new_id(),
            coverage_tier=request.coverage_tier,
            coverage_details=coverage_narrative(
                request.coverage_tier,
                request.vehicle_make or "",
                request.vehicle_model or "",
                request.vehicle_year,
            ),
            created_at=now,
            valid_until=now + self._validity,
        )

        logger.info(
            "Quote %s generated: tier=%s total=%s",
            quote.quote_id,
            quote.coverage_tier.value,
            format_currency(quote.total_premium_annual),
        )
        await emit(SystemEvent(
            event_type=EventType.QUOTE_GENERATED,
            quote_id=quote.quote_id,
            data={
                "coverage_tier": quote.coverage_tier.value,
                "usage": request.usage.value,
                "total_premium_annual": str(quote.total_premium_annual),
            },
            source_module="quotes.service",
        ))
        return quote

    def generate_quick_preview(self, partial: QuoteRequest) -> PremiumBreakdown | None:
        """Live estimate while the form is being filled in.

        Returns None (not an error) until vehicle value and tier are known.
        Missing usage defaults to personal, missing year to the current year.
        """
        if partial.missing_fields(PREVIEW_FIELDS):
            return None

        assert partial.vehicle_value is not None
        assert partial.coverage_tier is not None

        current_year = self._clock().year
        return compute_premium(
            partial.vehicle_value,
            partial.vehicle_year if partial.vehicle_year is not None else current_year,
            partial.usage or UsageClass.PERSONAL,
            partial.coverage_tier,
            policy=PRIMARY_RATE_POLICY,
            current_year=current_year,
        )
