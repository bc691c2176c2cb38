"""Pydantic schemas for the pricing pipeline.

Pure data classes — no storage dependencies.
Used as inputs/outputs for the calculator, the quote service and checkout.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field

from motorquote.models.enums import CoverageTier, UsageClass

VAT_RATE = Decimal("0.16")


# ---------------------------------------------------------------------------
# Request
# ---------------------------------------------------------------------------


class QuoteRequest(BaseModel):
    """Immutable snapshot of the pricing inputs.

    Every field is optional so the same type carries both partial snapshots
    (live preview while the user types) and complete ones (full quote).
    Completeness is checked by the quote service, not here.
    """

    model_config = {"frozen": True}

    vehicle_value: Decimal | None = None
    vehicle_year: int | None = None
    usage: UsageClass | None = None
    coverage_tier: CoverageTier | None = None
    vehicle_make: str | None = None
    vehicle_model: str | None = None

    def missing_fields(self, required: tuple[str, ...]) -> list[str]:
        """Names from `required` whose value is None or blank."""
        missing: list[str] = []
        for name in required:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing


# ---------------------------------------------------------------------------
# Calculator output
# ---------------------------------------------------------------------------


class PremiumBreakdown(BaseModel):
    """Annual premium split into base and VAT, plus the quarterly instalment."""

    model_config = {"frozen": True}

    base_premium_annual: Decimal
    vat_annual: Decimal            # base × vat_rate
    total_premium_annual: Decimal  # base + vat
    quarterly_premium: Decimal     # total / 4
    vat_rate: Decimal = VAT_RATE


class MonthlyEstimate(BaseModel):
    """Quick calculator widget output (per-month figure, VAT included)."""

    model_config = {"frozen": True}

    base_premium_annual: Decimal
    total_premium_annual: Decimal
    monthly_premium: Decimal       # total / 12


# ---------------------------------------------------------------------------
# Quote
# ---------------------------------------------------------------------------


class Quote(PremiumBreakdown):
    """A full quote: breakdown plus identity, narrative and validity window.

    Expiry is advisory here; checkout refuses expired quotes.
    """

    quote_id: str
    coverage_tier: CoverageTier
    coverage_details: list[str] = Field(default_factory=list)
    created_at: datetime
    valid_until: datetime

    def is_expired(self, now: datetime | None = None) -> bool:
        """True once `now` is past the validity deadline."""
        if now is None:
            now = datetime.now(timezone.utc)
        return now > self.valid_until
