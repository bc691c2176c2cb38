"""Motor premium calculator.

Pure Python, Decimal arithmetic. Implements:
- Annual base premium: value × tier rate × age factor × usage factor
- VAT at a flat 16% on the base premium
- Quarterly instalment: VAT-inclusive annual total / 4
- Monthly widget estimate: VAT-inclusive annual total / 12

The base premium is computed unrounded and rounded to 2 decimal places
once. VAT, total and quarterly are then derived from the published base,
each rounded once, so that total == round(base × 1.16, 2) and
quarterly == round(total / 4, 2) hold exactly on the returned figures.
"""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from motorquote.models.enums import CoverageTier, UsageClass
from motorquote.pricing.rates import PREVIEW_WIDGET_RATE_POLICY, PRIMARY_RATE_POLICY, RatePolicy, base_rate
from motorquote.schemas.quote import VAT_RATE, MonthlyEstimate, PremiumBreakdown

MIN_VEHICLE_YEAR = 1900


class InvalidInputError(ValueError):
    """Raised when the calculator receives a non-positive value or an implausible year."""


def _to_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places."""
    return value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def _as_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        msg = f"Vehicle value is not numeric: {value!r}"
        raise InvalidInputError(msg) from None


def _validate(vehicle_value: Decimal, vehicle_year: int, current_year: int) -> None:
    if not vehicle_value.is_finite() or vehicle_value <= 0:
        msg = f"Vehicle value must be a positive finite amount, got {vehicle_value}"
        raise InvalidInputError(msg)
    if isinstance(vehicle_year, bool) or not MIN_VEHICLE_YEAR <= vehicle_year <= current_year + 1:
        msg = f"Implausible vehicle year: {vehicle_year} (expected {MIN_VEHICLE_YEAR}–{current_year + 1})"
        raise InvalidInputError(msg)


def _base_premium(
    vehicle_value: Decimal,
    vehicle_year: int,
    usage: UsageClass,
    tier: CoverageTier,
    policy: RatePolicy,
    current_year: int,
) -> Decimal:
    _validate(vehicle_value, vehicle_year, current_year)
    age = current_year - vehicle_year
    return vehicle_value * base_rate(tier) * policy.age_factor(age) * policy.usage_factor(usage)


def compute_premium(
    vehicle_value: Decimal,
    vehicle_year: int,
    usage: UsageClass,
    tier: CoverageTier,
    *,
    policy: RatePolicy = PRIMARY_RATE_POLICY,
    current_year: int | None = None,
) -> PremiumBreakdown:
    """Compute the annual premium breakdown for one vehicle.

    Args:
        vehicle_value: Insured value of the vehicle.
        vehicle_year: Manufacture year (4 digits).
        usage: Usage class.
        tier: Coverage tier.
        policy: Age/usage modifiers to apply. Defaults to the primary policy.
        current_year: Reference year for the vehicle's age. Defaults to today.

    Returns:
        PremiumBreakdown with base, VAT, annual total and quarterly instalment.

    Raises:
        InvalidInputError: value ≤ 0 or year outside the plausible range.
    """
    if current_year is None:
        current_year = date.today().year

    vehicle_value = _as_decimal(vehicle_value)
    base = _to_money(_base_premium(vehicle_value, vehicle_year, usage, tier, policy, current_year))
    vat = _to_money(base * VAT_RATE)
    # base has 2 places, so base + vat is already round(base × 1.16, 2)
    total = base + vat

    return PremiumBreakdown(
        base_premium_annual=base,
        vat_annual=vat,
        total_premium_annual=total,
        quarterly_premium=_to_money(total / 4),
        vat_rate=VAT_RATE,
    )


def estimate_monthly_premium(
    vehicle_value: Decimal,
    vehicle_year: int,
    usage: UsageClass,
    tier: CoverageTier,
    *,
    current_year: int | None = None,
) -> MonthlyEstimate:
    """Monthly figure for the quick calculator widget.

    Always uses PREVIEW_WIDGET_RATE_POLICY, so it can differ from the
    quote engine for the same vehicle.
    """
    if current_year is None:
        current_year = date.today().year

    vehicle_value = _as_decimal(vehicle_value)
    base = _base_premium(vehicle_value, vehicle_year, usage, tier, PREVIEW_WIDGET_RATE_POLICY, current_year)
    total = base * (1 + VAT_RATE)

    return MonthlyEstimate(
        base_premium_annual=_to_money(base),
        total_premium_annual=_to_money(total),
        monthly_premium=_to_money(total / 12),
    )
