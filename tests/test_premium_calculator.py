"""Tests for the motor premium calculator.

Tests cover:
- Worked examples (new standard car, older commercial premium vehicle)
- VAT / total / quarterly relations on the rounded figures
- Primary age bands and usage factors
- Input validation (non-positive value, implausible year)
- Quick calculator widget estimate (its own rate policy)
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

import pytest

from motorquote.models.enums import CoverageTier, UsageClass
from motorquote.pricing.calculator import InvalidInputError, compute_premium, estimate_monthly_premium
from motorquote.pricing.rates import PREVIEW_WIDGET_RATE_POLICY, PRIMARY_RATE_POLICY, base_rate

YEAR = 2025


def _premium(value: str, year: int, usage: UsageClass = UsageClass.PERSONAL,
             tier: CoverageTier = CoverageTier.STANDARD):
    return compute_premium(Decimal(value), year, usage, tier, current_year=YEAR)


class TestWorkedExamples:
    """Reference quotes that must never drift."""

    def test_new_standard_personal(self) -> None:
        """50 000 / age 0 / personal / standard → 2100 + 336 = 2436, quarterly 609."""
        result = _premium("50000", YEAR)
        assert result.base_premium_annual == Decimal("2100.00")
        assert result.vat_annual == Decimal("336.00")
        assert result.total_premium_annual == Decimal("2436.00")
        assert result.quarterly_premium == Decimal("609.00")
        assert result.vat_rate == Decimal("0.16")

    def test_old_commercial_premium(self) -> None:
        """120 000 × 0.045 × 0.9 × 1.8 = 8748 base."""
        result = _premium("120000", YEAR - 12, UsageClass.COMMERCIAL, CoverageTier.PREMIUM)
        assert result.base_premium_annual == Decimal("8748.00")
        assert result.vat_annual == Decimal("1399.68")
        assert result.total_premium_annual == Decimal("10147.68")
        assert result.quarterly_premium == Decimal("2536.92")

    def test_basic_mid_age(self) -> None:
        result = _premium("10000", YEAR - 5, tier=CoverageTier.BASIC)
        assert result.base_premium_annual == Decimal("150.00")
        assert result.total_premium_annual == Decimal("174.00")
        assert result.quarterly_premium == Decimal("43.50")

    def test_business_usage(self) -> None:
        result = _premium("50000", YEAR - 5, UsageClass.BUSINESS)
        assert result.base_premium_annual == Decimal("2275.00")
        assert result.total_premium_annual == Decimal("2639.00")
        assert result.quarterly_premium == Decimal("659.75")


class TestRounding:
    def test_derived_from_published_base(self) -> None:
        """VAT, total and quarterly follow the rounded base, not the raw product."""
        result = _premium("12345", YEAR - 5, tier=CoverageTier.BASIC)
        # raw base 185.175 → 185.18; vat 29.6288 → 29.63; quarterly 53.7025 → 53.70
        assert result.base_premium_annual == Decimal("185.18")
        assert result.vat_annual == Decimal("29.63")
        assert result.total_premium_annual == Decimal("214.81")
        assert result.quarterly_premium == Decimal("53.70")

    def test_quarterly_follows_rounded_total(self) -> None:
        result = _premium("1001", YEAR - 5, tier=CoverageTier.BASIC)
        assert result.total_premium_annual == Decimal("17.42")
        assert result.quarterly_premium == Decimal("4.36")

    @pytest.mark.parametrize("value", ["1000", "1001", "12345", "12345.67", "78250", "999999.99"])
    @pytest.mark.parametrize("usage", list(UsageClass))
    @pytest.mark.parametrize("tier", list(CoverageTier))
    def test_total_and_quarterly_relations(self, value: str, usage: UsageClass, tier: CoverageTier) -> None:
        result = _premium(value, YEAR - 3, usage, tier)
        cents = Decimal("0.01")
        assert result.total_premium_annual == (result.base_premium_annual * Decimal("1.16")).quantize(
            cents, rounding=ROUND_HALF_UP,
        )
        assert result.total_premium_annual == result.base_premium_annual + result.vat_annual
        assert result.quarterly_premium == (result.total_premium_annual / 4).quantize(
            cents, rounding=ROUND_HALF_UP,
        )

    def test_money_has_two_places(self) -> None:
        result = _premium("33333.33", YEAR - 4)
        for amount in (
            result.base_premium_annual,
            result.vat_annual,
            result.total_premium_annual,
            result.quarterly_premium,
        ):
            assert amount.as_tuple().exponent == -2

    def test_idempotent(self) -> None:
        first = _premium("64321.50", YEAR - 7, UsageClass.BUSINESS, CoverageTier.BASIC)
        second = _premium("64321.50", YEAR - 7, UsageClass.BUSINESS, CoverageTier.BASIC)
        assert first == second


class TestAgeFactors:
    """Primary policy: ≤1 → 1.2, ≥10 → 0.9, otherwise 1.0."""

    @pytest.mark.parametrize(
        ("age", "factor"),
        [(-1, "1.2"), (0, "1.2"), (1, "1.2"), (2, "1.0"), (9, "1.0"), (10, "0.9"), (40, "0.9")],
    )
    def test_primary_bands(self, age: int, factor: str) -> None:
        assert PRIMARY_RATE_POLICY.age_factor(age) == Decimal(factor)

    def test_next_years_model_is_priced_as_new(self) -> None:
        result = _premium("50000", YEAR + 1)
        assert result.base_premium_annual == Decimal("2100.00")

    def test_age_applied_to_base(self) -> None:
        value = Decimal("40000")
        result = _premium("40000", YEAR - 10)
        expected = value * base_rate(CoverageTier.STANDARD) * Decimal("0.9")
        assert result.base_premium_annual == expected.quantize(Decimal("0.01"))


class TestInvalidInput:
    @pytest.mark.parametrize("value", ["0", "-1", "-50000"])
    def test_non_positive_value(self, value: str) -> None:
        with pytest.raises(InvalidInputError, match="positive"):
            _premium(value, YEAR)

    def test_non_finite_value(self) -> None:
        with pytest.raises(InvalidInputError):
            compute_premium(Decimal("Infinity"), YEAR, UsageClass.PERSONAL, CoverageTier.BASIC, current_year=YEAR)

    def test_non_numeric_value(self) -> None:
        with pytest.raises(InvalidInputError, match="not numeric"):
            compute_premium("abc", YEAR, UsageClass.PERSONAL, CoverageTier.BASIC, current_year=YEAR)  # type: ignore[arg-type]

    @pytest.mark.parametrize("year", [0, 99, 1899, YEAR + 2, 20255])
    def test_implausible_year(self, year: int) -> None:
        with pytest.raises(InvalidInputError, match="Implausible vehicle year"):
            _premium("50000", year)

    def test_invalid_input_is_value_error(self) -> None:
        assert issubclass(InvalidInputError, ValueError)

    def test_defaults_to_current_year(self) -> None:
        from datetime import date

        result = compute_premium(Decimal("50000"), date.today().year, UsageClass.PERSONAL, CoverageTier.STANDARD)
        assert result.base_premium_annual == Decimal("2100.00")


class TestMonthlyEstimate:
    """Widget policy: ≤3 → 1.1, 4–8 → 1.0, 9–15 → 0.9, >15 → 0.8; usage 1.0/1.2/1.5."""

    def test_new_car(self) -> None:
        result = estimate_monthly_premium(
            Decimal("100000"), YEAR - 2, UsageClass.PERSONAL, CoverageTier.STANDARD, current_year=YEAR,
        )
        assert result.base_premium_annual == Decimal("3850.00")
        assert result.total_premium_annual == Decimal("4466.00")
        assert result.monthly_premium == Decimal("372.17")

    def test_mid_age_car(self) -> None:
        result = estimate_monthly_premium(
            Decimal("100000"), YEAR - 6, UsageClass.PERSONAL, CoverageTier.STANDARD, current_year=YEAR,
        )
        assert result.total_premium_annual == Decimal("4060.00")
        assert result.monthly_premium == Decimal("338.33")

    def test_old_commercial(self) -> None:
        result = estimate_monthly_premium(
            Decimal("100000"), YEAR - 20, UsageClass.COMMERCIAL, CoverageTier.BASIC, current_year=YEAR,
        )
        assert result.base_premium_annual == Decimal("1800.00")
        assert result.monthly_premium == Decimal("174.00")

    def test_widget_and_engine_differ(self) -> None:
        """Same vehicle, different policies: the widget is not the quote."""
        engine = _premium("100000", YEAR - 2)
        widget = estimate_monthly_premium(
            Decimal("100000"), YEAR - 2, UsageClass.PERSONAL, CoverageTier.STANDARD, current_year=YEAR,
        )
        assert widget.total_premium_annual != engine.total_premium_annual

    @pytest.mark.parametrize(
        ("age", "factor"),
        [(0, "1.1"), (3, "1.1"), (4, "1.0"), (8, "1.0"), (9, "0.9"), (15, "0.9"), (16, "0.8")],
    )
    def test_widget_bands(self, age: int, factor: str) -> None:
        assert PREVIEW_WIDGET_RATE_POLICY.age_factor(age) == Decimal(factor)

    def test_rejects_bad_value(self) -> None:
        with pytest.raises(InvalidInputError):
            estimate_monthly_premium(Decimal("0"), YEAR, UsageClass.PERSONAL, CoverageTier.BASIC, current_year=YEAR)
