"""Rate table: tier base rates plus vehicle-age and usage modifiers.

Two named policies are kept side by side:

  PRIMARY_RATE_POLICY         quote engine and live preview
      age ≤ 1  → 1.2      personal   1.0
      age ≥ 10 → 0.9      business   1.3
      otherwise → 1.0     commercial 1.8

  PREVIEW_WIDGET_RATE_POLICY  quick calculator widget
      age ≤ 3   → 1.1     personal   1.0
      4–8       → 1.0     business   1.2
      9–15      → 0.9     commercial 1.5
      > 15      → 0.8

They disagree on purpose: merging them changes quoted prices, which needs
product sign-off first.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from motorquote.models.enums import CoverageTier, UsageClass

# Annual rate as a fraction of vehicle value
BASE_RATES: dict[CoverageTier, Decimal] = {
    CoverageTier.BASIC: Decimal("0.015"),     # third party only
    CoverageTier.STANDARD: Decimal("0.035"),  # comprehensive
    CoverageTier.PREMIUM: Decimal("0.045"),   # comprehensive with extras
}


@dataclass(frozen=True)
class AgeBand:
    """Vehicle ages in [min_age, max_age] get `factor`. max_age None means open-ended."""

    min_age: int
    max_age: int | None
    factor: Decimal

    def contains(self, age: int) -> bool:
        if age < self.min_age:
            return False
        return self.max_age is None or age <= self.max_age


@dataclass(frozen=True)
class RatePolicy:
    """Named set of age bands and usage factors."""

    name: str
    age_bands: tuple[AgeBand, ...]
    usage_factors: dict[UsageClass, Decimal]
    default_age_factor: Decimal = Decimal("1.0")

    def age_factor(self, age: int) -> Decimal:
        """First matching band wins; ages outside every band get the default."""
        for band in self.age_bands:
            if band.contains(age):
                return band.factor
        return self.default_age_factor

    def usage_factor(self, usage: UsageClass) -> Decimal:
        return self.usage_factors[usage]


def base_rate(tier: CoverageTier) -> Decimal:
    """Annual base rate for a coverage tier."""
    return BASE_RATES[tier]


# Negative ages (next year's model) fall into the newest band.
PRIMARY_RATE_POLICY = RatePolicy(
    name="primary",
    age_bands=(
        AgeBand(min_age=-1, max_age=1, factor=Decimal("1.2")),
        AgeBand(min_age=10, max_age=None, factor=Decimal("0.9")),
    ),
    usage_factors={
        UsageClass.PERSONAL: Decimal("1.0"),
        UsageClass.BUSINESS: Decimal("1.3"),
        UsageClass.COMMERCIAL: Decimal("1.8"),
    },
)

PREVIEW_WIDGET_RATE_POLICY = RatePolicy(
    name="preview_widget",
    age_bands=(
        AgeBand(min_age=-1, max_age=3, factor=Decimal("1.1")),
        AgeBand(min_age=9, max_age=15, factor=Decimal("0.9")),
        AgeBand(min_age=16, max_age=None, factor=Decimal("0.8")),
    ),
    usage_factors={
        UsageClass.PERSONAL: Decimal("1.0"),
        UsageClass.BUSINESS: Decimal("1.2"),
        UsageClass.COMMERCIAL: Decimal("1.5"),
    },
)
