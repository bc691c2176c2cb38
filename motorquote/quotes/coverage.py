"""Coverage catalogue — tier names, badges, feature lists and quote narratives.

Two kinds of text live here:
- COVERAGE_OPTIONS: the comparison table shown before a quote exists.
- coverage_narrative(): the itemized benefit list attached to a full quote,
  which names the insured vehicle in its first line.
"""

from __future__ import annotations

from pydantic import BaseModel

from motorquote.models.enums import CoverageTier


class CoverageOption(BaseModel):
    """One column of the coverage comparison table."""

    id: CoverageTier
    name: str
    features: list[str]
    badge: str | None = None
    recommended: bool = False


COVERAGE_OPTIONS: tuple[CoverageOption, ...] = (
    CoverageOption(
        id=CoverageTier.BASIC,
        name="Third Party",
        features=[
            "Third-party liability coverage",
            "Legal minimum requirement in Zambia",
            "Property damage up to ZMW 50,000",
            "Bodily injury coverage",
            "24/7 emergency assistance",
        ],
        badge="Legal Minimum",
    ),
    CoverageOption(
        id=CoverageTier.STANDARD,
        name="Comprehensive",
        features=[
            "All Third Party benefits",
            "Theft and hijacking coverage",
            "Fire and natural disasters",
            "Windscreen and glass coverage",
            "Towing and recovery services",
            "Courtesy car (3 days)",
            "Hospital cash benefit",
        ],
        badge="Most Popular",
        recommended=True,
    ),
    CoverageOption(
        id=CoverageTier.PREMIUM,
        name="Premium Plus",
        features=[
            "All Comprehensive benefits",
            "Extended courtesy car (7 days)",
            "Personal accident cover",
            "Personal belongings cover",
            "Key replacement coverage",
            "Emergency accommodation",
            "Cross-border coverage (SADC)",
            "No excess on glass claims",
        ],
        badge="Best Value",
    ),
)

# Narrative lines that follow the vehicle headline, per tier
_NARRATIVE_BODY: dict[CoverageTier, tuple[str, ...]] = {
    CoverageTier.BASIC: (
        "Legal minimum requirements as per Zambian Motor Vehicle Insurance Act",
        "Third-party bodily injury and property damage coverage up to ZMW 50,000",
        "24/7 emergency roadside assistance",
    ),
    CoverageTier.STANDARD: (
        "All third-party benefits included",
        "Theft and hijacking protection",
        "Fire and natural disaster coverage",
        "Windscreen replacement",
        "Towing services",
        "Courtesy car for 3 days",
        "Hospital cash benefit",
    ),
    CoverageTier.PREMIUM: (
        "All comprehensive benefits included",
        "Extended courtesy car (7 days)",
        "Personal accident cover up to ZMW 100,000",
        "Personal belongings coverage",
        "Key replacement service",
        "Emergency accommodation",
        "Cross-border coverage for SADC countries",
        "Zero excess on glass claims",
    ),
}

_HEADLINE: dict[CoverageTier, str] = {
    CoverageTier.BASIC: "Third Party liability coverage",
    CoverageTier.STANDARD: "Comprehensive coverage",
    CoverageTier.PREMIUM: "Premium Plus coverage",
}


def coverage_narrative(tier: CoverageTier, make: str, model: str, year: int) -> list[str]:
    """Ordered benefit list for a full quote, headed by the insured vehicle."""
    headline = f"{_HEADLINE[tier]} for your {make} {model} ({year})"
    return [headline, *_NARRATIVE_BODY[tier]]
