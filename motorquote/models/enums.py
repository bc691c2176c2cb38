"""Domain enums used across Pydantic schemas and the API.

All enums use str mixin for JSON serialization.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class CoverageTier(str, Enum):
    """Coverage level — drives base rate and coverage narrative."""

    BASIC = "basic"          # Third Party
    STANDARD = "standard"    # Comprehensive
    PREMIUM = "premium"      # Premium Plus


class UsageClass(str, Enum):
    """How the vehicle is primarily used."""

    PERSONAL = "personal"
    BUSINESS = "business"
    COMMERCIAL = "commercial"


class FormStep(IntEnum):
    """Wizard step index, as persisted in the form session."""

    PERSONAL = 1
    VEHICLE = 2


class FormState(str, Enum):
    """FSM states for the quote form wizard."""

    STEP1 = "step1"
    STEP2 = "step2"
    SUBMITTED = "submitted"


class PaymentFrequency(str, Enum):
    """Billing frequencies offered at checkout.

    Only ANNUAL and QUARTERLY are chargeable; the others exist because the
    checkout UI lists them.
    """

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMI_ANNUAL = "semi-annual"
    ANNUAL = "annual"


class PaymentStatus(str, Enum):
    """Outcome of a simulated payment."""

    SUCCESS = "success"
    FAILED = "failed"
    PENDING = "pending"
