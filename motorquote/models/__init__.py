"""Domain enums shared by schemas, services and the API."""

from __future__ import annotations

from motorquote.models.enums import (
    CoverageTier,
    FormState,
    FormStep,
    PaymentFrequency,
    PaymentStatus,
    UsageClass,
)

__all__ = [
    "CoverageTier",
    "FormState",
    "FormStep",
    "PaymentFrequency",
    "PaymentStatus",
    "UsageClass",
]
