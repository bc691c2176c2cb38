"""Premium pricing — rate table and calculator."""

from motorquote.pricing.calculator import InvalidInputError, compute_premium, estimate_monthly_premium
from motorquote.pricing.rates import PREVIEW_WIDGET_RATE_POLICY, PRIMARY_RATE_POLICY, RatePolicy

__all__ = [
    "compute_premium",
    "estimate_monthly_premium",
    "InvalidInputError",
    "RatePolicy",
    "PRIMARY_RATE_POLICY",
    "PREVIEW_WIDGET_RATE_POLICY",
]
