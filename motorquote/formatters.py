"""Display formatting for amounts in log lines (Zambian locale)."""

from __future__ import annotations

from decimal import Decimal

from motorquote.config import settings


def format_currency(value: Decimal | float | int | None, currency: str | None = None) -> str:
    """Format with currency code and thousands separator: 2436 -> "ZMW 2,436.00"."""
    if value is None:
        return "-"
    d = Decimal(str(value))
    return f"{currency or settings.branding.currency} {d:,.2f}"
