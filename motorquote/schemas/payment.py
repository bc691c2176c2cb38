"""Schemas for the simulated checkout."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field

from motorquote.models.enums import PaymentFrequency, PaymentStatus


class PaymentRequest(BaseModel):
    """Checkout submission for a previously generated quote."""

    quote_id: str
    payment_method: str = Field(min_length=1)
    phone_number: str | None = None
    frequency: PaymentFrequency


class PaymentResult(BaseModel):
    """Receipt of a simulated payment."""

    transaction_id: str
    receipt_id: str
    quote_id: str
    payment_method: str
    frequency: PaymentFrequency
    amount: Decimal
    status: PaymentStatus
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    email_sent: bool = False
