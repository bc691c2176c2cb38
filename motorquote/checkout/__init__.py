"""Checkout — charge amounts, simulated mobile-money payment, payment history."""

from motorquote.checkout.payment import (
    CheckoutService,
    InvalidPaymentDetailsError,
    PaymentHistory,
    QuoteExpiredError,
    UnsupportedFrequencyError,
    charge_amount,
)

__all__ = [
    "CheckoutService",
    "PaymentHistory",
    "charge_amount",
    "QuoteExpiredError",
    "UnsupportedFrequencyError",
    "InvalidPaymentDetailsError",
]
