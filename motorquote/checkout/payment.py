"""Simulated mobile-money checkout for a generated quote.

Only annual and quarterly billing can be charged. The payment itself is a
timed simulation: once started it always runs to completion, even if the
caller goes away, and is recorded in payment history.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Callable
from datetime import datetime, timezone
from decimal import Decimal

from pydantic import TypeAdapter, ValidationError

from motorquote.config import settings
from motorquote.events.bus import emit
from motorquote.formatters import format_currency
from motorquote.forms.validation import validate_zambian_phone
from motorquote.models.enums import PaymentFrequency, PaymentStatus
from motorquote.schemas.events import EventType, SystemEvent
from motorquote.schemas.payment import PaymentRequest, PaymentResult
from motorquote.schemas.quote import Quote
from motorquote.storage.base import PersistenceService

logger = logging.getLogger(__name__)

PAYMENT_HISTORY_KEY = "motor_insurance_payment_history"

MOBILE_MONEY_PROVIDERS: dict[str, str] = {
    "airtel": "Airtel Money",
    "mtn": "MTN Mobile Money",
    "zamtel": "Zamtel Kwacha",
}


class UnsupportedFrequencyError(ValueError):
    """Raised for billing frequencies that cannot be charged."""


class QuoteExpiredError(ValueError):
    """Raised when paying for a quote past its validity deadline."""


class InvalidPaymentDetailsError(ValueError):
    """Raised for an unknown provider or an unusable mobile number."""


def charge_amount(quote: Quote, frequency: PaymentFrequency) -> Decimal:
    """Amount charged per instalment for the chosen billing frequency."""
    if frequency == PaymentFrequency.ANNUAL:
        return quote.total_premium_annual
    if frequency == PaymentFrequency.QUARTERLY:
        return quote.quarterly_premium
    msg = (
        f"Unsupported payment frequency: {PaymentFrequency(frequency).value}. "
        "Only quarterly and annual payments are allowed."
    )
    raise UnsupportedFrequencyError(msg)


def new_receipt_id() -> str:
    return f"RCP-{uuid.uuid4().hex[:8].upper()}"


_results_adapter = TypeAdapter(list[PaymentResult])


class PaymentHistory:
    """Bounded newest-first list of payments in a PersistenceService."""

    def __init__(
        self,
        store: PersistenceService,
        key: str = PAYMENT_HISTORY_KEY,
        limit: int | None = None,
    ) -> None:
        self._store = store
        self._key = key
        self._limit = settings.checkout.payment_history_limit if limit is None else limit

    async def entries(self) -> list[PaymentResult]:
        try:
            raw = await self._store.get(self._key)
        except Exception:
            logger.exception("Error loading payment history")
            return []
        if not raw:
            return []
        try:
            return _results_adapter.validate_json(raw)
        except ValidationError:
            logger.warning("Discarding unreadable payment history under %s", self._key)
            return []

    async def record(self, result: PaymentResult) -> None:
        entries = await self.entries()
        entries.insert(0, result)
        del entries[self._limit:]
        try:
            await self._store.set(self._key, _results_adapter.dump_json(entries).decode())
        except Exception:
            logger.exception("Error saving payment %s to history", result.receipt_id)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CheckoutService:
    """Charges a quote through the simulated mobile-money flow."""

    def __init__(
        self,
        history: PaymentHistory | None = None,
        latency_seconds: float | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._history = history
        self._latency = settings.checkout.payment_latency_seconds if latency_seconds is None else latency_seconds
        self._clock = clock or _utcnow

    async def process_payment(self, quote: Quote, request: PaymentRequest) -> PaymentResult:
        """Validate, then run the shielded payment simulation.

        Raises:
            QuoteExpiredError: the quote is past `valid_until`.
            UnsupportedFrequencyError: frequency is neither annual nor quarterly.
            InvalidPaymentDetailsError: unknown provider or invalid mobile number.
        """
        if quote.is_expired(self._clock()):
            msg = f"Quote {quote.quote_id} expired on {quote.valid_until.date().isoformat()}"
            raise QuoteExpiredError(msg)

        amount = charge_amount(quote, request.frequency)

        if request.payment_method not in MOBILE_MONEY_PROVIDERS:
            msg = (
                f"Unknown payment method: {request.payment_method} "
                f"(valid: {sorted(MOBILE_MONEY_PROVIDERS)})"
            )
            raise InvalidPaymentDetailsError(msg)
        if not request.phone_number or not validate_zambian_phone(request.phone_number):
            raise InvalidPaymentDetailsError("Please enter a valid Zambian mobile number")

        return await asyncio.shield(self._settle(quote, request, amount))

    async def _settle(self, quote: Quote, request: PaymentRequest, amount: Decimal) -> PaymentResult:
        if self._latency > 0:
            await asyncio.sleep(self._latency)

        result = PaymentResult(
            transaction_id=str(uuid.uuid4()),
            receipt_id=new_receipt_id(),
            quote_id=quote.quote_id,
            payment_method=request.payment_method,
            frequency=request.frequency,
            amount=amount,
            status=PaymentStatus.SUCCESS,
            timestamp=self._clock(),
        )

        logger.info(
            "Payment %s for quote %s: %s via %s",
            result.receipt_id,
            quote.quote_id,
            format_currency(amount),
            MOBILE_MONEY_PROVIDERS[request.payment_method],
        )
        if self._history is not None:
            await self._history.record(result)

        await emit(SystemEvent(
            event_type=EventType.PAYMENT_COMPLETED,
            quote_id=quote.quote_id,
            data={
                "receipt_id": result.receipt_id,
                "frequency": result.frequency.value,
                "amount": str(result.amount),
                "payment_method": result.payment_method,
            },
            source_module="checkout.payment",
        ))
        return result
