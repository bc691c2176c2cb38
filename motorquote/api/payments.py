"""Checkout endpoint — pays a quote previously stored in history."""
# ruff: noqa: B008

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from motorquote.api.deps import get_checkout_service, get_quote_history
from motorquote.checkout.payment import (
    CheckoutService,
    InvalidPaymentDetailsError,
    QuoteExpiredError,
    UnsupportedFrequencyError,
)
from motorquote.quotes.history import QuoteHistory
from motorquote.schemas.payment import PaymentRequest, PaymentResult

router = APIRouter(prefix="/api", tags=["checkout"])


@router.post("/payments", response_model=PaymentResult)
async def create_payment(
    request: PaymentRequest,
    history: QuoteHistory = Depends(get_quote_history),
    checkout: CheckoutService = Depends(get_checkout_service),
) -> PaymentResult:
    entry = await history.find(request.quote_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Quote not found: {request.quote_id}")

    try:
        return await checkout.process_payment(entry, request)
    except QuoteExpiredError as exc:
        raise HTTPException(status_code=410, detail=str(exc)) from exc
    except (UnsupportedFrequencyError, InvalidPaymentDetailsError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
