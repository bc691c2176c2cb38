"""FastAPI dependencies — shared store and per-request services.

Tests swap these out through `app.dependency_overrides`.
"""
# ruff: noqa: B008

from __future__ import annotations

from fastapi import Depends

from motorquote.checkout.payment import CheckoutService, PaymentHistory
from motorquote.quotes.history import QuoteHistory
from motorquote.quotes.service import QuoteService
from motorquote.storage import PersistenceService, create_store

_store: PersistenceService | None = None


def get_store() -> PersistenceService:
    """Process-wide store, created on first use from settings."""
    global _store
    if _store is None:
        _store = create_store()
    return _store


def reset_store() -> PersistenceService | None:
    """Forget the shared store and return it so the caller can close it."""
    global _store
    store, _store = _store, None
    return store


def get_quote_service() -> QuoteService:
    return QuoteService()


def get_quote_history(store: PersistenceService = Depends(get_store)) -> QuoteHistory:
    return QuoteHistory(store)


def get_checkout_service(store: PersistenceService = Depends(get_store)) -> CheckoutService:
    return CheckoutService(PaymentHistory(store))
