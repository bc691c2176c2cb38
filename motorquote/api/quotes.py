"""Quote endpoints — full quote, quick preview, widget estimate, history, coverage."""
# ruff: noqa: B008

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from motorquote.api.deps import get_quote_history, get_quote_service
from motorquote.pricing.calculator import InvalidInputError, estimate_monthly_premium
from motorquote.quotes.coverage import COVERAGE_OPTIONS, CoverageOption
from motorquote.quotes.history import QuoteHistory, QuoteHistoryEntry
from motorquote.quotes.service import IncompleteRequestError, QuoteService
from motorquote.schemas.quote import MonthlyEstimate, PremiumBreakdown, Quote, QuoteRequest

router = APIRouter(prefix="/api", tags=["quotes"])

ESTIMATE_FIELDS: tuple[str, ...] = ("vehicle_value", "vehicle_year", "usage", "coverage_tier")


def _unprocessable(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=422, detail=str(exc))


@router.post("/quotes", response_model=Quote)
async def create_quote(
    request: QuoteRequest,
    service: QuoteService = Depends(get_quote_service),
    history: QuoteHistory = Depends(get_quote_history),
) -> Quote:
    """Full quote; stored in history so checkout can find it by id."""
    try:
        quote = await service.generate_full_quote(request)
    except IncompleteRequestError as exc:
        raise HTTPException(
            status_code=422,
            detail={"message": str(exc), "missing": exc.missing},
        ) from exc
    except InvalidInputError as exc:
        raise _unprocessable(exc) from exc

    await history.record(quote, request)
    return quote


@router.post("/quotes/preview", response_model=PremiumBreakdown | None)
async def preview_quote(
    request: QuoteRequest,
    service: QuoteService = Depends(get_quote_service),
) -> PremiumBreakdown | None:
    """Live preview; null until vehicle value and tier are known."""
    try:
        return service.generate_quick_preview(request)
    except InvalidInputError as exc:
        raise _unprocessable(exc) from exc


@router.post("/quotes/estimate", response_model=MonthlyEstimate)
async def estimate_quote(request: QuoteRequest) -> MonthlyEstimate:
    """Quick calculator widget: monthly figure under the widget's own rates."""
    missing = request.missing_fields(ESTIMATE_FIELDS)
    if missing:
        raise _unprocessable(IncompleteRequestError(missing))

    assert request.vehicle_value is not None
    assert request.vehicle_year is not None
    assert request.usage is not None
    assert request.coverage_tier is not None
    try:
        return estimate_monthly_premium(
            request.vehicle_value,
            request.vehicle_year,
            request.usage,
            request.coverage_tier,
            current_year=datetime.now(timezone.utc).year,
        )
    except InvalidInputError as exc:
        raise _unprocessable(exc) from exc


@router.get("/quotes/history", response_model=list[QuoteHistoryEntry])
async def quote_history(
    history: QuoteHistory = Depends(get_quote_history),
) -> list[QuoteHistoryEntry]:
    return await history.entries()


@router.get("/coverage", response_model=list[CoverageOption])
async def coverage_options() -> list[CoverageOption]:
    """Coverage comparison table."""
    return list(COVERAGE_OPTIONS)
