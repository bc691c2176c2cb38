"""Form wizard endpoints.

Each request rebuilds a FormLifecycleManager from the persisted session, so
the store is the only state shared between requests.
"""
# ruff: noqa: B008

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel

from motorquote.api.deps import get_quote_history, get_quote_service, get_store
from motorquote.forms.fsm import InvalidTransitionError
from motorquote.forms.lifecycle import FormLifecycleManager, UnknownFieldError
from motorquote.models.enums import CoverageTier
from motorquote.pricing.calculator import InvalidInputError
from motorquote.quotes.history import QuoteHistory
from motorquote.quotes.service import IncompleteRequestError, QuoteService
from motorquote.schemas.form import FormUpdate, FormView, StepResult
from motorquote.schemas.quote import Quote
from motorquote.storage.base import PersistenceService

router = APIRouter(prefix="/api/forms", tags=["forms"])


class FormSubmission(BaseModel):
    result: StepResult
    quote: Quote


async def _load(store: PersistenceService, form_id: str, tier: CoverageTier | None = None) -> FormLifecycleManager:
    manager = FormLifecycleManager(store, form_id)
    await manager.start(selected_tier=tier)
    return manager


def _view(manager: FormLifecycleManager) -> FormView:
    return FormView(**manager.snapshot())


def _rejected(result: StepResult) -> HTTPException:
    return HTTPException(
        status_code=422,
        detail={
            "step": int(result.step),
            "errors": result.errors,
            "focus_field": result.focus_field,
        },
    )


@router.get("/{form_id}", response_model=FormView)
async def get_form(
    form_id: str,
    tier: CoverageTier | None = None,
    store: PersistenceService = Depends(get_store),
) -> FormView:
    """Restore the saved form (if fresh); `tier` overrides the saved coverage tier."""
    return _view(await _load(store, form_id, tier))


@router.patch("/{form_id}", response_model=FormView)
async def update_form(
    form_id: str,
    update: FormUpdate,
    store: PersistenceService = Depends(get_store),
) -> FormView:
    manager = await _load(store, form_id)
    try:
        await manager.update_fields(update.fields)
    except UnknownFieldError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return _view(manager)


@router.delete("/{form_id}", status_code=204)
async def clear_form(
    form_id: str,
    store: PersistenceService = Depends(get_store),
) -> Response:
    manager = FormLifecycleManager(store, form_id)
    await manager.clear()
    return Response(status_code=204)


@router.post("/{form_id}/next", response_model=FormView)
async def next_step(
    form_id: str,
    store: PersistenceService = Depends(get_store),
) -> FormView:
    manager = await _load(store, form_id)
    try:
        result = await manager.next_step()
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if not result.ok:
        raise _rejected(result)
    return _view(manager)


@router.post("/{form_id}/back", response_model=FormView)
async def previous_step(
    form_id: str,
    store: PersistenceService = Depends(get_store),
) -> FormView:
    manager = await _load(store, form_id)
    try:
        await manager.previous_step()
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return _view(manager)


@router.post("/{form_id}/submit", response_model=FormSubmission)
async def submit_form(
    form_id: str,
    store: PersistenceService = Depends(get_store),
    service: QuoteService = Depends(get_quote_service),
    history: QuoteHistory = Depends(get_quote_history),
) -> FormSubmission:
    """Validate the vehicle step and price it; the saved form survives a failed quote."""
    manager = await _load(store, form_id)
    try:
        result = await manager.submit(quote_service=service)
    except InvalidTransitionError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except (IncompleteRequestError, InvalidInputError) as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    if not result.ok:
        raise _rejected(result)

    assert result.quote_request is not None and result.quote is not None
    await history.record(result.quote, result.quote_request)
    return FormSubmission(result=result, quote=result.quote)
