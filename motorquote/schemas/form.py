"""Schemas for the two-step quote form."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field

from motorquote.models.enums import FormStep
from motorquote.schemas.quote import Quote, QuoteRequest


class DocumentReference(BaseModel):
    """Pointer to an uploaded vehicle registration document (white book)."""

    reference: str
    filename: str | None = None
    content_type: str
    size_bytes: int = Field(ge=0)


class FormSession(BaseModel):
    """Persisted wizard state.

    The serialized layout keeps exactly these three keys; the freshness rule
    on restore depends on `timestamp`.
    """

    data: dict[str, Any] = Field(default_factory=dict)
    step: FormStep = FormStep.PERSONAL
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class StepResult(BaseModel):
    """Outcome of a step transition attempt (next or submit)."""

    ok: bool
    step: FormStep
    errors: dict[str, str] = Field(default_factory=dict)
    focus_field: str | None = None     # first invalid field in declared order
    quote_request: QuoteRequest | None = None
    quote: Quote | None = None         # set when submit priced the request


class FormUpdate(BaseModel):
    """Partial field changes; blank or null values clear the field."""

    fields: dict[str, Any]


class FormView(BaseModel):
    """Current wizard state as returned by the forms API."""

    form_id: str
    state: str
    step: int
    fields: dict[str, Any]
    errors: dict[str, str] = Field(default_factory=dict)
    restored: bool = False
