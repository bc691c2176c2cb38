"""Form lifecycle manager — the two-step quote wizard.

Owns the field map, the FormFSM and write-through persistence of the
partial state. Validation gates the "next" and "submit" triggers; "back"
is unconditional. When built with a QuoteService it also drives the live
preview card and the debounced full quote on every field change.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from motorquote.config import settings
from motorquote.events.bus import emit
from motorquote.forms.fields import (
    ALL_FIELDS,
    COVERAGE_TIER,
    VEHICLE_MAKE,
    VEHICLE_MODEL,
    is_empty,
    non_empty,
    to_quote_request,
)
from motorquote.forms.fsm import FormFSM, InvalidTransitionError
from motorquote.forms.session_store import (
    clear_form_session,
    persist_form_session,
    restore_form_session,
)
from motorquote.forms.states import STATE_FOR_STEP, STEP_FOR_STATE
from motorquote.forms.validation import validate_step1, validate_step2
from motorquote.models.enums import CoverageTier, FormState, FormStep
from motorquote.quotes.service import QuoteService
from motorquote.scheduling.preview import LivePreview, LiveQuote
from motorquote.schemas.events import EventType, SystemEvent
from motorquote.schemas.form import StepResult
from motorquote.storage.base import PersistenceService

logger = logging.getLogger(__name__)

DEFAULT_FORM_ID = "local"


class UnknownFieldError(ValueError):
    """Raised when a field name is not part of the quote form."""


def session_key(form_id: str) -> str:
    """Storage key for one form's persisted session."""
    return f"{settings.form.form_session_key}:{form_id}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class FormLifecycleManager:
    """Drives one quote form from first keystroke to submission."""

    def __init__(
        self,
        store: PersistenceService,
        form_id: str = DEFAULT_FORM_ID,
        *,
        key: str | None = None,
        clock: Callable[[], datetime] | None = None,
        ttl: timedelta | None = None,
        quote_service: QuoteService | None = None,
    ) -> None:
        self.form_id = form_id
        self._store = store
        self._key = key or session_key(form_id)
        self._clock = clock or _utcnow
        self._ttl = ttl
        self.fsm = FormFSM(form_id)
        self.fields: dict[str, Any] = {}
        self.errors: dict[str, str] = {}
        self.restored = False

        self.preview: LivePreview | None = None
        self.live_quote: LiveQuote | None = None
        if quote_service is not None:
            self.preview = LivePreview(quote_service)
            self.live_quote = LiveQuote(quote_service)

    # ── State ────────────────────────────────────────────────────────

    @property
    def state(self) -> FormState:
        return self.fsm.current_state

    @property
    def step(self) -> FormStep:
        return STEP_FOR_STATE[self.fsm.current_state]

    @property
    def is_submitted(self) -> bool:
        return self.fsm.is_terminal

    def snapshot(self) -> dict[str, Any]:
        """Plain view of the form for presentation layers."""
        return {
            "form_id": self.form_id,
            "state": self.state.value,
            "step": int(self.step),
            "fields": dict(self.fields),
            "errors": dict(self.errors),
            "restored": self.restored,
        }

    # ── Lifecycle ────────────────────────────────────────────────────

    async def start(self, selected_tier: CoverageTier | None = None) -> bool:
        """Restore a fresh saved session, if any.

        Returns True when a session was restored; the restored field map is
        taken as persisted. A tier chosen upstream overrides it. A fresh form
        starts on the standard tier.
        """
        session = await restore_form_session(
            self._store, self._key, now=self._clock(), ttl=self._ttl,
        )
        if session is None:
            self.fields = {COVERAGE_TIER: CoverageTier.STANDARD.value}
        else:
            self.fields = dict(session.data)
            self.fsm = FormFSM(self.form_id, STATE_FOR_STEP[session.step])
            self.restored = True
            logger.info("Restored form %s at step %d", self.form_id, session.step)
            await emit(SystemEvent(
                event_type=EventType.FORM_RESTORED,
                form_id=self.form_id,
                data={"step": int(session.step), "fields": sorted(session.data)},
                source_module="forms.lifecycle",
            ))

        if selected_tier is not None:
            self.fields[COVERAGE_TIER] = CoverageTier(selected_tier).value

        self._notify_live()
        return self.restored

    def close(self) -> None:
        """Tear down live recalculation; in-flight quotes run to completion."""
        if self.preview is not None:
            self.preview.close()
        if self.live_quote is not None:
            self.live_quote.close()

    # ── Field updates ────────────────────────────────────────────────

    async def update_field(self, name: str, value: Any) -> None:
        await self.update_fields({name: value})

    async def update_fields(self, values: Mapping[str, Any]) -> None:
        """Apply changes and write the non-empty fields through to the store."""
        self._ensure_editable()
        unknown = sorted(set(values) - ALL_FIELDS)
        if unknown:
            msg = f"Unknown form field(s): {', '.join(unknown)}"
            raise UnknownFieldError(msg)

        for name, value in values.items():
            if (
                name == VEHICLE_MAKE
                and value != self.fields.get(VEHICLE_MAKE)
                and VEHICLE_MODEL not in values
            ):
                # Models belong to a make
                self.fields.pop(VEHICLE_MODEL, None)
            if is_empty(value):
                self.fields.pop(name, None)
            else:
                self.fields[name] = value
            self.errors.pop(name, None)

        await self._persist()
        self._notify_live()

    # ── Step transitions ─────────────────────────────────────────────

    async def next_step(self) -> StepResult:
        """Validate personal info and move to the vehicle step."""
        self._require_trigger("next")
        errors = validate_step1(self.fields)
        if errors:
            return self._rejected(errors)

        self.errors = {}
        await self.fsm.transition("next")
        await self._persist()
        return StepResult(ok=True, step=self.step)

    async def previous_step(self) -> StepResult:
        self._require_trigger("back")
        await self.fsm.transition("back")
        await self._persist()
        return StepResult(ok=True, step=self.step)

    async def submit(self, quote_service: QuoteService | None = None) -> StepResult:
        """Validate vehicle info; on success clear the session and return the request.

        With a quote_service the request is priced first. If pricing raises,
        the error propagates and the form stays on step 2 with its saved
        session intact, so the user can retry.
        """
        self._require_trigger("submit")
        errors = validate_step2(self.fields, current_year=self._clock().year)
        if errors:
            return self._rejected(errors)

        self.errors = {}
        request = to_quote_request(self.fields)
        quote = None
        if quote_service is not None:
            quote = await quote_service.generate_full_quote(request)

        await clear_form_session(self._store, self._key)
        await self.fsm.transition("submit")
        self.close()

        await emit(SystemEvent(
            event_type=EventType.FORM_SUBMITTED,
            form_id=self.form_id,
            data={
                "coverage_tier": request.coverage_tier.value if request.coverage_tier else None,
                "usage": request.usage.value if request.usage else None,
            },
            source_module="forms.lifecycle",
        ))
        return StepResult(ok=True, step=self.step, quote_request=request, quote=quote)

    async def clear(self) -> None:
        """Discard the saved session and start over at step 1."""
        await clear_form_session(self._store, self._key)
        self.fields = {COVERAGE_TIER: CoverageTier.STANDARD.value}
        self.errors = {}
        self.restored = False
        self.fsm = FormFSM(self.form_id)
        await emit(SystemEvent(
            event_type=EventType.FORM_CLEARED,
            form_id=self.form_id,
            source_module="forms.lifecycle",
        ))

    # ── Internals ────────────────────────────────────────────────────

    def _ensure_editable(self) -> None:
        if self.is_submitted:
            msg = f"Form {self.form_id} has already been submitted"
            raise InvalidTransitionError(msg)

    def _require_trigger(self, trigger: str) -> None:
        if not self.fsm.can_transition(trigger):
            msg = (
                f"Cannot '{trigger}' from {self.state.value} "
                f"(valid: {self.fsm.get_valid_triggers()})"
            )
            raise InvalidTransitionError(msg)

    def _rejected(self, errors: dict[str, str]) -> StepResult:
        self.errors = errors
        focus = next(iter(errors))
        logger.info(
            "Form %s step %d rejected: %s", self.form_id, self.step, ", ".join(errors),
        )
        return StepResult(ok=False, step=self.step, errors=errors, focus_field=focus)

    async def _persist(self) -> None:
        await persist_form_session(
            self._store, self._key, self.fields, self.step, now=self._clock(),
        )

    def _notify_live(self) -> None:
        data = non_empty(self.fields)
        if self.preview is not None:
            self.preview.on_change(data)
        if self.live_quote is not None:
            self.live_quote.on_change(data)
