"""Persisted form session — save, restore with freshness check, clear.

The session is one JSON document {data, step, timestamp} under a single key.
Failures never propagate: a broken store or an unreadable document is
logged and treated as "nothing saved".
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import ValidationError

from motorquote.config import settings
from motorquote.forms.fields import non_empty
from motorquote.models.enums import FormStep
from motorquote.schemas.form import FormSession
from motorquote.storage.base import PersistenceService

logger = logging.getLogger(__name__)


def _ttl(ttl: timedelta | None) -> timedelta:
    return timedelta(hours=settings.form.form_session_ttl_hours) if ttl is None else ttl


async def restore_form_session(
    store: PersistenceService,
    key: str,
    *,
    now: datetime | None = None,
    ttl: timedelta | None = None,
) -> FormSession | None:
    """Return the saved session if present, parseable and younger than the TTL."""
    try:
        raw = await store.get(key)
    except Exception:
        logger.exception("Error loading saved form data (key=%s)", key)
        return None
    if not raw:
        return None

    try:
        session = FormSession.model_validate_json(raw)
    except ValidationError:
        logger.warning("Discarding unreadable saved form data (key=%s)", key)
        return None

    saved_at = session.timestamp
    if saved_at.tzinfo is None:
        saved_at = saved_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    if now - saved_at >= _ttl(ttl):
        logger.info("Saved form data is stale, ignoring (key=%s)", key)
        return None
    return session


async def persist_form_session(
    store: PersistenceService,
    key: str,
    data: Mapping[str, Any],
    step: FormStep,
    *,
    now: datetime | None = None,
) -> FormSession | None:
    """Save the non-empty fields and current step.

    Nothing is written when every field is empty. Returns the session that
    was written, or None when the write was skipped or failed.
    """
    fields = non_empty(data)
    if not fields:
        return None
    session = FormSession(data=fields, step=step, timestamp=now or datetime.now(timezone.utc))
    try:
        await store.set(key, session.model_dump_json())
    except Exception:
        logger.exception("Error saving form data (key=%s)", key)
        return None
    return session


async def clear_form_session(store: PersistenceService, key: str) -> None:
    try:
        await store.remove(key)
    except Exception:
        logger.exception("Error clearing saved form data (key=%s)", key)
