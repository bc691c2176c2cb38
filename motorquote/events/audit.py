"""Audit log subscriber — writes every SystemEvent as one structured log line.

Registered as a global subscriber (receives ALL events). This is the
system's audit trail for debugging and support.

Never raises — failures are logged but never propagate to the event system.
"""

from __future__ import annotations

import logging

import structlog

from motorquote.schemas.events import SystemEvent

logger = logging.getLogger(__name__)
audit_logger = structlog.get_logger("motorquote.audit")


async def audit_on_event(event: SystemEvent) -> None:
    """Log a SystemEvent with its context and payload as key-value pairs.

    Called by the event system for every emitted event.
    """
    try:
        audit_logger.info(
            event.event_type.value,
            event_id=str(event.id),
            form_id=event.form_id,
            quote_id=event.quote_id,
            source=event.source_module,
            **{f"data_{key}": value for key, value in event.data.items()},
        )
    except Exception:
        logger.exception(
            "Failed to write audit event: %s (form=%s quote=%s)",
            event.event_type.value,
            event.form_id,
            event.quote_id,
        )
