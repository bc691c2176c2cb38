"""SystemEvent schema — the event type that flows through the quoting system.

Quote, form and checkout actions emit a SystemEvent. Subscribers (the audit
logger, anything registered at startup) consume these events asynchronously.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """All event types emitted by the system."""

    # Quotes
    QUOTE_GENERATED = "quote.generated"

    # Form lifecycle
    FORM_RESTORED = "form.restored"
    FORM_STEP_CHANGED = "form.step_changed"
    FORM_SUBMITTED = "form.submitted"
    FORM_CLEARED = "form.cleared"

    # Checkout
    PAYMENT_COMPLETED = "payment.completed"

    # System
    SYSTEM_STARTUP = "system.startup"
    SYSTEM_SHUTDOWN = "system.shutdown"


class SystemEvent(BaseModel):
    """Core event emitted by quote, form and checkout flows.

    Immutable once created.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Context (optional; not every event has a form or a quote)
    form_id: str | None = None
    quote_id: str | None = None

    # Flexible payload
    data: dict[str, Any] = Field(default_factory=dict)

    # Metadata
    source_module: str | None = Field(default=None, description="Module that emitted this event")

    model_config = {"frozen": True}
