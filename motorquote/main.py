"""FastAPI application entry point — wires everything together.

Usage:
    python -m motorquote.main

Serves the quote, form and checkout APIs plus a health check.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

import structlog
import uvicorn
from fastapi import FastAPI

from motorquote.api import forms, payments, quotes
from motorquote.api.deps import get_store, reset_store
from motorquote.config import settings
from motorquote.events.audit import audit_on_event
from motorquote.events.bus import emit, start_event_system, stop_event_system, subscribe, unsubscribe
from motorquote.schemas.events import EventType, SystemEvent
from motorquote.storage.redis_store import RedisStore

# ── Logging setup ────────────────────────────────────────────────────

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    stream=sys.stdout,
)
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = logging.getLogger(__name__)

# ── FastAPI lifespan ─────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    logger.info("Starting %s (env=%s)", settings.branding.app_name, settings.environment)

    # 1. Event system + audit logging (global subscriber)
    await start_event_system()
    subscribe(audit_on_event)
    logger.info("Audit logging subscriber registered")

    # 2. Persistence
    store = get_store()
    if isinstance(store, RedisStore):
        if await store.ping():
            logger.info("Redis store connected")
        else:
            logger.warning("Redis store unreachable at startup; requests will retry")
    else:
        logger.info("Using in-memory store")

    await emit(SystemEvent(
        event_type=EventType.SYSTEM_STARTUP,
        data={"environment": settings.environment, "store": settings.store.store_backend},
        source_module="main",
    ))

    try:
        yield
    finally:
        logger.info("Shutting down %s...", settings.branding.app_name)

        await emit(SystemEvent(event_type=EventType.SYSTEM_SHUTDOWN, source_module="main"))

        closed = reset_store()
        if isinstance(closed, RedisStore):
            await closed.close()
            logger.info("Redis store closed")

        await stop_event_system()
        unsubscribe(audit_on_event)

    logger.info("%s shutdown complete", settings.branding.app_name)


# ── FastAPI app ──────────────────────────────────────────────────────

app = FastAPI(
    title=f"{settings.branding.app_name} API",
    description=f"Motor insurance quotes for {settings.branding.insurer_name}",
    version="0.1.0",
    lifespan=lifespan,
)
app.include_router(quotes.router)
app.include_router(forms.router)
app.include_router(payments.router)


@app.get("/health")
async def health_check() -> dict[str, Any]:
    """Health check endpoint."""
    store = get_store()
    store_ok = await store.ping() if isinstance(store, RedisStore) else True
    return {
        "status": "ok" if store_ok else "degraded",
        "environment": settings.environment,
        "app_name": settings.branding.app_name,
        "store": settings.store.store_backend,
    }


# ── Entry point ──────────────────────────────────────────────────────

if __name__ == "__main__":
    uvicorn.run(
        "motorquote.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.environment == "development",
        log_level=settings.log_level.lower(),
    )
