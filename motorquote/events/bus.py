"""In-process event bus for SystemEvents.

Quote, form and checkout flows call `emit`; the event is queued and a
background worker hands it to every subscriber. Emitters never wait on
subscribers, and a failing subscriber never affects the others.

The worker is bound to the loop it was started on. An `emit` on a different
(or first) loop starts a fresh queue and worker there.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from motorquote.schemas.events import SystemEvent

logger = logging.getLogger(__name__)

Subscriber = Callable[[SystemEvent], Awaitable[None]]

_subscribers: list[Subscriber] = []
_queue: asyncio.Queue[SystemEvent] | None = None
_worker: asyncio.Task[None] | None = None


def subscribe(handler: Subscriber) -> None:
    """Deliver every future event to `handler`."""
    if handler not in _subscribers:
        _subscribers.append(handler)
        logger.info("Event subscriber registered: %s", getattr(handler, "__name__", handler))


def unsubscribe(handler: Subscriber) -> None:
    if handler in _subscribers:
        _subscribers.remove(handler)


async def emit(event: SystemEvent) -> None:
    """Queue an event for delivery."""
    queue = _ensure_worker()
    queue.put_nowait(event)
    logger.debug("Queued %s (form=%s quote=%s)", event.event_type.value, event.form_id, event.quote_id)


async def start_event_system() -> None:
    """Start the worker on the running loop (FastAPI lifespan startup)."""
    _ensure_worker()
    logger.info("Event system started with %d subscriber(s)", len(_subscribers))


async def stop_event_system() -> None:
    """Deliver what is queued, then stop the worker (FastAPI lifespan shutdown)."""
    global _queue, _worker
    if _worker_is_current():
        assert _queue is not None and _worker is not None
        await _queue.join()
        _worker.cancel()
        await asyncio.gather(_worker, return_exceptions=True)
    _queue = None
    _worker = None
    logger.info("Event system stopped")


def _worker_is_current() -> bool:
    if _worker is None or _worker.done():
        return False
    return _worker.get_loop() is asyncio.get_running_loop()


def _ensure_worker() -> asyncio.Queue[SystemEvent]:
    global _queue, _worker
    if not _worker_is_current() or _queue is None:
        _queue = asyncio.Queue()
        _worker = asyncio.get_running_loop().create_task(_drain(_queue), name="event-bus")
    return _queue


async def _drain(queue: asyncio.Queue[SystemEvent]) -> None:
    while True:
        event = await queue.get()
        try:
            await _deliver(event)
        finally:
            queue.task_done()


async def _deliver(event: SystemEvent) -> None:
    handlers = list(_subscribers)
    results = await asyncio.gather(*(_call(handler, event) for handler in handlers), return_exceptions=True)
    for handler, result in zip(handlers, results):
        if isinstance(result, Exception):
            logger.error(
                "Subscriber %s failed on %s: %s",
                getattr(handler, "__name__", handler),
                event.event_type.value,
                result,
                exc_info=result,
            )


async def _call(handler: Subscriber, event: SystemEvent) -> None:
    await handler(event)
