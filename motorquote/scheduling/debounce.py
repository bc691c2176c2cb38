"""Debounce scheduler — coalesces bursts of calls into one after a quiet period.

Each schedule() cancels the pending timer and starts a new one, so only the
last call inside the quiescence window runs. Result delivery is guarded by a
monotonic sequence number: an execution that finishes after a newer call was
scheduled is discarded, even if it completes out of order.

close() is the teardown hook. It cancels the pending timer silently. Calls
that are already executing are left to finish and their results are dropped.

Usage:
    scheduler = DebounceScheduler(500, name="preview_card", on_result=render)
    scheduler.schedule(service.generate_quick_preview, request)
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

ResultCallback = Callable[[Any], Any]


class DebounceScheduler:
    """Latest-call-wins debouncer on the running asyncio loop."""

    def __init__(
        self,
        delay_ms: int,
        name: str = "debounce",
        on_result: ResultCallback | None = None,
    ) -> None:
        self.delay_ms = delay_ms
        self.name = name
        self._on_result = on_result
        self._seq = 0
        self._timer: asyncio.Task[None] | None = None
        self._inflight: set[asyncio.Task[None]] = set()
        self._closed = False

        self.latest_result: Any = None
        self.latest_seq = 0          # sequence number of the delivered result
        self.executions = 0

    @property
    def pending(self) -> bool:
        """True while a timer is waiting to fire."""
        return self._timer is not None and not self._timer.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def schedule(self, fn: Callable[..., Any], *args: Any, delay_ms: int | None = None) -> int:
        """(Re)start the quiescence timer for `fn(*args)`.

        Returns the sequence number assigned to this call. After close() this
        is a no-op and returns the last sequence number.
        """
        if self._closed:
            logger.debug("%s: schedule() after close ignored", self.name)
            return self._seq

        self.cancel_pending()
        self._seq += 1
        seq = self._seq
        delay = self.delay_ms if delay_ms is None else delay_ms
        self._timer = asyncio.get_running_loop().create_task(self._fire_after(seq, delay / 1000, fn, args))
        return seq

    def cancel_pending(self) -> None:
        """Cancel the waiting timer, if any. Executions already started continue."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def close(self) -> None:
        """Teardown: cancel pending work and drop any late results."""
        self._closed = True
        self.cancel_pending()

    async def drain(self) -> None:
        """Wait until no timer is pending and nothing is executing."""
        while True:
            tasks = [t for t in (self._timer, *self._inflight) if t is not None and not t.done()]
            if not tasks:
                return
            await asyncio.gather(*tasks, return_exceptions=True)

    # ── Internals ────────────────────────────────────────────────────

    async def _fire_after(self, seq: int, delay: float, fn: Callable[..., Any], args: tuple[Any, ...]) -> None:
        await asyncio.sleep(delay)
        if seq != self._seq or self._closed:
            return
        self._timer = None
        # Run outside the timer task so a later schedule() cannot cancel it
        task = asyncio.get_running_loop().create_task(self._execute(seq, fn, args))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _execute(self, seq: int, fn: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self.executions += 1
        try:
            result = fn(*args)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            logger.exception("%s: scheduled call #%d failed", self.name, seq)
            return

        if seq != self._seq or self._closed:
            logger.debug("%s: discarding stale result #%d (latest #%d)", self.name, seq, self._seq)
            return

        self.latest_result = result
        self.latest_seq = seq
        if self._on_result is None:
            return
        try:
            outcome = self._on_result(result)
            if inspect.isawaitable(outcome):
                await outcome
        except Exception:
            logger.exception("%s: result callback for #%d failed", self.name, seq)
