"""Cancellable repeating task driven by an injectable sleep."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable

from politiquensemble_live.errors import LiveCoverageError

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]
Tick = Callable[[], Awaitable[object]]


class RepeatingTask:
    """Call ``tick`` every ``interval_ms`` milliseconds until stopped.

    Each tick runs as its own task. Stopping only ends the schedule: a tick
    already in flight finishes and applies its result, it is not aborted.

    Args:
        tick: Coroutine function to run on every period.
        interval_ms: Period in milliseconds; 0 means the task never fires.
        sleep: Sleep implementation, ``asyncio.sleep`` unless a test clock is
            injected.
        name: Label used in log lines.
    """

    def __init__(
        self,
        tick: Tick,
        interval_ms: int,
        *,
        sleep: Sleep = asyncio.sleep,
        name: str = "poll",
    ) -> None:
        if interval_ms < 0:
            raise ValueError(f"interval_ms must be >= 0, got {interval_ms}")
        self._tick = tick
        self._interval_ms = interval_ms
        self._sleep = sleep
        self._name = name
        self._loop_task: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[object]] = set()

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    def start(self) -> None:
        """Begin the schedule. Must be called from a running event loop."""
        if self.running or self._interval_ms == 0:
            return
        self._loop_task = asyncio.get_running_loop().create_task(self._run(), name=self._name)
        logger.debug("%s: every %d ms", self._name, self._interval_ms)

    async def stop(self) -> None:
        """End the schedule without touching ticks already in flight."""
        task, self._loop_task = self._loop_task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("%s: stopped", self._name)

    async def reschedule(self, interval_ms: int) -> None:
        """Switch to a new period immediately.

        A running schedule restarts with the new period, so the next tick is a
        full new period away; 0 leaves it stopped. A stopped schedule stays
        stopped until ``start`` is called.
        """
        if interval_ms < 0:
            raise ValueError(f"interval_ms must be >= 0, got {interval_ms}")
        was_running = self.running
        await self.stop()
        self._interval_ms = interval_ms
        if was_running:
            self.start()

    async def _run(self) -> None:
        while True:
            await self._sleep(self._interval_ms / 1000)
            tick = asyncio.get_running_loop().create_task(self._tick())
            self._in_flight.add(tick)
            tick.add_done_callback(self._tick_done)

    def _tick_done(self, task: asyncio.Task[object]) -> None:
        self._in_flight.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if isinstance(exc, LiveCoverageError):
            logger.warning("%s: tick failed: %s", self._name, exc)
        elif exc is not None:
            logger.error("%s: tick crashed", self._name, exc_info=exc)
