"""Polling controller for an open coverage view."""

from __future__ import annotations

import asyncio
import logging

from politiquensemble_live.api.base import LiveCoverageAPI
from politiquensemble_live.cache import QueryCache, coverage_key, coverage_slug_key
from politiquensemble_live.data import LiveCoverage, LiveUpdate
from politiquensemble_live.feed.store import UpdateFeedStore
from politiquensemble_live.polling.scheduler import RepeatingTask, Sleep

logger = logging.getLogger(__name__)

# Choices offered by the refresh selector: Off, 5 s, 15 s, 30 s, 60 s.
POLL_INTERVALS_MS = (0, 5000, 15000, 30000, 60000)
DEFAULT_INTERVAL_MS = 15000
COVERAGE_INTERVAL_MS = 60000


def validate_interval(interval_ms: int) -> int:
    if interval_ms not in POLL_INTERVALS_MS:
        allowed = ", ".join(str(ms) for ms in POLL_INTERVALS_MS)
        raise ValueError(f"Unsupported poll interval {interval_ms} ms (allowed: {allowed})")
    return interval_ms


class PollingController:
    """Keeps one coverage's metadata and timeline fresh while a view is open.

    The timeline is refetched every ``interval_ms`` (user selectable, 0 = Off)
    and the coverage metadata every ``coverage_interval_ms`` so a view notices
    when the coverage is closed. ``start``/``stop`` correspond to the view
    being opened and closed; ``suspend``/``resume`` pause polling while the
    view stays open. ``refresh_now`` works in every state.

    Args:
        api: Live-coverage API client.
        cache: Shared query cache.
        store: Update feed store for the timeline.
        coverage_id: Coverage being watched.
        slug: When given, metadata is read from the public slug endpoint
            instead of the admin one.
        interval_ms: Initial timeline period.
        coverage_interval_ms: Metadata period; 0 disables metadata polling.
        sleep: Injectable sleep for the schedulers.
    """

    def __init__(
        self,
        api: LiveCoverageAPI,
        cache: QueryCache,
        store: UpdateFeedStore,
        coverage_id: int,
        *,
        slug: str | None = None,
        interval_ms: int = DEFAULT_INTERVAL_MS,
        coverage_interval_ms: int = COVERAGE_INTERVAL_MS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._api = api
        self._cache = cache
        self._store = store
        self._coverage_id = coverage_id
        self._slug = slug
        self._mounted = False
        self._suspended = False
        self._updates_task = RepeatingTask(
            self._poll_updates,
            validate_interval(interval_ms),
            sleep=sleep,
            name=f"updates[{coverage_id}]",
        )
        self._coverage_task = RepeatingTask(
            self._poll_coverage,
            coverage_interval_ms,
            sleep=sleep,
            name=f"coverage[{coverage_id}]",
        )

    @property
    def coverage_id(self) -> int:
        return self._coverage_id

    @property
    def interval_ms(self) -> int:
        return self._updates_task.interval_ms

    @property
    def active(self) -> bool:
        """True while the view is open and polling is not suspended."""
        return self._mounted and not self._suspended

    def start(self) -> None:
        """Begin polling (view opened)."""
        self._mounted = True
        if not self._suspended:
            self._start_tasks()

    async def stop(self) -> None:
        """Stop scheduling fetches (view closed). In-flight fetches still land."""
        self._mounted = False
        await self._stop_tasks()

    async def suspend(self) -> None:
        self._suspended = True
        await self._stop_tasks()

    def resume(self) -> None:
        self._suspended = False
        if self._mounted:
            self._start_tasks()

    async def set_interval(self, interval_ms: int) -> None:
        """Change the timeline cadence immediately; 0 turns automatic refresh off.

        Raises:
            ValueError: ``interval_ms`` is not one of ``POLL_INTERVALS_MS``.
        """
        validate_interval(interval_ms)
        await self._updates_task.reschedule(interval_ms)
        if self.active:
            self._updates_task.start()
        logger.info("Coverage %d: refresh interval set to %d ms", self._coverage_id, interval_ms)

    async def refresh_now(self) -> tuple[LiveCoverage, list[LiveUpdate]]:
        """Fetch metadata and timeline now, outside the schedule.

        Both fetches run to completion even if one fails.

        Raises:
            LiveCoverageError: The first failure, after both fetches finished.
        """
        coverage, updates = await asyncio.gather(
            self._poll_coverage(),
            self._store.load(self._coverage_id),
            return_exceptions=True,
        )
        for result in (coverage, updates):
            if isinstance(result, BaseException):
                raise result
        return coverage, updates  # type: ignore[return-value]

    def _start_tasks(self) -> None:
        self._updates_task.start()
        self._coverage_task.start()

    async def _stop_tasks(self) -> None:
        await asyncio.gather(self._updates_task.stop(), self._coverage_task.stop())

    async def _poll_updates(self) -> list[LiveUpdate]:
        return await self._store.load(self._coverage_id)

    async def _poll_coverage(self) -> LiveCoverage:
        if self._slug is not None:
            slug = self._slug
            return await self._cache.fetch(
                coverage_slug_key(slug), lambda: self._api.get_coverage_by_slug(slug)
            )
        return await self._cache.fetch(
            coverage_key(self._coverage_id), lambda: self._api.get_coverage(self._coverage_id)
        )
