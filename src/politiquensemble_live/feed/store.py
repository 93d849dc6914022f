"""Update feed store: the timeline of one coverage, as last fetched."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from politiquensemble_live.api.base import LiveCoverageAPI
from politiquensemble_live.cache import CacheEntry, QueryCache, QueryKey, updates_key
from politiquensemble_live.data import LiveUpdate
from politiquensemble_live.errors import LiveCoverageError
from politiquensemble_live.feed.sorting import sort_for_display

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedSnapshot:
    """What a timeline should show right now.

    ``error`` is set when the latest load failed; ``updates`` then still holds
    the last good list so the view can keep it on screen next to a retry button.
    """

    coverage_id: int
    updates: list[LiveUpdate] = field(default_factory=list)
    error: LiveCoverageError | None = None
    loaded: bool = False

    @property
    def retryable(self) -> bool:
        return self.error is not None


class UpdateFeedStore:
    """Holds the display-ordered updates of coverages.

    Each load replaces the full set for that coverage: there is no delta log
    and no local insert. Readers of the same coverage share one cache entry.

    Args:
        api: Live-coverage API client.
        cache: Query cache shared with the rest of the application.
    """

    def __init__(self, api: LiveCoverageAPI, cache: QueryCache) -> None:
        self._api = api
        self._cache = cache

    async def load(self, coverage_id: int) -> list[LiveUpdate]:
        """Fetch every update of a coverage and return them display-ordered.

        Raises:
            LiveCoverageError: The fetch failed; the snapshot keeps the last
                good list and exposes the error.
        """
        try:
            updates = await self._cache.fetch(
                updates_key(coverage_id),
                lambda: self._api.get_updates(coverage_id),
            )
        except LiveCoverageError:
            logger.warning("Could not load updates for coverage %d", coverage_id, exc_info=True)
            raise
        return sort_for_display(updates)

    async def retry(self, coverage_id: int) -> list[LiveUpdate]:
        """Manual retry after a failed load."""
        return await self.load(coverage_id)

    def snapshot(self, coverage_id: int) -> FeedSnapshot:
        entry = self._cache.get(updates_key(coverage_id))
        if entry is None:
            return FeedSnapshot(coverage_id=coverage_id)
        return FeedSnapshot(
            coverage_id=coverage_id,
            updates=sort_for_display(entry.data or []),
            error=entry.error,
            loaded=entry.has_data,
        )

    def subscribe(
        self, coverage_id: int, listener: Callable[[FeedSnapshot], None]
    ) -> Callable[[], None]:
        """Call ``listener`` with a fresh snapshot whenever the coverage's feed changes."""

        def _on_change(_key: QueryKey, _entry: CacheEntry) -> None:
            listener(self.snapshot(coverage_id))

        return self._cache.subscribe(updates_key(coverage_id), _on_change)
