"""Keyed query cache shared by every reader of the same resource.

Works like the site's browser-side query cache: each resource is stored under
a key, readers subscribe to a key, and a successful mutation invalidates the
keys it touched so subscribers see the server's new state. Nothing is written
optimistically; the cache only ever holds what the server returned.

Responses are tagged with a per-key sequence number taken when the request
starts. A response whose sequence is older than the last applied one for its
key is discarded, so a slow poll can never overwrite a newer result.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Any

from politiquensemble_live.errors import LiveCoverageError

logger = logging.getLogger(__name__)

QueryKey = tuple[Hashable, ...]
Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[[QueryKey, "CacheEntry"], None]


def coverages_key() -> QueryKey:
    return ("live-coverages",)


def coverage_key(coverage_id: int) -> QueryKey:
    return ("live-coverages", coverage_id)


def coverage_slug_key(slug: str) -> QueryKey:
    return ("live-coverages", "slug", slug)


def updates_key(coverage_id: int) -> QueryKey:
    return ("live-coverages", coverage_id, "updates")


def editors_key(coverage_id: int) -> QueryKey:
    return ("live-coverages", coverage_id, "editors")


def questions_key(coverage_id: int) -> QueryKey:
    return ("live-coverages", coverage_id, "questions")


@dataclass
class CacheEntry:
    """Last known server state for one key."""

    data: Any = None
    error: LiveCoverageError | None = None
    stale: bool = True
    applied_seq: int = 0

    @property
    def has_data(self) -> bool:
        return self.applied_seq > 0


class QueryCache:
    """In-memory cache of server reads keyed by resource."""

    def __init__(self) -> None:
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._fetchers: dict[QueryKey, Fetcher] = {}
        self._listeners: dict[QueryKey, list[Listener]] = {}
        self._issued: dict[QueryKey, int] = {}

    def get(self, key: QueryKey) -> CacheEntry | None:
        return self._entries.get(key)

    def data(self, key: QueryKey, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None or not entry.has_data:
            return default
        return entry.data

    def subscribe(self, key: QueryKey, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` for changes to ``key``.

        Returns:
            A callable that removes the listener.
        """
        self._listeners.setdefault(key, []).append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key, [])
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def observed(self, key: QueryKey) -> bool:
        return bool(self._listeners.get(key))

    async def fetch(self, key: QueryKey, fetcher: Fetcher | None = None) -> Any:
        """Run the fetcher for ``key`` and store its result.

        The fetcher is remembered so later invalidations can rerun it.

        Returns:
            The freshest data for ``key``. When this response was overtaken by
            a newer one, the newer data is returned instead.

        Raises:
            LiveCoverageError: The fetch failed. The error is also recorded on
                the entry while previously fetched data is kept.
        """
        if fetcher is not None:
            self._fetchers[key] = fetcher
        fetcher = self._fetchers[key]

        seq = self._issued.get(key, 0) + 1
        self._issued[key] = seq
        entry = self._entries.setdefault(key, CacheEntry())

        try:
            data = await fetcher()
        except LiveCoverageError as exc:
            if seq < entry.applied_seq:
                logger.debug("Ignoring stale failure for %s (seq %d)", key, seq)
                raise
            entry.error = exc
            self._notify(key, entry)
            raise

        if seq < entry.applied_seq:
            logger.debug(
                "Discarding stale response for %s (seq %d < %d)", key, seq, entry.applied_seq
            )
            return entry.data

        entry.data = data
        entry.error = None
        entry.stale = False
        entry.applied_seq = seq
        self._notify(key, entry)
        return data

    async def invalidate(self, *keys: QueryKey) -> None:
        """Mark ``keys`` stale and refetch the ones somebody is watching.

        Refetch failures are recorded on their entries and logged; they do not
        propagate, because the mutation that triggered the invalidation has
        already succeeded.
        """
        to_refetch: list[QueryKey] = []
        for key in keys:
            entry = self._entries.get(key)
            if entry is not None:
                entry.stale = True
            if key in self._fetchers and self.observed(key):
                to_refetch.append(key)

        results = await asyncio.gather(
            *(self.fetch(key) for key in to_refetch), return_exceptions=True
        )
        for key, result in zip(to_refetch, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning("Refetch after invalidation failed for %s: %s", key, result)

    def _notify(self, key: QueryKey, entry: CacheEntry) -> None:
        for listener in list(self._listeners.get(key, [])):
            listener(key, entry)
