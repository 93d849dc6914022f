"""Factory functions to create components from configuration."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import httpx

from politiquensemble_live.admin import CoverageAdmin
from politiquensemble_live.api.http import HttpLiveCoverageAPI
from politiquensemble_live.cache import QueryCache
from politiquensemble_live.config.models import ApiConfig, LiveConfig
from politiquensemble_live.feed.store import UpdateFeedStore
from politiquensemble_live.moderation.workflow import ModerationWorkflow
from politiquensemble_live.notifications import LoggingNotifier, Notifier
from politiquensemble_live.polling.controller import PollingController
from politiquensemble_live.polling.scheduler import Sleep


@dataclass
class LiveClient:
    """Components sharing one API client and one query cache."""

    config: LiveConfig
    api: HttpLiveCoverageAPI
    cache: QueryCache
    store: UpdateFeedStore
    moderation: ModerationWorkflow
    admin: CoverageAdmin

    def poller(
        self,
        coverage_id: int,
        *,
        slug: str | None = None,
        interval_ms: int | None = None,
        sleep: Sleep = asyncio.sleep,
    ) -> PollingController:
        """Create a polling controller using the configured cadences."""
        return PollingController(
            self.api,
            self.cache,
            self.store,
            coverage_id,
            slug=slug,
            interval_ms=interval_ms if interval_ms is not None else self.config.polling.interval_ms,
            coverage_interval_ms=self.config.polling.coverage_interval_ms,
            sleep=sleep,
        )

    async def aclose(self) -> None:
        await self.api.aclose()


def create_api(
    config: ApiConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> HttpLiveCoverageAPI:
    """Create the HTTP API client from config."""
    return HttpLiveCoverageAPI(
        config.base_url,
        timeout=config.timeout_seconds,
        session_cookie=config.session_cookie,
        token=config.token,
        transport=transport,
    )


def create_from_config(
    config: LiveConfig,
    *,
    notifier: Notifier | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> LiveClient:
    """Create every component from root config.

    Args:
        config: Root configuration.
        notifier: Toast sink; defaults to logging.
        transport: Optional httpx transport override.

    Returns:
        A LiveClient whose components share one cache.
    """
    notifier = notifier or LoggingNotifier()
    api = create_api(config.api, transport=transport)
    cache = QueryCache()
    return LiveClient(
        config=config,
        api=api,
        cache=cache,
        store=UpdateFeedStore(api, cache),
        moderation=ModerationWorkflow(api, cache, notifier),
        admin=CoverageAdmin(api, cache, notifier),
    )
