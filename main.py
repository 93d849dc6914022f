#!/usr/bin/env python
"""CLI for following Politiquensemble live coverages."""

import argparse
import asyncio
import logging
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator, model_validator

from politiquensemble_live.config import (
    LiveClient,
    create_from_config,
    get_default_config_path,
    load_config,
)
from politiquensemble_live.errors import LiveCoverageError
from politiquensemble_live.feed import FeedSnapshot
from politiquensemble_live.formatting import truncate_text
from politiquensemble_live.polling import POLL_INTERVALS_MS, validate_interval
from politiquensemble_live.view import build_view, timeline_entry

logger = logging.getLogger(__name__)

QUESTION_PREVIEW_CHARS = 80


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: Literal["watch", "queues"]
    target: str
    config: Path
    interval: int | None = None

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v

    @field_validator("interval")
    @classmethod
    def interval_must_be_selectable(cls, v: int | None) -> int | None:
        return None if v is None else validate_interval(v)

    @model_validator(mode="after")
    def queues_needs_numeric_id(self) -> "CLIArgs":
        if self.command == "queues" and not self.target.isdigit():
            raise ValueError(f"queues expects a coverage id, got {self.target!r}")
        return self


async def watch(client: LiveClient, slug: str, interval_ms: int | None) -> None:
    """Print the timeline of a coverage, then every new update as it appears."""
    coverage = await client.admin.get_by_slug(slug)
    poller = client.poller(coverage.id, slug=slug, interval_ms=interval_ms)
    _, updates = await poller.refresh_now()

    seen: set[int] = set()
    for entry in reversed(build_view(coverage, updates).timeline):
        seen.add(entry.update_id)
        print(_line(entry.time_label, entry.content, entry.important))

    def on_feed(snapshot: FeedSnapshot) -> None:
        if snapshot.error is not None:
            logger.warning(f"Refresh failed: {snapshot.error}")
            return
        for update in reversed(snapshot.updates):
            if update.id not in seen:
                seen.add(update.id)
                entry = timeline_entry(update, now=datetime.now(tz=UTC))
                print(_line(entry.time_label, entry.content, entry.important))

    unsubscribe = client.store.subscribe(coverage.id, on_feed)
    logger.info(f"Following '{coverage.title}' every {poller.interval_ms / 1000:g}s (Ctrl+C to stop)")
    poller.start()
    try:
        await asyncio.Event().wait()
    finally:
        unsubscribe()
        await poller.stop()


async def queues(client: LiveClient, coverage_id: int) -> None:
    """Print the moderation queues of a coverage."""
    coverage = await client.admin.get(coverage_id)
    view = build_view(coverage, [], queues=await client.moderation.queues(coverage_id))
    for title, rows in (
        ("En attente", view.pending),
        ("Approuvées", view.approved),
        ("Rejetées", view.rejected),
    ):
        print(f"\n{title} ({len(rows)})")
        for row in rows:
            q = row.question
            content = truncate_text(q.content, QUESTION_PREVIEW_CHARS)
            print(f"  #{q.id} [{row.status_label}] {q.username}: {content}")


def _line(time_label: str, content: str, important: bool) -> str:
    marker = "!" if important else " "
    return f"{marker} {time_label}  {content}"


async def run(args: CLIArgs) -> None:
    """Execute the requested command with the given configuration."""
    config = load_config(args.config)
    logging.getLogger().setLevel(config.logging.level)
    client = create_from_config(config)
    try:
        if args.command == "watch":
            await watch(client, args.target, args.interval)
        else:
            await queues(client, int(args.target))
    finally:
        await client.aclose()


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Follow and moderate live coverages.")
    parser.add_argument(
        "command",
        choices=["watch", "queues"],
        help="watch: follow a coverage timeline; queues: list questions awaiting moderation",
    )
    parser.add_argument(
        "target",
        help="Coverage slug (watch) or coverage id (queues)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--interval",
        "-i",
        type=int,
        default=None,
        help=f"Refresh interval in ms, one of {', '.join(map(str, POLL_INTERVALS_MS))}",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command=ns.command,
            target=ns.target,
            config=config_path,
            interval=ns.interval,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except LiveCoverageError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
