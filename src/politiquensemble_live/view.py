"""Render-ready snapshot of a coverage page.

Templates, terminals and admin screens all consume the same structure; this
module decides ordering and labels, never markup.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from politiquensemble_live.data import (
    EditorAssignment,
    LiveCoverage,
    LiveUpdate,
    Question,
    QuestionStatus,
)
from politiquensemble_live.feed.sorting import sort_for_display
from politiquensemble_live.formatting import TIME_FORMAT, format_date, time_ago
from politiquensemble_live.moderation.states import can_answer
from politiquensemble_live.moderation.workflow import ModerationQueues


@dataclass(frozen=True)
class TimelineEntry:
    update_id: int
    content: str
    time_label: str
    date_label: str
    relative_label: str
    important: bool = False
    is_answer: bool = False
    author_name: str | None = None
    image_url: str | None = None


@dataclass(frozen=True)
class QuestionRow:
    question: Question
    status_label: str
    answer_enabled: bool


@dataclass(frozen=True)
class CoverageView:
    coverage: LiveCoverage
    is_live: bool
    editors: list[EditorAssignment] = field(default_factory=list)
    timeline: list[TimelineEntry] = field(default_factory=list)
    pending: list[QuestionRow] = field(default_factory=list)
    approved: list[QuestionRow] = field(default_factory=list)
    rejected: list[QuestionRow] = field(default_factory=list)


def status_label(question: Question) -> str:
    """Badge text used on the moderation screen."""
    if question.status == QuestionStatus.PENDING:
        return "En attente"
    if question.status == QuestionStatus.REJECTED:
        return "Rejetée"
    return "Répondue" if question.answered else "Approuvée"


def timeline_entry(update: LiveUpdate, *, now: datetime) -> TimelineEntry:
    ts = update.effective_timestamp
    return TimelineEntry(
        update_id=update.id,
        content=update.content,
        time_label=format_date(ts, TIME_FORMAT),
        date_label=format_date(ts),
        relative_label=time_ago(ts, now=now),
        important=update.important,
        is_answer=update.is_answer,
        author_name=update.author.display_name if update.author else None,
        image_url=update.image_url,
    )


def _rows(questions: list[Question]) -> list[QuestionRow]:
    return [QuestionRow(q, status_label(q), can_answer(q)) for q in questions]


def build_view(
    coverage: LiveCoverage,
    updates: list[LiveUpdate],
    editors: list[EditorAssignment] | None = None,
    queues: ModerationQueues | None = None,
    *,
    now: datetime | None = None,
) -> CoverageView:
    """Assemble the page snapshot from the latest fetched data."""
    now = now or datetime.now(tz=UTC)
    queues = queues or ModerationQueues()
    return CoverageView(
        coverage=coverage,
        is_live=coverage.is_live(now),
        editors=list(editors or []),
        timeline=[timeline_entry(u, now=now) for u in sort_for_display(updates)],
        pending=_rows(queues.pending),
        approved=_rows(queues.approved),
        rejected=_rows(queues.rejected),
    )
