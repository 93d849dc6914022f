"""Core data models for live coverage.

Records mirror the JSON the site's REST API returns (camelCase keys) and are
immutable: a refetch replaces them, nothing edits them in place.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any

from politiquensemble_live.formatting import parse_datetime


class QuestionStatus(StrEnum):
    """Moderation status of an audience question."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UpdateType(StrEnum):
    """Kind of content carried by a timeline update."""

    NORMAL = "normal"
    YOUTUBE = "youtube"
    ARTICLE = "article"
    ELECTION = "election"


@dataclass(frozen=True)
class AuthorProfile:
    """Public display fields of a site user, joined onto updates and editors."""

    display_name: str
    title: str | None = None
    avatar_url: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any] | None) -> AuthorProfile | None:
        if not data or not data.get("displayName"):
            return None
        return cls(
            display_name=data["displayName"],
            title=data.get("title"),
            avatar_url=data.get("avatarUrl"),
        )


@dataclass(frozen=True)
class LiveCoverage:
    """One live-tracked event (e.g. an election night)."""

    id: int
    title: str
    slug: str
    subject: str
    context: str = ""
    image_url: str | None = None
    active: bool = True
    end_date: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_live(self, now: datetime) -> bool:
        """Active and not past its end date."""
        if not self.active:
            return False
        return self.end_date is None or self.end_date > now

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> LiveCoverage:
        return cls(
            id=int(data["id"]),
            title=data.get("title", ""),
            slug=data.get("slug", ""),
            subject=data.get("subject", ""),
            context=data.get("context") or "",
            image_url=data.get("imageUrl"),
            active=bool(data.get("active", True)),
            end_date=parse_datetime(data.get("endDate")),
            created_at=parse_datetime(data.get("createdAt")),
            updated_at=parse_datetime(data.get("updatedAt")),
        )


@dataclass(frozen=True)
class LiveUpdate:
    """A single timestamped entry in a coverage timeline."""

    id: int
    coverage_id: int
    content: str
    author_id: int | None = None
    author: AuthorProfile | None = None
    timestamp: datetime | None = None
    created_at: datetime | None = None
    image_url: str | None = None
    important: bool = False
    is_answer: bool = False
    question_id: int | None = None
    update_type: UpdateType = UpdateType.NORMAL
    youtube_url: str | None = None
    article_id: int | None = None
    election_results: str | None = None

    @property
    def effective_timestamp(self) -> datetime | None:
        """The publication time used for ordering: ``timestamp`` or ``created_at``."""
        return self.timestamp or self.created_at

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> LiveUpdate:
        raw_type = data.get("updateType") or UpdateType.NORMAL
        try:
            update_type = UpdateType(raw_type)
        except ValueError:
            update_type = UpdateType.NORMAL
        return cls(
            id=int(data["id"]),
            coverage_id=int(data["coverageId"]),
            content=data.get("content", ""),
            author_id=data.get("authorId"),
            author=AuthorProfile.from_api(data.get("author")),
            timestamp=parse_datetime(data.get("timestamp")),
            created_at=parse_datetime(data.get("createdAt")),
            image_url=data.get("imageUrl"),
            important=bool(data.get("important")),
            is_answer=bool(data.get("isAnswer")),
            question_id=data.get("questionId"),
            update_type=update_type,
            youtube_url=data.get("youtubeUrl"),
            article_id=data.get("articleId"),
            election_results=data.get("electionResults"),
        )


@dataclass(frozen=True)
class EditorAssignment:
    """Grant allowing a user to post in one coverage, with an optional role label."""

    id: int
    coverage_id: int
    editor_id: int
    role: str | None = None
    editor: AuthorProfile | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> EditorAssignment:
        return cls(
            id=int(data["id"]),
            coverage_id=int(data["coverageId"]),
            editor_id=int(data["editorId"]),
            role=data.get("role") or None,
            editor=AuthorProfile.from_api(data.get("editor")),
        )


@dataclass(frozen=True)
class Question:
    """An audience question awaiting moderation."""

    id: int
    coverage_id: int
    username: str
    content: str
    status: QuestionStatus = QuestionStatus.PENDING
    answered: bool = False
    timestamp: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Question:
        try:
            status = QuestionStatus(data.get("status") or QuestionStatus.PENDING)
        except ValueError:
            status = QuestionStatus.PENDING
        return cls(
            id=int(data["id"]),
            coverage_id=int(data["coverageId"]),
            username=data.get("username", ""),
            content=data.get("content", ""),
            status=status,
            answered=bool(data.get("answered")),
            timestamp=parse_datetime(data.get("timestamp")),
        )
