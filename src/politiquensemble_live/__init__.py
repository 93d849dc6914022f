"""Politiquensemble Live: client for the site's live-coverage timelines and Q&A moderation."""

from politiquensemble_live.admin import MAX_ACTIVE_COVERAGES, CoverageAdmin
from politiquensemble_live.api import HttpLiveCoverageAPI, LiveCoverageAPI
from politiquensemble_live.cache import CacheEntry, QueryCache
from politiquensemble_live.config import (
    LiveClient,
    LiveConfig,
    create_from_config,
    get_default_config_path,
    load_config,
)
from politiquensemble_live.data import (
    AnswerInput,
    AuthorProfile,
    CoverageInput,
    CoveragePatch,
    EditorAssignment,
    EditorInput,
    LiveCoverage,
    LiveUpdate,
    Question,
    QuestionInput,
    QuestionStatus,
    UpdateInput,
    UpdateType,
)
from politiquensemble_live.errors import (
    APIError,
    InvalidTransitionError,
    LiveCoverageError,
    NotFoundError,
    TransportError,
)
from politiquensemble_live.feed import FeedSnapshot, UpdateFeedStore, sort_for_display
from politiquensemble_live.formatting import format_date, slugify, time_ago, truncate_text
from politiquensemble_live.moderation import ModerationQueues, ModerationWorkflow
from politiquensemble_live.notifications import LoggingNotifier, Notifier, Toast, ToastVariant
from politiquensemble_live.polling import POLL_INTERVALS_MS, PollingController, RepeatingTask
from politiquensemble_live.view import CoverageView, build_view

__all__ = [
    # Models
    "AuthorProfile",
    "EditorAssignment",
    "LiveCoverage",
    "LiveUpdate",
    "Question",
    "QuestionStatus",
    "UpdateType",
    # Inputs
    "AnswerInput",
    "CoverageInput",
    "CoveragePatch",
    "EditorInput",
    "QuestionInput",
    "UpdateInput",
    # Errors
    "APIError",
    "InvalidTransitionError",
    "LiveCoverageError",
    "NotFoundError",
    "TransportError",
    # API
    "HttpLiveCoverageAPI",
    "LiveCoverageAPI",
    # Cache and feed
    "CacheEntry",
    "FeedSnapshot",
    "QueryCache",
    "UpdateFeedStore",
    "sort_for_display",
    # Polling
    "POLL_INTERVALS_MS",
    "PollingController",
    "RepeatingTask",
    # Services
    "MAX_ACTIVE_COVERAGES",
    "CoverageAdmin",
    "ModerationQueues",
    "ModerationWorkflow",
    # Notifications
    "LoggingNotifier",
    "Notifier",
    "Toast",
    "ToastVariant",
    # View
    "CoverageView",
    "build_view",
    # Formatting
    "format_date",
    "slugify",
    "time_ago",
    "truncate_text",
    # Config
    "LiveClient",
    "LiveConfig",
    "create_from_config",
    "get_default_config_path",
    "load_config",
]
