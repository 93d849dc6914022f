"""Data models for live coverage."""

from politiquensemble_live.data.inputs import (
    AnswerInput,
    CoverageInput,
    CoveragePatch,
    EditorInput,
    QuestionInput,
    UpdateInput,
)
from politiquensemble_live.data.models import (
    AuthorProfile,
    EditorAssignment,
    LiveCoverage,
    LiveUpdate,
    Question,
    QuestionStatus,
    UpdateType,
)

__all__ = [
    "AnswerInput",
    "AuthorProfile",
    "CoverageInput",
    "CoveragePatch",
    "EditorAssignment",
    "EditorInput",
    "LiveCoverage",
    "LiveUpdate",
    "Question",
    "QuestionInput",
    "QuestionStatus",
    "UpdateInput",
    "UpdateType",
]
