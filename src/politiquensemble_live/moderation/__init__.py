"""Audience question moderation."""

from politiquensemble_live.moderation.states import (
    approve,
    can_answer,
    can_approve,
    can_reject,
    mark_answered,
    reject,
)
from politiquensemble_live.moderation.workflow import ModerationQueues, ModerationWorkflow

__all__ = [
    "ModerationQueues",
    "ModerationWorkflow",
    "approve",
    "can_answer",
    "can_approve",
    "can_reject",
    "mark_answered",
    "reject",
]
