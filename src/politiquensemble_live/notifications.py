"""Transient user notifications ("toasts") emitted after mutations."""

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

logger = logging.getLogger(__name__)


class ToastVariant(StrEnum):
    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


@dataclass(frozen=True)
class Toast:
    title: str
    description: str = ""
    variant: ToastVariant = ToastVariant.DEFAULT


class Notifier(Protocol):
    """Anything that can show a toast to the person operating the client."""

    def notify(self, toast: Toast) -> None: ...


class LoggingNotifier:
    """Writes toasts to the log; the default when no UI is attached."""

    def notify(self, toast: Toast) -> None:
        if toast.variant is ToastVariant.DESTRUCTIVE:
            logger.warning("%s: %s", toast.title, toast.description)
        else:
            logger.info("%s: %s", toast.title, toast.description)
