"""Periodic refetching of open coverage views."""

from politiquensemble_live.polling.controller import (
    COVERAGE_INTERVAL_MS,
    DEFAULT_INTERVAL_MS,
    POLL_INTERVALS_MS,
    PollingController,
    validate_interval,
)
from politiquensemble_live.polling.scheduler import RepeatingTask

__all__ = [
    "COVERAGE_INTERVAL_MS",
    "DEFAULT_INTERVAL_MS",
    "POLL_INTERVALS_MS",
    "PollingController",
    "RepeatingTask",
    "validate_interval",
]
