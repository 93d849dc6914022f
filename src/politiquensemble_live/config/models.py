"""Pydantic configuration models for the live-coverage client."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from politiquensemble_live.polling.controller import (
    COVERAGE_INTERVAL_MS,
    DEFAULT_INTERVAL_MS,
    validate_interval,
)

# ============================================================
# API Config
# ============================================================


class ApiConfig(BaseModel):
    """Where the site lives and how to authenticate."""

    base_url: str = "https://politiquensemble.fr"
    timeout_seconds: float = Field(default=30.0, gt=0)
    session_cookie: str | None = None
    token: str | None = None

    model_config = {"frozen": True}


# ============================================================
# Polling Config
# ============================================================


class PollingConfig(BaseModel):
    """Refresh cadence for open coverage views."""

    interval_ms: int = DEFAULT_INTERVAL_MS
    coverage_interval_ms: int = Field(default=COVERAGE_INTERVAL_MS, ge=0)

    model_config = {"frozen": True}

    @field_validator("interval_ms")
    @classmethod
    def interval_must_be_selectable(cls, v: int) -> int:
        return validate_interval(v)


# ============================================================
# Logging Config
# ============================================================


class LoggingConfig(BaseModel):
    """Log level for the CLI."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = {"frozen": True}


# ============================================================
# Root Config
# ============================================================


class LiveConfig(BaseModel):
    """Root configuration."""

    api: ApiConfig = Field(default_factory=ApiConfig)
    polling: PollingConfig = Field(default_factory=PollingConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}
