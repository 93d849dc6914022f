"""Configuration module for the live-coverage client."""

from politiquensemble_live.config.factory import LiveClient, create_api, create_from_config
from politiquensemble_live.config.loader import get_default_config_path, load_config
from politiquensemble_live.config.models import (
    ApiConfig,
    LiveConfig,
    LoggingConfig,
    PollingConfig,
)

__all__ = [
    "ApiConfig",
    "LiveClient",
    "LiveConfig",
    "LoggingConfig",
    "PollingConfig",
    "create_api",
    "create_from_config",
    "get_default_config_path",
    "load_config",
]
