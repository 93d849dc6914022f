"""Reading the client settings (site URL, credentials, refresh cadence) from YAML."""

from pathlib import Path

import yaml

from politiquensemble_live.config.models import LiveConfig


def load_config(path: Path | str) -> LiveConfig:
    """Read client settings from a YAML file.

    Sections that are left out (``api``, ``polling``, ``logging``) take their
    defaults, so an empty file points at the public site with a 15 s refresh.

    Raises:
        FileNotFoundError: The file does not exist.
        pydantic.ValidationError: A value is invalid, e.g. a refresh interval
            outside 0/5000/15000/30000/60000 ms.
    """
    with Path(path).open() as f:
        raw = yaml.safe_load(f)

    return LiveConfig.model_validate(raw or {})


def get_default_config_path() -> Path:
    """``configs/default.yaml`` at the repository root, next to ``main.py``."""
    return Path(__file__).parents[3] / "configs" / "default.yaml"
