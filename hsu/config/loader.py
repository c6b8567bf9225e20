"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. ``config/config.yaml`` -- static defaults checked into the repo
  2. ``.env`` file          -- local developer overrides (not committed)
  3. Environment variables  -- set at deploy time

The YAML file uses nested sections that map onto flat ``Settings`` fields::

    hsu:
      ttl_seconds: 900        # -> hsu_ttl_seconds
    session:
      backend: sqlite         # -> session_backend
    app:
      port: 8080              # -> app_port

Secrets do not belong in YAML; ``hsu.secret`` is ignored with a warning.
"""

from pathlib import Path
from typing import Any

import yaml

from hsu.config.settings import Settings
from hsu.utils.logging import get_logger

_logger = get_logger(__name__)

_SECTIONS = ("hsu", "session", "app")


def _flatten(raw: dict[str, Any]) -> dict[str, Any]:
    """Turn ``{"hsu": {"ttl_seconds": 5}}`` into ``{"hsu_ttl_seconds": 5}``."""
    flat: dict[str, Any] = {}
    for section in _SECTIONS:
        values = raw.get(section) or {}
        if not isinstance(values, dict):
            continue
        for key, value in values.items():
            flat[f"{section}_{key}"] = value
    if "log_level" in raw:
        flat["log_level"] = raw["log_level"]
    return flat


def load_settings(path: str = "config/config.yaml") -> Settings:
    """Load YAML defaults and layer environment-based Settings on top.

    Args:
        path: Path to the YAML configuration file.  Missing files are fine.

    Returns:
        A fully resolved :class:`Settings` instance.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    yaml_values = _flatten(yaml_config)
    if yaml_values.pop("hsu_secret", None):
        _logger.warning("yaml_secret_ignored", path=str(config_path))

    known = set(Settings.model_fields)
    unknown = sorted(set(yaml_values) - known)
    if unknown:
        _logger.warning("yaml_unknown_keys", path=str(config_path), keys=unknown)
    yaml_values = {k: v for k, v in yaml_values.items() if k in known}

    # Only values the environment actually provided may override YAML.
    env_settings = Settings()
    env_values = env_settings.model_dump(include=env_settings.model_fields_set)

    return Settings(**{**yaml_values, **env_values})
