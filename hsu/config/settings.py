"""Application settings loaded from environment variables via pydantic-settings.

Two sources, in priority order:

  1. Environment variables, e.g. ``HSU_SECRET=...`` (always wins)
  2. ``.env`` file in the working directory (local development)

Field ``hsu_secret`` maps to env var ``HSU_SECRET`` and so on.  An empty
``hsu_secret`` means "not configured"; :meth:`Settings.to_hsu_config` then
raises :class:`~hsu.utils.errors.ConfigurationError`.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from hsu.models.config import DEFAULT_SESSION_KEY_PREFIX, DEFAULT_TTL_SECONDS, HsuConfig, build_config


class Settings(BaseSettings):
    """HSU application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Signing ===
    hsu_secret: str = ""
    hsu_ttl_seconds: int = DEFAULT_TTL_SECONDS
    hsu_session_key_prefix: str = DEFAULT_SESSION_KEY_PREFIX
    hsu_sort_query: bool = True

    # === Session Persistence ===
    session_backend: Literal["memory", "sqlite"] = "memory"
    session_db_path: str = "data/sessions.db"
    session_max_age_hours: int = 72
    session_cookie_name: str = "hsu_session"
    session_cookie_secure: bool = False

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def to_hsu_config(self) -> HsuConfig:
        """Build the immutable signing configuration from these settings."""
        return build_config(
            secret=self.hsu_secret,
            ttl_seconds=self.hsu_ttl_seconds,
            session_key_prefix=self.hsu_session_key_prefix,
            sort_query=self.hsu_sort_query,
        )
