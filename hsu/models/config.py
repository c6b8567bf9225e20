"""Immutable signing configuration.

``HsuConfig`` is built once (usually from :class:`hsu.config.Settings`) and
handed to the signer, verifier and scope objects.  It is frozen, so a running
process cannot change its secret or TTL behind an issued link.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from hsu.utils.errors import ConfigurationError

DEFAULT_TTL_SECONDS = 3600
DEFAULT_SESSION_KEY_PREFIX = "hsu-"


class HsuConfig(BaseModel):
    """Process-wide signing configuration."""

    model_config = ConfigDict(frozen=True)

    # HMAC key for every scope. Never transmitted.
    secret: str = Field(repr=False)
    ttl_seconds: int = Field(default=DEFAULT_TTL_SECONDS, gt=0)
    session_key_prefix: str = DEFAULT_SESSION_KEY_PREFIX
    # Stable-sort query pairs before signing (see hsu.utils.url_canonical).
    sort_query: bool = True

    @field_validator("secret")
    @classmethod
    def _secret_not_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("secret must be a non-empty string")
        return value


def build_config(**options: object) -> HsuConfig:
    """Validate *options* into an :class:`HsuConfig`.

    Raises:
        ConfigurationError: if the secret is missing or any value is invalid.
    """
    try:
        return HsuConfig(**options)
    except ValidationError as exc:
        fields = ", ".join(str(err["loc"][0]) for err in exc.errors() if err["loc"])
        raise ConfigurationError(f"Invalid HSU configuration: {fields or exc}") from exc
