"""Abstract base class for server-side session backends.

The signing core only needs a dict-like session per visitor.  Where that
dict lives between requests is a backend concern: an in-memory TTL cache for
single-process development, SQLite for anything that must survive a restart.
Implementations are swapped without touching the session middleware.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ISessionBackend(ABC):
    """Contract for persisting one session dict per opaque session id.

    All operations are async so a network-backed store (e.g. Redis) can be
    added without blocking the event loop.
    """

    @abstractmethod
    async def load(self, session_id: str) -> dict[str, Any] | None:
        """Return the stored session data, or ``None`` if unknown or expired.

        Parameters
        ----------
        session_id:
            Opaque id taken from the visitor's session cookie.
        """

    @abstractmethod
    async def save(self, session_id: str, data: dict[str, Any]) -> None:
        """Persist *data* under *session_id*, replacing any previous value.

        Parameters
        ----------
        session_id:
            Opaque session id.
        data:
            JSON-serialisable session contents (string keys and values for
            pending salts).
        """

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Remove the session.  No-op if it does not exist."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this backend."""
