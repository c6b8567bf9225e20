"""In-memory session backend using cachetools.TTLCache.

Fast and simple, suitable for development and single-process deployments.
Sessions are lost on restart and are not shared across workers; use
:class:`~hsu.providers.session.sqlite_backend.SQLiteSessionBackend` for that.
"""

from __future__ import annotations

from typing import Any

import structlog
from cachetools import TTLCache

from hsu.interfaces.session_backend import ISessionBackend
from hsu.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)


class MemorySessionBackend(ISessionBackend):
    """In-memory session store backed by ``cachetools.TTLCache``.

    Parameters
    ----------
    max_size:
        Maximum number of sessions before the least-recently-used one is
        evicted.
    max_age_hours:
        Idle lifetime of a session.  Saving a session restarts its clock.
    """

    def __init__(self, max_size: int = 10_000, max_age_hours: int = 72) -> None:
        self._cache: TTLCache[str, dict[str, Any]] = TTLCache(
            maxsize=max_size, ttl=max_age_hours * 3600
        )

    async def load(self, session_id: str) -> dict[str, Any] | None:
        data = self._cache.get(session_id)
        if data is None:
            logger.debug("session_miss", backend="memory")
            return None
        # Hand out a copy so request-local edits only land via save().
        return dict(data)

    async def save(self, session_id: str, data: dict[str, Any]) -> None:
        self._cache[session_id] = dict(data)

    async def delete(self, session_id: str) -> None:
        self._cache.pop(session_id, None)

    def get_provider_name(self) -> str:
        return "memory"
