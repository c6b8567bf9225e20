"""Per-scope salt storage inside caller-owned session state.

The session mapping belongs to the caller (a cookie session, a server-side
store, or a plain ``dict`` in tests).  This adapter only decides the key
(``session_key_prefix + scope_id``) and the value (the salt string); it never
persists anything itself.

Each key is a one-slot queue: ``set`` replaces any pending salt, so at most
one unconsumed salt exists per (session, scope id).
"""

from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

SessionState = MutableMapping[str, Any]


class SaltStore:
    """Read, write and clear the pending salt for scopes in one session."""

    def __init__(self, session: SessionState, prefix: str) -> None:
        self._session = session
        self._prefix = prefix

    def key_for(self, scope_id: str) -> str:
        return f"{self._prefix}{scope_id}"

    def get(self, scope_id: str) -> str | None:
        """Return the pending salt, or ``None`` when the scope has none."""
        value = self._session.get(self.key_for(scope_id))
        if not isinstance(value, str) or not value:
            return None
        return value

    def set(self, scope_id: str, salt: str) -> None:
        self._session[self.key_for(scope_id)] = salt

    def delete(self, scope_id: str) -> bool:
        """Remove the pending salt.  Returns ``True`` if one was present."""
        return self._session.pop(self.key_for(scope_id), None) is not None

    def is_pending(self, scope_id: str) -> bool:
        return self.get(scope_id) is not None
