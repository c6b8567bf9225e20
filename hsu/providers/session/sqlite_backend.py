"""SQLite-backed persistent session backend.

Stores each visitor's session dict as a small JSON blob keyed by the opaque
session id.  Uses sync ``sqlite3``; each operation touches one tiny row so
event-loop blocking is negligible.

Sessions not written for ``max_age_hours`` are pruned on :meth:`initialize`
and treated as missing on :meth:`load`.
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Any

import structlog

from hsu.interfaces.session_backend import ISessionBackend
from hsu.utils.logging import get_logger

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS {table} (
    session_id TEXT PRIMARY KEY,
    data_json  TEXT NOT NULL,
    created_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    updated_at TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDEX_SQL = (
    "CREATE INDEX IF NOT EXISTS idx_{table}_updated ON {table}(updated_at);"
)

_UPSERT_SQL = """\
INSERT INTO {table} (session_id, data_json)
VALUES (?, ?)
ON CONFLICT(session_id)
DO UPDATE SET data_json = excluded.data_json,
              updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_SELECT_SQL = "SELECT data_json FROM {table} WHERE session_id = ?;"

_SELECT_FRESH_SQL = """\
SELECT data_json FROM {table}
WHERE session_id = ?
  AND updated_at >= strftime('%Y-%m-%dT%H:%M:%fZ', 'now', '-{hours} hours');
"""

_DELETE_SQL = "DELETE FROM {table} WHERE session_id = ?;"

_COUNT_SQL = "SELECT COUNT(*) FROM {table};"

_PRUNE_SQL = """\
DELETE FROM {table}
WHERE updated_at < strftime('%Y-%m-%dT%H:%M:%fZ', 'now', '-{hours} hours');
"""


class SQLiteSessionBackend(ISessionBackend):
    """Session backend persisted to a SQLite database file.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.
    table_name:
        Table name to use.
    max_age_hours:
        Sessions idle longer than this are pruned and ignored.  Set to ``0``
        to keep sessions forever.
    """

    def __init__(
        self,
        db_path: str | Path,
        table_name: str = "sessions",
        max_age_hours: int = 72,
    ) -> None:
        self._db_path = Path(db_path)
        self._table = table_name
        self._max_age_hours = max_age_hours
        self._logger: structlog.BoundLogger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def initialize(self) -> None:
        """Create the table and index, and prune stale sessions.

        Must be called once before use (typically during app startup).
        """
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._connect()
        try:
            conn.execute(_CREATE_TABLE_SQL.format(table=self._table))
            conn.execute(_CREATE_INDEX_SQL.format(table=self._table))
            if self._max_age_hours > 0:
                cursor = conn.execute(
                    _PRUNE_SQL.format(table=self._table, hours=self._max_age_hours)
                )
                if cursor.rowcount:
                    self._logger.info(
                        "sessions_pruned",
                        table=self._table,
                        pruned=cursor.rowcount,
                        max_age_hours=self._max_age_hours,
                    )
            conn.commit()
            existing = conn.execute(_COUNT_SQL.format(table=self._table)).fetchone()[0]
        finally:
            conn.close()

        self._logger.info(
            "session_backend_initialized",
            db_path=str(self._db_path),
            table=self._table,
            existing_sessions=existing,
        )

    # ------------------------------------------------------------------
    # ISessionBackend implementation
    # ------------------------------------------------------------------

    async def load(self, session_id: str) -> dict[str, Any] | None:
        if self._max_age_hours > 0:
            sql = _SELECT_FRESH_SQL.format(table=self._table, hours=self._max_age_hours)
        else:
            sql = _SELECT_SQL.format(table=self._table)

        conn = self._connect()
        try:
            row = conn.execute(sql, (session_id,)).fetchone()
        finally:
            conn.close()

        if row is None:
            return None

        try:
            data = json.loads(row[0])
        except json.JSONDecodeError as exc:
            self._logger.warning(
                "session_deserialize_failed",
                error=str(exc)[:200],
            )
            return None
        return data if isinstance(data, dict) else None

    async def save(self, session_id: str, data: dict[str, Any]) -> None:
        conn = self._connect()
        try:
            conn.execute(
                _UPSERT_SQL.format(table=self._table),
                (session_id, json.dumps(data, separators=(",", ":"))),
            )
            conn.commit()
        finally:
            conn.close()

    async def delete(self, session_id: str) -> None:
        conn = self._connect()
        try:
            conn.execute(_DELETE_SQL.format(table=self._table), (session_id,))
            conn.commit()
        finally:
            conn.close()

    def get_provider_name(self) -> str:
        return f"sqlite:{self._table}"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        """Open a new SQLite connection with WAL mode for concurrency."""
        conn = sqlite3.connect(str(self._db_path))
        conn.execute("PRAGMA journal_mode=WAL")
        return conn
