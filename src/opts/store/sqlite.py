"""
SQLiteSettingsStore: persistent storage for settings groups.

Each group is one row in the options table, its value serialized as JSON.
Key order inside a group is preserved; change detection ignores it.
"""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType
from typing import Any

import orjson

from opts.exceptions import SerializationError, StoreNotInitializedError
from opts.logging import get_logger

logger = get_logger(__name__)


class SQLiteSettingsStore:
    """SQLite-backed settings store.

    Call init() before use and close() when done, or use the store as a
    context manager.
    """

    def __init__(self, db_path: Path | str) -> None:
        """Initialize SQLiteSettingsStore.

        Args:
            db_path: Path to the SQLite database file, or ":memory:".
        """
        self.db_path = db_path if str(db_path) == ":memory:" else Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def init(self) -> None:
        """Open the connection and create the schema.

        Safe to call multiple times.
        """
        if self._conn is not None:
            return

        if isinstance(self.db_path, Path):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(
            str(self.db_path),
            timeout=30.0,
            isolation_level="DEFERRED",
        )
        self._conn.row_factory = sqlite3.Row

        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS options (
                name TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                autoload TEXT NOT NULL DEFAULT 'yes',
                updated_at TEXT NOT NULL
            )
        """)
        self._conn.commit()
        logger.info("Settings store initialized", db_path=str(self.db_path))

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> SQLiteSettingsStore:
        self.init()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreNotInitializedError(
                "SQLiteSettingsStore not initialized. Call init() first.",
                context={"db_path": str(self.db_path)},
            )
        return self._conn

    def _fetch_raw(self, name: str) -> str | None:
        row = self._get_conn().execute(
            "SELECT value FROM options WHERE name = ?", (name,)
        ).fetchone()
        return row["value"] if row else None

    def read_group(self, name: str) -> Any:
        """Read a settings group.

        Args:
            name: Group name.

        Returns:
            The decoded value, or None if the group is absent or its stored
            value cannot be decoded.
        """
        raw = self._fetch_raw(name)
        if raw is None:
            return None

        try:
            return orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.warning("Undecodable settings group", group=name)
            return None

    def write_group(self, name: str, value: Any) -> bool:
        """Persist a settings group.

        Args:
            name: Group name.
            value: JSON-serializable value.

        Returns:
            True if the row was created or changed, False if it already held
            an equal value.

        Raises:
            SerializationError: If value cannot be encoded as JSON.
        """
        conn = self._get_conn()

        try:
            encoded = orjson.dumps(value).decode("utf-8")
            fingerprint = orjson.dumps(value, option=orjson.OPT_SORT_KEYS)
        except TypeError as e:
            raise SerializationError(
                "Settings group is not serializable",
                context={"group": name, "error": str(e)},
            ) from e

        old_raw = self._fetch_raw(name)
        if old_raw is not None and self._fingerprint(old_raw) == fingerprint:
            return False

        conn.execute(
            """
            INSERT INTO options (name, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
            """,
            (name, encoded, datetime.now(timezone.utc).isoformat()),
        )
        conn.commit()

        logger.debug("Wrote settings group", group=name, created=old_raw is None)
        return True

    def delete_group(self, name: str) -> bool:
        conn = self._get_conn()
        cursor = conn.execute("DELETE FROM options WHERE name = ?", (name,))
        conn.commit()
        return cursor.rowcount > 0

    def list_groups(self) -> list[str]:
        rows = self._get_conn().execute(
            "SELECT name FROM options ORDER BY name"
        ).fetchall()
        return [row["name"] for row in rows]

    @staticmethod
    def _fingerprint(raw: str) -> bytes | None:
        try:
            return orjson.dumps(orjson.loads(raw), option=orjson.OPT_SORT_KEYS)
        except orjson.JSONDecodeError:
            return None
