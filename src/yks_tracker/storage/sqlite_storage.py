"""SQLite key/value storage for the exam collection.

Mirrors the browser's localStorage: a single row per key holding the
JSON-serialized collection, replaced on every save.
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator

import structlog

from yks_tracker.storage.backends import StorageWriteError, decode_blob, encode_blob

logger = structlog.get_logger(__name__)

DEFAULT_KEY = "yks_exams"


class SqliteStorage:
    """Store the exam collection under one key of a kv_store table."""

    def __init__(self, db_path: Path, key: str = DEFAULT_KEY):
        self.db_path = Path(db_path)
        self.key = key

    @contextmanager
    def _connect(self) -> Generator[sqlite3.Connection, None, None]:
        """Open a connection with the schema in place.

        Commits on success, rolls back and re-raises on error.
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        conn = sqlite3.connect(self.db_path)
        try:
            _create_schema(conn)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def load(self) -> list[dict[str, Any]]:
        if not self.db_path.exists():
            return []

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (self.key,)
                ).fetchone()
        except (sqlite3.Error, OSError) as e:
            logger.warning("exams_db_unreadable", path=str(self.db_path), error=str(e))
            return []

        if row is None:
            return []

        try:
            data = json.loads(row[0])
        except (json.JSONDecodeError, TypeError):
            logger.warning("exams_blob_unparseable", source=str(self.db_path), key=self.key)
            return []

        return decode_blob(data, str(self.db_path))

    def save(self, records: list[dict[str, Any]]) -> None:
        try:
            value = json.dumps(encode_blob(records), ensure_ascii=False)
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value, updated_at)
                    VALUES (?, ?, datetime('now'))
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (self.key, value),
                )
        except (sqlite3.Error, OSError, TypeError, ValueError) as e:
            raise StorageWriteError(f"Could not write {self.db_path}: {e}") from e

        logger.debug("exams_db_saved", path=str(self.db_path), key=self.key, count=len(records))


def _create_schema(conn: sqlite3.Connection) -> None:
    """Create the key/value table if it doesn't exist."""
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL,
            updated_at TEXT NOT NULL DEFAULT (datetime('now'))
        );
        """
    )
