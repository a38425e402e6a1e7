"""Persistence backends for the exam history.

The exam store sees persistence as an opaque key-value blob: load the
whole collection once, save the whole collection after every change.

Backends:
- JsonFileStorage: one JSON file (default)
- SqliteStorage: a key/value row in a SQLite database (see sqlite_storage)
- InMemoryStorage: process-local fake, used by tests
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

import structlog

from yks_tracker.config.app_config import StorageConfig

logger = structlog.get_logger(__name__)

EXAMS_SCHEMA = "yks_exams_v1"


class StorageWriteError(Exception):
    """Persisting the exam collection failed."""

    pass


class StoragePort(Protocol):
    """Load/save port injected into the exam store."""

    def load(self) -> list[dict[str, Any]]:
        """Return the saved collection, or [] if missing or unparseable."""
        ...

    def save(self, records: list[dict[str, Any]]) -> None:
        """Replace the saved collection. Raises StorageWriteError."""
        ...


def decode_blob(data: Any, source: str) -> list[dict[str, Any]]:
    """Extract the exam list from a decoded blob.

    Accepts the bare list written by the browser version as well as the
    {"$schema": ..., "exams": [...]} envelope.
    """
    if isinstance(data, dict):
        if data.get("$schema") not in (None, EXAMS_SCHEMA):
            logger.warning(
                "exams_blob_unknown_schema",
                source=source,
                expected=EXAMS_SCHEMA,
                got=data.get("$schema"),
            )
        data = data.get("exams")

    if not isinstance(data, list):
        logger.warning("exams_blob_unparseable", source=source)
        return []

    return [item for item in data if isinstance(item, dict)]


def encode_blob(records: list[dict[str, Any]]) -> dict[str, Any]:
    """Wrap the exam list in its schema envelope."""
    return {"$schema": EXAMS_SCHEMA, "exams": records}


class JsonFileStorage:
    """Store the exam collection in a single JSON file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> list[dict[str, Any]]:
        if not self.path.exists():
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
            logger.warning("exams_file_unreadable", path=str(self.path), error=str(e))
            return []

        return decode_blob(data, str(self.path))

    def save(self, records: list[dict[str, Any]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(encode_blob(records), f, indent=2, ensure_ascii=False)
        except (OSError, TypeError, ValueError) as e:
            raise StorageWriteError(f"Could not write {self.path}: {e}") from e

        logger.debug("exams_file_saved", path=str(self.path), count=len(records))


class InMemoryStorage:
    """Keep the serialized collection in memory.

    Set fail_writes to simulate a storage that rejects every save.
    """

    def __init__(self, records: list[dict[str, Any]] | None = None, fail_writes: bool = False):
        self._blob: str | None = json.dumps(records) if records is not None else None
        self.fail_writes = fail_writes
        self.save_count = 0

    def load(self) -> list[dict[str, Any]]:
        if self._blob is None:
            return []
        try:
            return decode_blob(json.loads(self._blob), "memory")
        except json.JSONDecodeError:
            logger.warning("exams_blob_unparseable", source="memory")
            return []

    def save(self, records: list[dict[str, Any]]) -> None:
        if self.fail_writes:
            raise StorageWriteError("In-memory storage is configured to fail writes")
        self._blob = json.dumps(encode_blob(records), ensure_ascii=False)
        self.save_count += 1

    def set_raw(self, blob: str) -> None:
        """Replace the stored blob verbatim (e.g. with corrupt data)."""
        self._blob = blob


def create_storage(config: StorageConfig, data_dir: Path | None = None) -> StoragePort:
    """Build the storage backend named in the config.

    Args:
        config: Storage section of the app config
        data_dir: Optional data directory override; the configured file
            name is then placed under {data_dir}/state/

    Returns:
        A StoragePort implementation
    """
    path = Path(config.path)
    if data_dir is not None:
        path = Path(data_dir) / "state" / path.name

    if config.backend == "json":
        return JsonFileStorage(path)
    if config.backend == "sqlite":
        from yks_tracker.storage.sqlite_storage import SqliteStorage

        return SqliteStorage(path, key=config.key)
    if config.backend == "memory":
        return InMemoryStorage()

    raise ValueError(f"Unknown storage backend: {config.backend}")
