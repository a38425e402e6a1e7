"""Exam record repository.

Responsibilities:
- Model a saved practice exam (ExamRecord) and its persisted dict form
- Own the ordered exam collection (ExamStore): append, delete by id
- Save the full collection through the injected storage after every change

Persisted record structure (JSON):
    {"id": 1731622400000, "date": "2024-11-14T22:13:20+00:00",
     "name": "Özdebir 1", "type": "TYT",
     "results": {"turkce": {"correct": "30", "wrong": "4"}, ...}}
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from yks_tracker.config.subjects import ExamCategory
from yks_tracker.storage.backends import StoragePort, StorageWriteError

logger = structlog.get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)

# =============================================================================
# DATA CLASSES
# =============================================================================


def parse_exam_date(value: str) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware datetime.

    Accepts the trailing "Z" written by JavaScript's toISOString().
    Naive timestamps are taken as local time.
    """
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        try:
            parsed = parsed.astimezone()
        except (OverflowError, ValueError, OSError):
            return None
    return parsed


@dataclass(frozen=True)
class ExamRecord:
    """A saved practice exam with its raw per-subject counts."""

    id: int
    date: str
    name: str
    category: ExamCategory
    results: dict[str, Any] = field(default_factory=dict)

    @property
    def timestamp(self) -> datetime:
        """Parsed date; records with a broken date sort first."""
        return parse_exam_date(self.date) or _EPOCH

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "date": self.date,
            "name": self.name,
            "type": self.category.value,
            "results": self.results,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExamRecord:
        """Rebuild a record from its persisted form.

        Raises:
            ValueError: If a required field is missing or invalid.
        """
        try:
            exam_id = int(data["id"])
            category = ExamCategory(data.get("type", data.get("category")))
            name = str(data["name"])
            date = str(data["date"])
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Invalid exam record: {e}") from e

        results = data.get("results")
        return cls(
            id=exam_id,
            date=date,
            name=name,
            category=category,
            results=dict(results) if isinstance(results, dict) else {},
        )


@dataclass
class StoreResult:
    """Result of a store mutation."""

    success: bool
    record: ExamRecord | None
    message: str
    saved: bool = False
    warnings: list[str] = field(default_factory=list)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def new_exam_id(existing_ids: Iterable[int] = (), now: datetime | None = None) -> int:
    """Generate a unique exam id from the creation time in milliseconds.

    Bumped by one until it no longer collides with an existing id.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    taken = set(existing_ids)
    exam_id = int(now.timestamp() * 1000)
    while exam_id in taken:
        exam_id += 1
    return exam_id


def _decode_records(raw_records: list[dict[str, Any]]) -> tuple[list[ExamRecord], list[str]]:
    records: list[ExamRecord] = []
    warnings: list[str] = []
    for raw in raw_records:
        try:
            records.append(ExamRecord.from_dict(raw))
        except ValueError as e:
            logger.warning("exam_record_skipped", error=str(e))
            warnings.append(str(e))
    return records, warnings


# =============================================================================
# STORE
# =============================================================================


class ExamStore:
    """Ordered exam collection with save-on-every-change persistence.

    Records are kept most-recent-first by creation; views re-sort by date.
    """

    def __init__(self, storage: StoragePort):
        self._storage = storage
        self._records, self.load_warnings = _decode_records(storage.load())
        logger.debug("exam_store_loaded", count=len(self._records))

    @property
    def records(self) -> tuple[ExamRecord, ...]:
        """Snapshot of the current collection."""
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ExamRecord]:
        return iter(self.records)

    def ids(self) -> set[int]:
        return {r.id for r in self._records}

    def get(self, exam_id: int) -> ExamRecord | None:
        """Get record by id."""
        for record in self._records:
            if record.id == exam_id:
                return record
        return None

    def append(self, record: ExamRecord) -> StoreResult:
        """Add a record to the front of the collection and save.

        Args:
            record: Fully formed record with an id not yet in the store

        Returns:
            StoreResult; saved=False with a warning when the write failed
            (the record stays in memory).
        """
        if record.id in self.ids():
            return StoreResult(
                success=False,
                record=None,
                message=f"Bu id ile kayıtlı deneme zaten var: {record.id}",
            )

        self._records.insert(0, record)
        logger.info("exam_saved", exam_id=record.id, name=record.name, category=record.category.value)
        return self._persist(record, f"Deneme kaydedildi: {record.name}")

    def delete(self, exam_id: int) -> StoreResult:
        """Permanently remove the record(s) with the given id and save."""
        removed = [r for r in self._records if r.id == exam_id]
        if not removed:
            return StoreResult(
                success=False,
                record=None,
                message=f"Deneme bulunamadı: {exam_id}",
            )

        self._records = [r for r in self._records if r.id != exam_id]
        logger.info("exam_deleted", exam_id=exam_id)
        return self._persist(removed[0], f"Deneme silindi: {removed[0].name}")

    def _persist(self, record: ExamRecord, message: str) -> StoreResult:
        try:
            self._storage.save([r.to_dict() for r in self._records])
        except StorageWriteError as e:
            logger.error("storage_write_failed", exam_id=record.id, error=str(e))
            return StoreResult(
                success=True,
                record=record,
                message=message,
                saved=False,
                warnings=[f"Değişiklik bellekte tutuldu ancak kaydedilemedi: {e}"],
            )

        return StoreResult(success=True, record=record, message=message, saved=True)
