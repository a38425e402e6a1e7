"""Fixtures for F2 tests - Exam records, store and storage backends."""

from typing import Any, Callable

import pytest

from yks_tracker.config.subjects import ExamCategory
from yks_tracker.core.exam_repository import ExamRecord
from yks_tracker.storage.backends import InMemoryStorage


@pytest.fixture
def make_record() -> Callable[..., ExamRecord]:
    """Factory for exam records with sensible defaults."""

    def _make(
        exam_id: int = 1700000000000,
        date: str = "2024-11-14T10:00:00+00:00",
        name: str = "Özdebir 1",
        category: ExamCategory = ExamCategory.TYT,
        results: dict[str, Any] | None = None,
    ) -> ExamRecord:
        return ExamRecord(
            id=exam_id,
            date=date,
            name=name,
            category=category,
            results=results if results is not None else {"turkce": {"correct": 30, "wrong": 8}},
        )

    return _make


@pytest.fixture
def stored_exam_dicts() -> list[dict[str, Any]]:
    """Exam collection as the browser version persisted it."""
    return [
        {
            "id": 1700000000002,
            "date": "2024-11-16T09:30:00.000Z",
            "name": "3D Yayınları",
            "type": "AYT",
            "results": {"matematik": {"correct": "20", "wrong": "8"}},
        },
        {
            "id": 1700000000001,
            "date": "2024-11-15T09:30:00.000Z",
            "name": "Eski Deneme",
            "type": "TYT",
            "results": {"turkce": {"net": 31.5}},
        },
    ]


@pytest.fixture
def memory_storage(stored_exam_dicts) -> InMemoryStorage:
    """In-memory storage preloaded with two exams."""
    return InMemoryStorage(stored_exam_dicts)
