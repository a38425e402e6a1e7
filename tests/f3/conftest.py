"""Fixtures for F3 tests - Aggregation and query layer."""

import os
import time

import pytest

from yks_tracker.config.subjects import ExamCategory
from yks_tracker.core.exam_repository import ExamRecord


def _exam(exam_id, date, name, category, results):
    return ExamRecord(id=exam_id, date=date, name=name, category=ExamCategory(category), results=results)


@pytest.fixture
def exam_history() -> list[ExamRecord]:
    """Five exams in store order (not date order).

    Dates are at noon UTC so the local calendar day is the same in every
    timezone between UTC-11 and UTC+11.
    """
    return [
        _exam(
            5,
            "2024-03-05T12:00:00+00:00",
            "Limit Yayınları Genel",
            "TYT",
            {"turkce": {"correct": 32, "wrong": 4}, "fen.fizik": {"correct": 5, "wrong": 0}},
        ),
        _exam(
            2,
            "2024-02-10T12:00:00+00:00",
            "Özdebir 1",
            "TYT",
            {
                "turkce": {"correct": 28, "wrong": 8},
                "fen.fizik": {"correct": 4, "wrong": 0},
                "fen.kimya": {"correct": 2, "wrong": 4},
            },
        ),
        _exam(
            4,
            "2024-03-01T12:00:00+00:00",
            "Apotemi AYT",
            "AYT",
            {"matematik": {"correct": 20, "wrong": 8}},
        ),
        _exam(
            1,
            "2024-01-20T12:00:00+00:00",
            "Eski Deneme",
            "TYT",
            {"turkce": {"net": 25}, "matematik": {"correct": 10, "wrong": 0}},
        ),
        _exam(
            3,
            "2024-02-10T11:00:00+00:00",
            "Aynı Gün AYT",
            "AYT",
            {"matematik": {"correct": 24, "wrong": 4}},
        ),
    ]


@pytest.fixture
def new_york_time():
    """Run with a negative UTC offset as the local timezone."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "America/New_York"
    time.tzset()
    yield
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()
