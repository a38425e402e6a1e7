"""Fixtures for F1 tests - Scoring and Subject Taxonomy."""

from typing import Any

import pytest

from yks_tracker.config.subjects import DEFAULT_SUBJECTS, ExamCategory, SubjectNode


@pytest.fixture
def tyt_subjects() -> tuple[SubjectNode, ...]:
    """Default TYT taxonomy (two groups, two top-level leaves)."""
    return DEFAULT_SUBJECTS[ExamCategory.TYT]


@pytest.fixture
def deep_subjects() -> tuple[SubjectNode, ...]:
    """Three-level taxonomy to exercise arbitrary depth."""
    return (
        SubjectNode(id="a", name="A", question_count=10),
        SubjectNode(
            id="b",
            name="B",
            sub_subjects=(
                SubjectNode(
                    id="c",
                    name="C",
                    sub_subjects=(
                        SubjectNode(id="d", name="D", question_count=3),
                        SubjectNode(id="e", name="E", question_count=4),
                    ),
                ),
                SubjectNode(id="f", name="F", question_count=5),
            ),
        ),
    )


@pytest.fixture
def sample_results() -> dict[str, Any]:
    """Flat result mapping of a TYT exam, as saved by the input form."""
    return {
        "turkce": {"correct": "30", "wrong": "8"},
        "sosyal.tarih": {"correct": "4", "wrong": "1"},
        "sosyal.cografya": {"correct": "3", "wrong": "0"},
        "matematik": {"correct": 25, "wrong": 4},
        "fen.fizik": {"correct": "4", "wrong": "0"},
        "fen.kimya": {"correct": "2", "wrong": "4"},
    }
