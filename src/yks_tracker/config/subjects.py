"""Subject taxonomy for YKS practice exams.

Defines the exam categories, the subject tree of each category and the
net score constants. The tree can be overridden from
data/config/subjects_v1.yaml.

Usage:
    from yks_tracker.config.subjects import ExamCategory, get_subjects

    subjects = get_subjects(ExamCategory.TYT)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file path (relative to project root)
SUBJECTS_FILE = Path("data/config/subjects_v1.yaml")

# Standard YKS: 4 wrongs cancel 1 right
CORRECT_POINTS = 1.0
WRONG_PENALTY = 0.25


class ExamCategory(str, Enum):
    """Top-level exam sections."""

    TYT = "TYT"
    AYT = "AYT"


class TaxonomyError(Exception):
    """Invalid subject taxonomy definition."""

    pass


@dataclass(frozen=True)
class SubjectNode:
    """A taxonomy entry: a scoreable leaf or a group of subjects."""

    id: str
    name: str
    question_count: int | None = None
    sub_subjects: tuple[SubjectNode, ...] | None = None

    @property
    def is_group(self) -> bool:
        return bool(self.sub_subjects)


def _leaf(subject_id: str, name: str, question_count: int) -> SubjectNode:
    return SubjectNode(id=subject_id, name=name, question_count=question_count)


def _group(subject_id: str, name: str, *children: SubjectNode) -> SubjectNode:
    return SubjectNode(id=subject_id, name=name, sub_subjects=tuple(children))


DEFAULT_SUBJECTS: dict[ExamCategory, tuple[SubjectNode, ...]] = {
    ExamCategory.TYT: (
        _leaf("turkce", "Türkçe", 40),
        _group(
            "sosyal",
            "Sosyal Bilimler",
            _leaf("tarih", "Tarih", 5),
            _leaf("cografya", "Coğrafya", 5),
            _leaf("felsefe", "Felsefe", 5),
            _leaf("din", "Din Kültürü", 5),
        ),
        _leaf("matematik", "Temel Matematik", 40),
        _group(
            "fen",
            "Fen Bilimleri",
            _leaf("fizik", "Fizik", 7),
            _leaf("kimya", "Kimya", 7),
            _leaf("biyoloji", "Biyoloji", 6),
        ),
    ),
    ExamCategory.AYT: (
        _leaf("matematik", "Matematik", 40),
        _leaf("fizik", "Fizik", 14),
        _leaf("kimya", "Kimya", 13),
        _leaf("biyoloji", "Biyoloji", 13),
    ),
}

# Module-level cache
_cached_subjects: dict[ExamCategory, tuple[SubjectNode, ...]] | None = None


def validate_node(node: SubjectNode) -> None:
    """Check that a node is either a leaf or a group, never both or neither.

    Raises:
        TaxonomyError: If the node (or any descendant) is malformed.
    """
    has_count = node.question_count is not None
    if has_count == node.is_group:
        raise TaxonomyError(
            f"Subject '{node.id}' must define either questionCount or subSubjects"
        )
    if has_count and node.question_count < 0:
        raise TaxonomyError(f"Subject '{node.id}' has a negative questionCount")
    for child in node.sub_subjects or ():
        validate_node(child)


def parse_subject(data: dict[str, Any]) -> SubjectNode:
    """Parse a subject mapping (camelCase or snake_case keys) into a node."""
    if "id" not in data:
        raise TaxonomyError(f"Subject without id: {data!r}")

    children = data.get("subSubjects", data.get("sub_subjects"))
    question_count = data.get("questionCount", data.get("question_count"))

    node = SubjectNode(
        id=str(data["id"]),
        name=str(data.get("name", data["id"])),
        question_count=int(question_count) if question_count is not None else None,
        sub_subjects=tuple(parse_subject(c) for c in children) if children else None,
    )
    validate_node(node)
    return node


def load_subjects(force_reload: bool = False) -> dict[ExamCategory, tuple[SubjectNode, ...]]:
    """Load the subject taxonomy for every category.

    Categories missing from the YAML file keep their default subjects.

    Args:
        force_reload: If True, ignore cache and reload from file.

    Returns:
        Dictionary mapping category to its ordered subject nodes.
    """
    global _cached_subjects

    if _cached_subjects is not None and not force_reload:
        return _cached_subjects

    subjects = dict(DEFAULT_SUBJECTS)

    if not SUBJECTS_FILE.exists():
        logger.debug("subjects_file_not_found", path=str(SUBJECTS_FILE))
        _cached_subjects = subjects
        return _cached_subjects

    try:
        data = yaml.safe_load(SUBJECTS_FILE.read_text(encoding="utf-8")) or {}
        for key, entries in (data.get("categories") or {}).items():
            try:
                category = ExamCategory(key)
            except ValueError:
                logger.warning("unknown_exam_category", category=key)
                continue
            subjects[category] = tuple(parse_subject(e) for e in entries)

        logger.debug("loaded_subjects", categories=len(subjects))
    except (yaml.YAMLError, OSError, TaxonomyError, TypeError, ValueError) as e:
        logger.error("failed_to_load_subjects", error=str(e))
        subjects = dict(DEFAULT_SUBJECTS)

    _cached_subjects = subjects
    return _cached_subjects


def get_subjects(category: ExamCategory | str) -> tuple[SubjectNode, ...]:
    """Get the ordered subject list of an exam category.

    Raises:
        ValueError: If category is not a known ExamCategory value.
    """
    return load_subjects()[ExamCategory(category)]


def clear_subjects_cache() -> None:
    """Clear the subjects cache.

    Useful for testing or when the taxonomy file is modified at runtime.
    """
    global _cached_subjects
    _cached_subjects = None
