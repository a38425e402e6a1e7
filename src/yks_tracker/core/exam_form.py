"""New exam input form.

Turns the raw values typed by the student (exam name, category and
correct/wrong strings per subject) into a fully formed ExamRecord, and
gives the live per-subject net shown while typing.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError, field_validator

from yks_tracker.config.subjects import ExamCategory, SubjectNode, get_subjects
from yks_tracker.core.exam_repository import ExamRecord, new_exam_id
from yks_tracker.core.scoring import blank_count, coerce_count, net_score
from yks_tracker.core.taxonomy import iter_leaves

logger = structlog.get_logger(__name__)


class ExamFormError(Exception):
    """The submitted exam form is not valid."""

    pass


# =============================================================================
# FORM SCHEMAS
# =============================================================================


class SubjectInput(BaseModel):
    """Raw correct/wrong values of one subject, as typed."""

    correct: str | int | None = ""
    wrong: str | int | None = ""

    model_config = {"extra": "ignore"}

    @property
    def net(self) -> float:
        return net_score(self.correct, self.wrong)


class ExamDraft(BaseModel):
    """Form contents before the exam is saved."""

    name: str = Field(..., min_length=1, max_length=200)
    category: ExamCategory = ExamCategory.TYT
    results: dict[str, SubjectInput] = Field(default_factory=dict)

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("exam name must not be empty")
        return value


@dataclass(frozen=True)
class PreviewRow:
    """Live feedback for one leaf subject of the form."""

    path: str
    name: str
    question_count: int
    correct: int
    wrong: int
    net: float
    blank: int


# =============================================================================
# FORM OPERATIONS
# =============================================================================


def parse_draft(data: dict[str, Any]) -> ExamDraft:
    """Validate a raw form payload.

    Raises:
        ExamFormError: If the name is missing/blank or a field has the
            wrong type.
    """
    try:
        return ExamDraft.model_validate(data)
    except ValidationError as e:
        messages = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ExamFormError(messages) from e


def live_net(entry: SubjectInput | dict[str, Any] | None) -> float:
    """Net of a single subject while it is being typed."""
    if entry is None:
        return 0.0
    if isinstance(entry, dict):
        return net_score(entry.get("correct"), entry.get("wrong"))
    return entry.net


def preview_rows(
    draft: ExamDraft, subjects: Sequence[SubjectNode] | None = None
) -> list[PreviewRow]:
    """Per-leaf net and blank count for every subject of the draft's category."""
    if subjects is None:
        subjects = get_subjects(draft.category)

    rows: list[PreviewRow] = []
    for path, node in iter_leaves(subjects):
        entry = draft.results.get(path) or SubjectInput()
        rows.append(
            PreviewRow(
                path=path,
                name=node.name,
                question_count=node.question_count or 0,
                correct=coerce_count(entry.correct),
                wrong=coerce_count(entry.wrong),
                net=entry.net,
                blank=blank_count(node.question_count or 0, entry.correct, entry.wrong),
            )
        )
    return rows


def build_exam_record(
    draft: ExamDraft,
    existing_ids: Iterable[int] = (),
    now: datetime | None = None,
    subjects: Sequence[SubjectNode] | None = None,
) -> ExamRecord:
    """Create the record saved when the form is submitted.

    Args:
        draft: Validated form contents
        existing_ids: Ids already in the store (kept unique)
        now: Creation time (defaults to the current UTC time)
        subjects: Taxonomy of the draft's category (defaults to config)

    Returns:
        ExamRecord with counts normalized to non-negative ints

    Raises:
        ExamFormError: If a result key is not a leaf of the category.
    """
    if subjects is None:
        subjects = get_subjects(draft.category)
    if now is None:
        now = datetime.now(timezone.utc)

    valid_paths = {path for path, _ in iter_leaves(subjects)}
    unknown = [key for key in draft.results if key not in valid_paths]
    if unknown:
        raise ExamFormError(
            f"Unknown subject(s) for {draft.category.value}: {', '.join(sorted(unknown))}"
        )

    results = {
        path: {"correct": coerce_count(entry.correct), "wrong": coerce_count(entry.wrong)}
        for path, entry in draft.results.items()
    }

    record = ExamRecord(
        id=new_exam_id(existing_ids, now),
        date=now.isoformat(),
        name=draft.name,
        category=draft.category,
        results=results,
    )
    logger.debug("exam_record_built", exam_id=record.id, subjects=len(results))
    return record
