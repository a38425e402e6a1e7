"""Aggregation and query layer over the exam history.

Stateless views used by the dashboard, history, calendar and trend
screens. Every function is a pure function of the record snapshot it is
given; none of them fail on an empty or single-record history.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum, auto
from typing import Any

from yks_tracker.config.subjects import ExamCategory, SubjectNode
from yks_tracker.core.exam_repository import ExamRecord, parse_exam_date
from yks_tracker.core.scoring import (
    RawCounts,
    net_score,
    parse_result_entry,
    results_of,
    total_net,
)
from yks_tracker.core.taxonomy import PATH_SEPARATOR, TOTAL_SELECTION, display_name

DEFAULT_RECENT_COUNT = 4
DEFAULT_LABEL_LENGTH = 10

# =============================================================================
# DATA CLASSES
# =============================================================================


class SelectionKind(Enum):
    """How a subject selection is resolved against a result mapping."""

    TOTAL_SENTINEL = auto()  # Synthetic total of the whole exam
    EXACT_LEAF = auto()  # Direct result entry
    PREFIX_GROUP = auto()  # Group: sum of "<id>.*" entries


@dataclass(frozen=True)
class SeriesPoint:
    """One chart point."""

    label: str
    value: float


@dataclass(frozen=True)
class BreakdownRow:
    """Per-subject line of an exam detail view."""

    path: str
    name: str
    correct: int | None
    wrong: int | None
    net: float


@dataclass(frozen=True)
class DashboardSummary:
    """Numbers shown on the dashboard cards."""

    exam_count: int
    average_net: float
    recent: list[SeriesPoint]


# =============================================================================
# SELECTION
# =============================================================================


def resolve_selection(results: Mapping[str, Any], selection_id: str) -> SelectionKind:
    """Decide how a selection is scored: sentinel, exact leaf, then prefix group."""
    if selection_id == TOTAL_SELECTION:
        return SelectionKind.TOTAL_SENTINEL
    if selection_id in results:
        return SelectionKind.EXACT_LEAF
    return SelectionKind.PREFIX_GROUP


def _entry_net(raw: Any) -> float:
    entry = parse_result_entry(raw)
    if isinstance(entry, RawCounts):
        return net_score(entry.correct, entry.wrong)
    # Subject selections are only scored from raw counts
    return 0.0


def net_for_selection(exam: ExamRecord | Mapping[str, Any], selection_id: str) -> float:
    """Net score of one subject (or the total) in an exam.

    Args:
        exam: ExamRecord or exam dict
        selection_id: TOTAL_SELECTION, a leaf path or a group id

    Returns:
        Net score; 0 when the selection has no matching entries.
    """
    results = results_of(exam)
    kind = resolve_selection(results, selection_id)

    if kind is SelectionKind.TOTAL_SENTINEL:
        return total_net(exam)
    if kind is SelectionKind.EXACT_LEAF:
        return _entry_net(results[selection_id])

    prefix = selection_id + PATH_SEPARATOR
    total = sum(_entry_net(raw) for key, raw in results.items() if key.startswith(prefix))
    return round(total, 2)


# =============================================================================
# FILTERS
# =============================================================================


def filter_by_category(
    records: Iterable[ExamRecord], category: ExamCategory | str
) -> list[ExamRecord]:
    """Keep only records of one exam category."""
    wanted = ExamCategory(category)
    return [r for r in records if r.category == wanted]


def sort_chronological(records: Iterable[ExamRecord], descending: bool = False) -> list[ExamRecord]:
    """Sort records by date (oldest first unless descending)."""
    return sorted(records, key=lambda r: r.timestamp, reverse=descending)


def most_recent(records: Iterable[ExamRecord], n: int = DEFAULT_RECENT_COUNT) -> list[ExamRecord]:
    """The n newest records, returned oldest to newest for charting."""
    if n <= 0:
        return []
    newest = sort_chronological(records, descending=True)[:n]
    newest.reverse()
    return newest


def local_day(record: ExamRecord) -> date | None:
    """Calendar day of a record's date in local time, None if unparseable."""
    parsed = parse_exam_date(record.date)
    if parsed is None:
        return None
    try:
        return parsed.astimezone().date()
    except (OverflowError, ValueError, OSError):
        return None


def _as_day(day: date | datetime) -> date:
    if isinstance(day, datetime):
        return day.date()
    return day


def filter_by_day(records: Iterable[ExamRecord], day: date | datetime) -> list[ExamRecord]:
    """Keep records taken on the given local calendar day."""
    wanted = _as_day(day)
    return [r for r in records if local_day(r) == wanted]


def has_record_on_day(records: Iterable[ExamRecord], day: date | datetime) -> bool:
    """Whether any exam was taken on the given day (calendar marking)."""
    return bool(filter_by_day(records, day))


def exam_days(records: Iterable[ExamRecord], year: int, month: int) -> set[int]:
    """Days of a month that have at least one exam."""
    days: set[int] = set()
    for record in records:
        day = local_day(record)
        if day is not None and day.year == year and day.month == month:
            days.add(day.day)
    return days


def history(
    records: Iterable[ExamRecord], day: date | datetime | None = None
) -> list[ExamRecord]:
    """History list: newest first, optionally restricted to one day."""
    selected = filter_by_day(records, day) if day is not None else list(records)
    return sort_chronological(selected, descending=True)


# =============================================================================
# SUMMARIES AND SERIES
# =============================================================================


def average_of_last(records: Iterable[ExamRecord], n: int = DEFAULT_RECENT_COUNT) -> float:
    """Mean total net of the n most recent exams, 0 when there are none."""
    recent = most_recent(records, n)
    if not recent:
        return 0.0
    return round(sum(total_net(r) for r in recent) / len(recent), 2)


def subject_series(
    records: Iterable[ExamRecord],
    category: ExamCategory | str,
    selection_id: str = TOTAL_SELECTION,
) -> list[SeriesPoint]:
    """Trend of one subject selection across every exam of a category.

    Points are ordered oldest to newest and labelled with the exam name.
    """
    exams = sort_chronological(filter_by_category(records, category))
    return [SeriesPoint(label=e.name, value=net_for_selection(e, selection_id)) for e in exams]


def recent_series(
    records: Iterable[ExamRecord],
    n: int = DEFAULT_RECENT_COUNT,
    label_length: int = DEFAULT_LABEL_LENGTH,
) -> list[SeriesPoint]:
    """Total net of the n most recent exams, with shortened labels."""
    return [
        SeriesPoint(label=e.name[:label_length], value=total_net(e))
        for e in most_recent(records, n)
    ]


def dashboard_summary(
    records: Sequence[ExamRecord],
    n: int = DEFAULT_RECENT_COUNT,
    label_length: int = DEFAULT_LABEL_LENGTH,
) -> DashboardSummary:
    """Exam count, recent average and recent trend in one call."""
    return DashboardSummary(
        exam_count=len(records),
        average_net=average_of_last(records, n),
        recent=recent_series(records, n, label_length),
    )


def subject_breakdown(
    exam: ExamRecord, subjects: Sequence[SubjectNode] | None = None
) -> list[BreakdownRow]:
    """One row per stored result entry, in stored order."""
    rows: list[BreakdownRow] = []
    for path, raw in results_of(exam).items():
        entry = parse_result_entry(raw)
        if entry is None:
            continue
        if isinstance(entry, RawCounts):
            correct, wrong = entry.correct, entry.wrong
        else:
            correct = wrong = None
        rows.append(
            BreakdownRow(
                path=path,
                name=display_name(path, subjects),
                correct=correct,
                wrong=wrong,
                net=entry.net,
            )
        )
    return rows
