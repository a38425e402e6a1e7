"""Net score calculation.

Responsibilities:
- Normalize raw correct/wrong input into counts
- Compute the net score of a single subject (4 wrongs cancel 1 right)
- Aggregate the net score of a whole exam from its flat result mapping

Result entries come in two shapes:
- {"correct": .., "wrong": ..}  raw counts (current schema)
- {"net": ..}                   precomputed net (legacy records)
"""

from __future__ import annotations

import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from yks_tracker.config.subjects import CORRECT_POINTS, WRONG_PENALTY

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")
# Larger counts cannot be scored as floats
_MAX_COUNT = sys.float_info.max

# =============================================================================
# RESULT ENTRIES
# =============================================================================


@dataclass(frozen=True)
class RawCounts:
    """Correct/wrong counts for one subject."""

    correct: int
    wrong: int

    @property
    def net(self) -> float:
        return net_score(self.correct, self.wrong)


@dataclass(frozen=True)
class PrecomputedNet:
    """Net value stored by an earlier version of the scoring formula."""

    value: float

    @property
    def net(self) -> float:
        return self.value


ResultEntry = Union[RawCounts, PrecomputedNet]


# =============================================================================
# SCORING
# =============================================================================


def coerce_count(value: Any) -> int:
    """Convert arbitrary form input into a non-negative count.

    Strings are parsed by their leading integer ("12", " 7 ", "3abc").
    Empty, non-numeric, negative and out-of-range values become 0.
    """
    if value is None:
        return 0

    if isinstance(value, (int, float)):
        try:
            count = int(value)
        except (OverflowError, ValueError):
            return 0
    else:
        match = _LEADING_INT.match(str(value))
        if not match:
            return 0
        try:
            count = int(match.group(1))
        except ValueError:
            # digit runs past the int conversion limit
            return 0

    if count > _MAX_COUNT:
        return 0
    return max(count, 0)


def _coerce_net(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError, OverflowError):
        return 0.0


def net_score(correct: Any, wrong: Any) -> float:
    """Compute the net score of a subject.

    Args:
        correct: Correct answer count (any input, see coerce_count)
        wrong: Wrong answer count (any input, see coerce_count)

    Returns:
        correct - wrong / 4, rounded to 2 decimals. Can be negative.
    """
    c = coerce_count(correct)
    w = coerce_count(wrong)
    net = c * CORRECT_POINTS - w * WRONG_PENALTY
    return round(net, 2)


def blank_count(question_count: int, correct: Any, wrong: Any) -> int:
    """Number of unanswered questions.

    Advisory only: goes negative when correct + wrong exceeds the
    subject's question count.
    """
    return question_count - (coerce_count(correct) + coerce_count(wrong))


def parse_result_entry(raw: Any) -> ResultEntry | None:
    """Build a result entry from its stored mapping.

    Returns None for values that carry neither counts nor a net.
    """
    if isinstance(raw, (RawCounts, PrecomputedNet)):
        return raw
    if not isinstance(raw, Mapping):
        return None

    if "correct" in raw or "wrong" in raw:
        return RawCounts(
            correct=coerce_count(raw.get("correct")),
            wrong=coerce_count(raw.get("wrong")),
        )
    if "net" in raw:
        return PrecomputedNet(value=_coerce_net(raw["net"]))
    return None


def results_of(exam: Any) -> Mapping[str, Any]:
    """Get the result mapping of an exam record or exam dict."""
    if isinstance(exam, Mapping):
        results = exam.get("results")
    else:
        results = getattr(exam, "results", None)
    return results if isinstance(results, Mapping) else {}


def total_net(exam: Any) -> float:
    """Sum the net score of every result entry of an exam.

    Results are stored flat (keyed by dotted subject path), so this is a
    plain sum over all entries rather than a tree walk.

    Args:
        exam: ExamRecord or exam dict with a "results" mapping

    Returns:
        Total net rounded to 2 decimals, 0 for missing/empty results.
    """
    total = 0.0
    for raw in results_of(exam).values():
        entry = parse_result_entry(raw)
        if entry is not None:
            total += entry.net
    return round(total, 2)
