"""Subject taxonomy traversal.

Subjects are identified inside an exam category by their dotted path:
"fen.fizik" for a nested leaf, "turkce" for a top-level leaf, "fen" for a
group. All functions here are read-only walks over the taxonomy.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from yks_tracker.config.subjects import SubjectNode

TOTAL_SELECTION = "total"
TOTAL_SELECTION_NAME = "Toplam Net"

PATH_SEPARATOR = "."


@dataclass(frozen=True)
class SelectableSubject:
    """An entry of the subject picker used for analysis."""

    id: str
    name: str


def join_path(parent_path: str | None, subject_id: str) -> str:
    """Build the dotted path of a subject under its parent."""
    return f"{parent_path}{PATH_SEPARATOR}{subject_id}" if parent_path else subject_id


def selectable_subjects(subjects: Sequence[SubjectNode]) -> list[SelectableSubject]:
    """List the subjects that can be selected for analysis.

    The synthetic total comes first, then every top-level leaf or group in
    declaration order. Groups are not expanded: selecting one aggregates
    its descendants by path prefix.
    """
    selectable = [SelectableSubject(id=TOTAL_SELECTION, name=TOTAL_SELECTION_NAME)]
    selectable.extend(SelectableSubject(id=s.id, name=s.name) for s in subjects)
    return selectable


def iter_leaves(
    subjects: Sequence[SubjectNode],
    parent_path: str | None = None,
) -> Iterator[tuple[str, SubjectNode]]:
    """Yield (dotted_path, node) for every scoreable leaf, depth first."""
    for subject in subjects:
        path = join_path(parent_path, subject.id)
        if subject.is_group:
            yield from iter_leaves(subject.sub_subjects, path)
        else:
            yield path, subject


def leaf_paths(subjects: Sequence[SubjectNode]) -> list[str]:
    """Dotted paths of every leaf, in declaration order."""
    return [path for path, _ in iter_leaves(subjects)]


def find_subject(subjects: Sequence[SubjectNode], path: str) -> SubjectNode | None:
    """Resolve a dotted path to its node, or None if it does not exist."""
    head, _, rest = path.partition(PATH_SEPARATOR)
    for subject in subjects:
        if subject.id != head:
            continue
        if not rest:
            return subject
        if subject.is_group:
            return find_subject(subject.sub_subjects, rest)
        return None
    return None


def display_name(path: str, subjects: Sequence[SubjectNode] | None = None) -> str:
    """Human readable name of a subject path.

    Falls back to the capitalized last path segment when the path is not
    part of the taxonomy (e.g. records saved with an older subject list).
    """
    if path == TOTAL_SELECTION:
        return TOTAL_SELECTION_NAME
    if subjects:
        node = find_subject(subjects, path)
        if node is not None:
            return node.name
    last = path.split(PATH_SEPARATOR)[-1]
    return last[:1].upper() + last[1:]
