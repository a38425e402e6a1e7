"""Tests for subject taxonomy traversal (F1)."""

from yks_tracker.core.taxonomy import (
    TOTAL_SELECTION,
    SelectableSubject,
    display_name,
    find_subject,
    iter_leaves,
    join_path,
    leaf_paths,
    selectable_subjects,
)


class TestSelectableSubjects:
    """Tests for selectable_subjects function."""

    def test_total_comes_first(self, tyt_subjects):
        """Synthetic total is the first entry."""
        selectable = selectable_subjects(tyt_subjects)
        assert selectable[0] == SelectableSubject(id=TOTAL_SELECTION, name="Toplam Net")

    def test_top_level_in_declaration_order(self, tyt_subjects):
        """Top-level leaves and groups follow in order."""
        ids = [s.id for s in selectable_subjects(tyt_subjects)]
        assert ids == ["total", "turkce", "sosyal", "matematik", "fen"]

    def test_groups_not_expanded(self, tyt_subjects):
        """Children of a group are not selectable on their own."""
        ids = [s.id for s in selectable_subjects(tyt_subjects)]
        assert "fen.fizik" not in ids
        assert "fizik" not in ids

    def test_group_uses_own_name(self, tyt_subjects):
        """Group entries carry the group name."""
        names = {s.id: s.name for s in selectable_subjects(tyt_subjects)}
        assert names["fen"] == "Fen Bilimleri"

    def test_empty_taxonomy(self):
        """Only the total remains for an empty subject list."""
        assert [s.id for s in selectable_subjects([])] == ["total"]

    def test_does_not_mutate(self, tyt_subjects):
        """Traversal leaves the taxonomy untouched."""
        before = repr(tyt_subjects)
        selectable_subjects(tyt_subjects)
        list(iter_leaves(tyt_subjects))
        assert repr(tyt_subjects) == before


class TestIterLeaves:
    """Tests for iter_leaves function."""

    def test_tyt_leaf_paths(self, tyt_subjects):
        """Nested leaves use parent.child paths."""
        assert leaf_paths(tyt_subjects) == [
            "turkce",
            "sosyal.tarih",
            "sosyal.cografya",
            "sosyal.felsefe",
            "sosyal.din",
            "matematik",
            "fen.fizik",
            "fen.kimya",
            "fen.biyoloji",
        ]

    def test_arbitrary_depth(self, deep_subjects):
        """Deeper trees produce longer dotted paths."""
        assert leaf_paths(deep_subjects) == ["a", "b.c.d", "b.c.e", "b.f"]

    def test_yields_nodes(self, tyt_subjects):
        """Leaf nodes carry their question counts."""
        leaves = dict(iter_leaves(tyt_subjects))
        assert leaves["fen.biyoloji"].question_count == 6
        assert leaves["turkce"].question_count == 40

    def test_total_question_count(self, tyt_subjects):
        """TYT has 120 questions in total."""
        assert sum(node.question_count for _, node in iter_leaves(tyt_subjects)) == 120


class TestFindSubject:
    """Tests for find_subject function."""

    def test_find_leaf(self, tyt_subjects):
        """Nested leaf resolved by dotted path."""
        assert find_subject(tyt_subjects, "sosyal.din").name == "Din Kültürü"

    def test_find_group(self, tyt_subjects):
        """Group resolved by its own id."""
        assert find_subject(tyt_subjects, "fen").is_group

    def test_find_deep(self, deep_subjects):
        """Works at any depth."""
        assert find_subject(deep_subjects, "b.c.e").question_count == 4

    def test_unknown_paths(self, tyt_subjects):
        """Unknown ids and paths below a leaf return None."""
        assert find_subject(tyt_subjects, "tarih") is None
        assert find_subject(tyt_subjects, "turkce.paragraf") is None
        assert find_subject(tyt_subjects, "fen.geometri") is None


class TestDisplayName:
    """Tests for display_name function."""

    def test_known_path(self, tyt_subjects):
        """Taxonomy name wins."""
        assert display_name("sosyal.cografya", tyt_subjects) == "Coğrafya"

    def test_unknown_path_capitalizes_last_segment(self):
        """Fallback mirrors the history detail view."""
        assert display_name("fen.kimya") == "Kimya"
        assert display_name("geometri") == "Geometri"

    def test_total(self):
        """Total sentinel has its own name."""
        assert display_name(TOTAL_SELECTION) == "Toplam Net"

    def test_join_path(self):
        """Top-level ids have no prefix."""
        assert join_path(None, "turkce") == "turkce"
        assert join_path("fen", "fizik") == "fen.fizik"
