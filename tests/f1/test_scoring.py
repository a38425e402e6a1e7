"""Tests for net score calculation (F1)."""

import pytest

from yks_tracker.core.scoring import (
    PrecomputedNet,
    RawCounts,
    blank_count,
    coerce_count,
    net_score,
    parse_result_entry,
    total_net,
)


class TestCoerceCount:
    """Tests for coerce_count function."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (7, 7),
            ("12", 12),
            (" 5 ", 5),
            ("3abc", 3),
            (4.9, 4),
            ("", 0),
            (None, 0),
            ("abc", 0),
            ("-3", 0),
            (-2, 0),
            (float("nan"), 0),
        ],
    )
    def test_coerce_count(self, value, expected):
        """Form input becomes a non-negative int, never an error."""
        assert coerce_count(value) == expected

    def test_huge_digit_runs(self):
        """Counts too long to convert or score become 0."""
        assert coerce_count("9" * 5000) == 0
        assert coerce_count("9" * 400) == 0
        assert coerce_count(10**400) == 0

    def test_huge_input_scores(self):
        """Scoring huge input never raises."""
        assert net_score("9" * 5000, "0") == 0
        assert net_score("4", "9" * 400) == 4
        assert total_net({"results": {"a": {"correct": "9" * 5000, "wrong": 0}}}) == 0
        assert total_net({"results": {"a": {"net": 10**400}, "b": {"correct": 2}}}) == 2


class TestNetScore:
    """Tests for net_score function."""

    def test_zero(self):
        """No answers means zero net."""
        assert net_score(0, 0) == 0

    def test_only_correct(self):
        """Correct answers count one point each."""
        assert net_score(4, 0) == 4

    def test_four_wrong_cancel_one(self):
        """Four wrong answers cost one point."""
        assert net_score(0, 4) == -1

    def test_mixed(self):
        """10 correct, 2 wrong -> 9.5."""
        assert net_score(10, 2) == 9.5

    def test_rounded_to_two_decimals(self):
        """Single wrong answer gives a quarter point penalty."""
        assert net_score(3, 1) == 2.75
        assert net_score(0, 1) == -0.25

    def test_string_inputs(self):
        """Numeric strings are accepted as typed in the form."""
        assert net_score("30", "8") == 28

    def test_non_numeric_inputs_are_zero(self):
        """Empty and non-numeric input behaves as zero."""
        assert net_score("", "abc") == 0
        assert net_score(None, None) == 0

    @pytest.mark.parametrize("correct,wrong", [(0, 0), (1, 3), (40, 0), (17, 23), (5, 19)])
    def test_formula(self, correct, wrong):
        """net == correct - wrong / 4 for non-negative ints."""
        assert net_score(correct, wrong) == round(correct - 0.25 * wrong, 2)


class TestBlankCount:
    """Tests for blank_count function."""

    def test_blank_count(self):
        """Blank = question count minus answered."""
        assert blank_count(40, "30", "8") == 2

    def test_blank_count_can_go_negative(self):
        """Exceeding the question count is not enforced."""
        assert blank_count(5, 4, 3) == -2


class TestParseResultEntry:
    """Tests for parse_result_entry function."""

    def test_raw_counts(self):
        """correct/wrong entries become RawCounts."""
        entry = parse_result_entry({"correct": "8", "wrong": "4"})
        assert entry == RawCounts(correct=8, wrong=4)
        assert entry.net == 7

    def test_only_wrong_is_raw_counts(self):
        """Either field is enough to mark raw counts."""
        assert parse_result_entry({"wrong": 4}) == RawCounts(correct=0, wrong=4)

    def test_legacy_net(self):
        """Entries with only a net become PrecomputedNet."""
        entry = parse_result_entry({"net": 5})
        assert entry == PrecomputedNet(value=5.0)
        assert entry.net == 5

    def test_unusable_entries(self):
        """Entries with neither shape are ignored."""
        assert parse_result_entry({}) is None
        assert parse_result_entry("12") is None
        assert parse_result_entry(None) is None


class TestTotalNet:
    """Tests for total_net function."""

    def test_sum_of_entries(self):
        """Total is the flat sum of every entry's net."""
        exam = {"results": {"a": {"correct": 4, "wrong": 0}, "b": {"correct": 8, "wrong": 4}}}
        assert total_net(exam) == 11

    def test_nested_paths_are_summed_flat(self, sample_results):
        """Dotted paths count like any other entry."""
        # 28 + 3.75 + 3 + 24 + 4 + 1
        assert total_net({"results": sample_results}) == 63.75

    def test_legacy_net_is_added(self):
        """Precomputed nets are added as-is."""
        exam = {"results": {"a": {"net": 5}, "b": {"correct": 2, "wrong": 0}}}
        assert total_net(exam) == 7

    def test_empty_results(self):
        """Empty results total zero."""
        assert total_net({"results": {}}) == 0

    def test_missing_results(self):
        """Absent or malformed results total zero."""
        assert total_net({}) == 0
        assert total_net({"results": None}) == 0
        assert total_net({"results": ["a"]}) == 0

    def test_accepts_record_objects(self):
        """Objects exposing .results work too."""
        from yks_tracker.config.subjects import ExamCategory
        from yks_tracker.core.exam_repository import ExamRecord

        record = ExamRecord(
            id=1,
            date="2024-01-01T10:00:00+00:00",
            name="Deneme",
            category=ExamCategory.AYT,
            results={"matematik": {"correct": 20, "wrong": 8}},
        )
        assert total_net(record) == 18

    def test_negative_total(self):
        """Wrong answers can push the total below zero."""
        assert total_net({"results": {"a": {"correct": 0, "wrong": 10}}}) == -2.5
