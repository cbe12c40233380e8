"""
Unit tests for row reconciliation.

Tests grouping, ordering, null handling and tie-breaking of slice_rows.
"""

import pytest

from clinreview.domain.reconciliation import ordering_key, slice_rows, sort_value

KEY = ["subject_id", "item_name"]


class TestSliceRows:
    """slice_rows picks one current row per group."""

    def test_one_row_per_group(self):
        rows = [
            {"subject_id": "S1", "item_name": "A", "timestamp": "2024-01-01"},
            {"subject_id": "S1", "item_name": "B", "timestamp": "2024-01-01"},
            {"subject_id": "S1", "item_name": "A", "timestamp": "2024-01-03"},
            {"subject_id": "S2", "item_name": "A", "timestamp": "2024-01-02"},
            {"subject_id": "S1", "item_name": "A", "timestamp": "2024-01-02"},
        ]
        result = slice_rows(rows, ["timestamp"], KEY)

        assert len(result) == 3
        keys = [(r["subject_id"], r["item_name"]) for r in result]
        assert keys == [("S1", "A"), ("S1", "B"), ("S2", "A")]
        assert result[0]["timestamp"] == "2024-01-03"

    def test_second_ordering_field_breaks_ties(self):
        rows = [
            {"subject_id": "S1", "item_name": "A", "timestamp": "t1", "edit_date_time": "e2", "v": 1},
            {"subject_id": "S1", "item_name": "A", "timestamp": "t1", "edit_date_time": "e3", "v": 2},
            {"subject_id": "S1", "item_name": "A", "timestamp": "t1", "edit_date_time": "e1", "v": 3},
        ]
        result = slice_rows(rows, ["timestamp", "edit_date_time"], KEY)
        assert [r["v"] for r in result] == [2]

    def test_first_ordering_field_dominates(self):
        rows = [
            {"subject_id": "S1", "item_name": "A", "timestamp": "t2", "edit_date_time": "e1", "v": 1},
            {"subject_id": "S1", "item_name": "A", "timestamp": "t1", "edit_date_time": "e9", "v": 2},
        ]
        result = slice_rows(rows, ["timestamp", "edit_date_time"], KEY)
        assert result[0]["v"] == 1

    def test_exact_tie_resolves_to_last_in_input(self):
        rows = [
            {"subject_id": "S1", "item_name": "A", "timestamp": "t1", "v": 1},
            {"subject_id": "S1", "item_name": "A", "timestamp": "t1", "v": 2},
            {"subject_id": "S1", "item_name": "A", "timestamp": "t1", "v": 3},
        ]
        result = slice_rows(rows, ["timestamp"], KEY)
        assert result == [rows[2]]

    def test_fewer_non_null_values_rank_lower(self):
        rows = [
            {"subject_id": "S1", "item_name": "A", "timestamp": "t9", "edit_date_time": None, "v": 1},
            {"subject_id": "S1", "item_name": "A", "timestamp": "t1", "edit_date_time": "e1", "v": 2},
        ]
        result = slice_rows(rows, ["timestamp", "edit_date_time"], KEY)
        assert result[0]["v"] == 2

    def test_null_ranks_below_value(self):
        rows = [
            {"subject_id": "S1", "item_name": "A", "timestamp": "t1", "v": 1},
            {"subject_id": "S1", "item_name": "A", "timestamp": None, "v": 2},
        ]
        result = slice_rows(rows, ["timestamp"], KEY)
        assert result[0]["v"] == 1

    def test_numeric_ordering(self):
        rows = [
            {"subject_id": "S1", "item_name": "A", "n": 10},
            {"subject_id": "S1", "item_name": "A", "n": 9},
        ]
        assert slice_rows(rows, ["n"], KEY)[0]["n"] == 10

    def test_keeps_all_columns(self):
        rows = [{"subject_id": "S1", "item_name": "A", "timestamp": "t1", "extra": "x", "other": None}]
        assert slice_rows(rows, ["timestamp"], KEY) == rows

    def test_reconciling_twice_is_a_fixed_point(self):
        rows = [
            {"subject_id": s, "item_name": i, "timestamp": t, "v": idx}
            for idx, (s, i, t) in enumerate(
                [("S1", "A", "t1"), ("S1", "A", "t2"), ("S2", "B", "t1"), ("S2", "B", "t1"), ("S1", "C", None)]
            )
        ]
        once = slice_rows(rows, ["timestamp"], KEY)
        twice = slice_rows(once, ["timestamp"], KEY)
        assert once == twice

    def test_empty_input(self):
        assert slice_rows([], ["timestamp"], KEY) == []

    def test_missing_group_field_groups_under_none(self):
        rows = [
            {"item_name": "A", "timestamp": "t1"},
            {"item_name": "A", "timestamp": "t2"},
        ]
        assert slice_rows(rows, ["timestamp"], KEY) == [rows[1]]

    def test_rejects_string_arguments(self):
        with pytest.raises(TypeError):
            slice_rows([], "timestamp", KEY)

    def test_requires_ordering_field(self):
        with pytest.raises(ValueError):
            slice_rows([], [], KEY)


class TestOrderingKey:
    """Ranking helpers."""

    def test_sort_value_order(self):
        assert sort_value(None) < sort_value(0) < sort_value("0")

    def test_ordering_key_counts_non_null(self):
        assert ordering_key({"a": 1, "b": None}, ["a", "b"])[0] == 1
        assert ordering_key({"a": 1, "b": 2}, ["a", "b"])[0] == 2
