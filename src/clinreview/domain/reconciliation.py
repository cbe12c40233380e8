"""
Row reconciliation.

The review database is an append-only log: several rows can exist for the
same logical entity. `slice_rows` selects the current row per group.

Ranking of a row within its group, highest wins:
1. Number of non-null ordering values
2. Ordering values, most significant first (None lowest, numbers below text)
3. Position in the input, later rows win exact ties

Because rows read from SQLite are ordered by rowid, rule 3 means that the
most recently inserted row wins when all ordering values are equal.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence, TypeVar

RowT = TypeVar("RowT", bound=Mapping[str, Any])


def sort_value(value: Any) -> tuple:
    """
    Comparable key for a single column value.

    None sorts lowest, then numbers, then everything else as text.
    Booleans are treated as numbers.
    """
    if value is None:
        return (0,)
    if isinstance(value, (int, float)):
        return (1, value)
    return (2, str(value))


def ordering_key(row: Mapping[str, Any], slice_vars: Sequence[str]) -> tuple:
    """Ranking key of a row for the given ordering fields."""
    values = [row.get(var) for var in slice_vars]
    non_null = sum(1 for value in values if value is not None)
    return (non_null, tuple(sort_value(value) for value in values))


def group_key(row: Mapping[str, Any], group_vars: Sequence[str]) -> tuple:
    """Values of the grouping fields, in order."""
    return tuple(row.get(var) for var in group_vars)


def slice_rows(
    rows: Iterable[RowT],
    slice_vars: Sequence[str],
    group_vars: Sequence[str],
) -> list[RowT]:
    """
    Select exactly one row per group: the one with the highest ordering key.

    Args:
        rows: Candidate rows
        slice_vars: Ordering fields, most significant first
        group_vars: Grouping fields

    Returns:
        One row per distinct group, in order of the group's first appearance.
        Rows are returned unchanged.
    """
    if isinstance(slice_vars, str) or isinstance(group_vars, str):
        raise TypeError("slice_vars and group_vars must be sequences of column names")
    if not slice_vars:
        raise ValueError("At least one ordering field is required")

    winners: dict[tuple, tuple[tuple, RowT]] = {}
    for row in rows:
        key = group_key(row, group_vars)
        rank = ordering_key(row, slice_vars)
        current = winners.get(key)
        # >= so that the later row wins an exact tie
        if current is None or rank >= current[0]:
            winners[key] = (rank, row)

    return [row for _, row in winners.values()]


def index_rows(
    rows: Iterable[RowT],
    slice_vars: Sequence[str],
    group_vars: Sequence[str],
) -> dict[tuple, RowT]:
    """Reconciled rows keyed by their group values."""
    return {
        group_key(row, group_vars): row
        for row in slice_rows(rows, slice_vars, group_vars)
    }
