"""
Merge of freshly exported review data into the review log.

Decides which incoming rows have to be appended to the log so that
the current view reflects the latest clinical data. Pure functions, no I/O.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from clinreview.domain.models import (
    COMMON_VARS,
    EDIT_TIME_VAR,
    ReviewState,
    RowStatus,
    time_stamp,
)
from clinreview.domain.reconciliation import group_key, index_rows, slice_rows, sort_value

logger = logging.getLogger(__name__)


def is_newer(new_value: Any, old_value: Any) -> bool:
    """True if `new_value` is strictly more recent than `old_value`."""
    if new_value is None:
        return False
    if old_value is None:
        return True
    return sort_value(new_value) > sort_value(old_value)


def blank_review_row(row: Mapping[str, Any], status: RowStatus, timestamp: str) -> dict[str, Any]:
    """Copy of `row` with an unreviewed review state."""
    new_row = dict(row)
    new_row.update(
        reviewed=ReviewState.NO.value,
        comment="",
        reviewer="",
        timestamp=timestamp,
        status=status.value,
    )
    return new_row


def update_review_data(
    review_rows: Iterable[Mapping[str, Any]],
    latest_review_data: Iterable[Mapping[str, Any]],
    common_vars: Sequence[str] = COMMON_VARS,
    edit_time_var: str = EDIT_TIME_VAR,
    update_time: str = "",
) -> list[dict[str, Any]]:
    """
    Compute the rows that must be appended to the review log.

    Args:
        review_rows: Full contents of the review log
        latest_review_data: Rows of the newly exported dataset
        common_vars: Columns identifying one data item
        edit_time_var: Column with the last edit time of the clinical value
        update_time: Timestamp for the appended rows. Defaults to now.

    Returns:
        New rows, each with a blank review state and status "new" (item not
        in the log yet) or "updated" (item edited since its current log row).
    """
    timestamp = update_time or time_stamp()
    latest = slice_rows(latest_review_data, [edit_time_var], common_vars)
    current = index_rows(review_rows, [edit_time_var, "timestamp"], common_vars)

    new_rows: list[dict[str, Any]] = []
    updated = 0
    for row in latest:
        existing = current.get(group_key(row, common_vars))
        if existing is None:
            new_rows.append(blank_review_row(row, RowStatus.NEW, timestamp))
        elif is_newer(row.get(edit_time_var), existing.get(edit_time_var)):
            new_rows.append(blank_review_row(row, RowStatus.UPDATED, timestamp))
            updated += 1

    logger.debug(
        "Review merge: %d incoming items, %d new, %d updated",
        len(latest),
        len(new_rows) - updated,
        updated,
    )
    return new_rows
