"""
Saving review decisions.

Existing rows are never changed. A decision appends one new row per
affected item, copying the item's current row and replacing only the
review state columns.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from clinreview.domain.config import ReviewDbSettings
from clinreview.domain.models import (
    REVIEW_STATE_COLUMNS,
    ReviewSaveResult,
    ReviewState,
    RowStatus,
    time_stamp,
)
from clinreview.domain.reconciliation import slice_rows
from clinreview.infrastructure.sqlite import (
    REVIEW_TABLE,
    database_exists,
    get_db_connection,
    select_where,
    transaction,
    write_table,
)
from clinreview.infrastructure.sqlite.tables import as_row_list

logger = logging.getLogger(__name__)


def _single_review_row(rv_row: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> dict[str, Any]:
    rows = as_row_list(rv_row)
    if not rows:
        raise ValueError("No review row given")
    if len(rows) != 1:
        logger.warning(
            "Multiple rows (%d) detected to save in database. Only the first row will be used.",
            len(rows),
        )
    return rows[0]


def _review_state(rv_row: Mapping[str, Any]) -> dict[str, Any]:
    """Review columns of the decision, with defaults for the optional ones."""
    reviewed = rv_row.get("reviewed")
    if not ReviewState.is_valid(reviewed):
        raise ValueError(f"reviewed must be one of {ReviewState.values()}, got {reviewed!r}")
    return {
        "reviewed": reviewed,
        "comment": rv_row.get("comment") or "",
        "reviewer": rv_row.get("reviewer") or "",
        "timestamp": rv_row.get("timestamp") or time_stamp(),
        "status": rv_row.get("status") or RowStatus.OLD.value,
    }


def db_save_review(
    rv_row: Mapping[str, Any] | Sequence[Mapping[str, Any]],
    db_path: Path | str,
    settings: ReviewDbSettings | None = None,
) -> ReviewSaveResult:
    """
    Save a review decision.

    The decision is applied to all items matching the row's `review_by`
    values, e.g. all items of one form of one subject. Items whose current
    row already has the new `reviewed` value are left alone, so forms with
    a mixed review state (after an edit by the site) are not rewritten.

    Args:
        rv_row: Decision row with the review_by columns and `reviewed`,
            optionally `comment`, `reviewer`, `timestamp`, `status`
        db_path: Path of an existing database
        settings: review_by key, target tables, reconciliation fields

    Returns:
        ReviewSaveResult; `saved` is False when nothing had to change

    Raises:
        FileNotFoundError: If the database does not exist
        TypeError: If `rv_row` is not tabular
        ValueError: If the row lacks a review_by column or has an invalid state
    """
    settings = settings or ReviewDbSettings()
    row = _single_review_row(rv_row)
    if not database_exists(db_path):
        raise FileNotFoundError(f"Database not found: {db_path}")

    missing = [var for var in settings.review_by if var not in row]
    if missing:
        raise ValueError(f"Review row lacks review_by columns: {missing}")
    new_state = _review_state(row)
    row_ids = {var: row[var] for var in settings.review_by}

    with get_db_connection(db_path) as conn:
        matched = select_where(conn, REVIEW_TABLE, row_ids)
        current = slice_rows(matched, settings.review_slice_vars, settings.common_vars)
        to_update = [r for r in current if r.get("reviewed") != new_state["reviewed"]]

        if not to_update:
            message = "Review state unaltered. No review will be saved."
            logger.warning("%s (%s)", message, row_ids)
            return ReviewSaveResult(saved=False, message=message)

        new_rows = []
        for current_row in to_update:
            new_row = {k: v for k, v in current_row.items() if k not in REVIEW_STATE_COLUMNS}
            new_row.update(new_state)
            new_rows.append(new_row)

        logger.info("Writing %d updated review rows to database", len(new_rows))
        with transaction(conn):
            for table in settings.review_tables:
                write_table(conn, table, new_rows, append=True)

    logger.info("Finished writing to the tables: %s", ", ".join(settings.review_tables))
    return ReviewSaveResult(
        saved=True,
        rows_added=len(new_rows),
        tables=tuple(settings.review_tables),
        message=f"Saved review '{new_state['reviewed']}' for {len(new_rows)} items",
    )
