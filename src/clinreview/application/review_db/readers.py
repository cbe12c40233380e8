"""
Query log and review readers.

All reads filter with bound parameters and return the reconciled view:
one current row per logical entity.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from clinreview.domain.config import ReviewDbSettings
from clinreview.domain.reconciliation import slice_rows
from clinreview.infrastructure.sqlite import (
    REVIEW_TABLE,
    database_exists,
    get_db_connection,
    read_table,
    select_where,
    transaction,
    write_table,
)
from clinreview.infrastructure.sqlite.tables import as_row_list

logger = logging.getLogger(__name__)


def _require_database(db_path: Path | str) -> None:
    if not database_exists(db_path):
        raise FileNotFoundError(f"Database not found: {db_path}")


def db_save(
    data: Mapping[str, Any] | Iterable[Mapping[str, Any]],
    db_path: Path | str,
    db_table: str = "query_data",
) -> int:
    """
    Append rows to a database table.

    The table is created if it does not exist. No deduplication.

    Returns:
        Number of rows appended

    Raises:
        TypeError: If `data` is not tabular or `db_table` is not a string
    """
    if not isinstance(db_table, str):
        raise TypeError(f"db_table must be a string, got {type(db_table).__name__}")
    rows = as_row_list(data)
    if not rows:
        logger.warning("No rows to save to table '%s'", db_table)
        return 0

    with get_db_connection(db_path) as conn:
        logger.info("Saving %d rows to database table '%s'", len(rows), db_table)
        with transaction(conn):
            count = write_table(conn, db_table, rows, append=True)
    logger.debug("Data saved")
    return count


def db_get_query(
    db_path: Path | str,
    query_id: str,
    n: int | str | None = None,
    db_table: str = "query_data",
    slice_vars: Sequence[str] = ("timestamp",),
    group_vars: Sequence[str] | None = None,
) -> list[dict[str, Any]]:
    """
    Retrieve a query from the database.

    Without `n` the latest follow-up of the query is returned. Pass
    `group_vars=("query_id", "n")` to get the latest row of every
    follow-up round instead.

    Args:
        db_path: Path of an existing database
        query_id: Query identifier
        n: Optional follow-up number
        db_table: Table to read
        slice_vars: Ordering fields for picking the latest record
        group_vars: Grouping fields. Defaults to ("query_id",) without `n`
            and ("query_id", "n") with `n`.

    Raises:
        FileNotFoundError: If the database does not exist
        TypeError: If an identifier has the wrong type
    """
    _require_database(db_path)
    if not isinstance(query_id, str):
        raise TypeError(f"query_id must be a string, got {type(query_id).__name__}")
    if not isinstance(db_table, str):
        raise TypeError(f"db_table must be a string, got {type(db_table).__name__}")
    if n is not None and (isinstance(n, bool) or not isinstance(n, (int, str))):
        raise TypeError(f"n must be None, a number or a string, got {type(n).__name__}")

    filters: dict[str, Any] = {"query_id": query_id}
    if n is not None:
        filters["n"] = n
    if group_vars is None:
        group_vars = ("query_id",) if n is None else ("query_id", "n")

    with get_db_connection(db_path) as conn:
        rows = select_where(conn, db_table, filters)
    return slice_rows(rows, list(slice_vars), list(group_vars))


def db_get_review(
    db_path: Path | str,
    subject: str,
    form: str,
    db_table: str = REVIEW_TABLE,
    settings: ReviewDbSettings | None = None,
) -> list[dict[str, Any]]:
    """
    Retrieve the latest review data of one form of one subject.

    Raises:
        FileNotFoundError: If the database does not exist
        TypeError: If `subject` or `form` is not a string
    """
    settings = settings or ReviewDbSettings()
    _require_database(db_path)
    if not isinstance(subject, str):
        raise TypeError(f"subject must be a string, got {type(subject).__name__}")
    if not isinstance(form, str):
        raise TypeError(f"form must be a string, got {type(form).__name__}")

    with get_db_connection(db_path) as conn:
        rows = select_where(conn, db_table, {"subject_id": subject, "item_group": form})
    return slice_rows(rows, settings.review_slice_vars, settings.common_vars)


def db_get_current_review(
    db_path: Path | str,
    db_table: str = REVIEW_TABLE,
    settings: ReviewDbSettings | None = None,
) -> list[dict[str, Any]]:
    """Current row of every item in the review log."""
    settings = settings or ReviewDbSettings()
    _require_database(db_path)
    with get_db_connection(db_path) as conn:
        rows = read_table(conn, db_table)
    current = slice_rows(rows, settings.review_slice_vars, settings.common_vars)
    logger.debug("Review log: %d rows, %d current", len(rows), len(current))
    return current


def db_get_current_queries(
    db_path: Path | str,
    settings: ReviewDbSettings | None = None,
) -> list[dict[str, Any]]:
    """Latest record of every follow-up round of every query."""
    settings = settings or ReviewDbSettings()
    _require_database(db_path)
    with get_db_connection(db_path) as conn:
        rows = read_table(conn, settings.query_table)
    return slice_rows(rows, settings.query_slice_vars, ["query_id", "n"])
