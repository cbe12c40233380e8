"""
Creation of a new review database.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from clinreview.domain.config import ReviewDbSettings
from clinreview.domain.models import ReviewDataset, ReviewState, RowStatus, time_stamp
from clinreview.infrastructure.sqlite import (
    QUERY_DATA_SKELETON,
    REVIEW_TABLE,
    SYNCH_TIME_COLUMN,
    SYNCH_TIME_TABLE,
    database_exists,
    get_db_connection,
    transaction,
    write_table,
)
from clinreview.infrastructure.sqlite.schema import review_table_columns

logger = logging.getLogger(__name__)


def _ensure_directory(db_path: Path) -> None:
    directory = db_path.parent
    if directory.exists():
        return
    logger.info("Directory to store user database does not exist. Creating '%s'", directory)
    try:
        directory.mkdir(parents=True)
    except OSError as e:
        raise OSError(f"Could not create directory for user database: {directory}") from e


def db_create(
    data: ReviewDataset | Any,
    db_path: Path | str,
    reviewed: str = ReviewState.NO.value,
    reviewer: str = "",
    status: str = RowStatus.NEW.value,
    settings: ReviewDbSettings | None = None,
) -> int:
    """
    Create the application database.

    Every row is flagged with the given review state. With the defaults all
    data is unreviewed and marked "new".

    Args:
        data: Review data, usually a ReviewDataset with a synch_time
        db_path: Path of the database to create. Must not exist.
        reviewed: Initial value of `reviewed` ("Yes", "No" or "")
        reviewer: Initial reviewer
        status: Initial status
        settings: Key column names

    Returns:
        Number of review rows written

    Raises:
        FileExistsError: If the database already exists
        ValueError: If `reviewed` is not an allowed value
        TypeError: If `data` is not tabular
    """
    settings = settings or ReviewDbSettings()
    db_path = Path(db_path)
    if database_exists(db_path):
        raise FileExistsError(f"Database already exists: {db_path}")
    if not ReviewState.is_valid(reviewed):
        raise ValueError(f"reviewed must be one of {ReviewState.values()}, got {reviewed!r}")
    dataset = ReviewDataset.coerce(data)

    _ensure_directory(db_path)

    stamp = time_stamp()
    review_rows = [
        {
            **row,
            "reviewed": reviewed,
            "comment": "",
            "reviewer": reviewer,
            "timestamp": stamp,
            "status": status,
        }
        for row in dataset.rows
    ]
    tables = (
        (REVIEW_TABLE, review_rows, review_table_columns(settings.common_vars, settings.edit_time_var)),
        (settings.query_table, [], QUERY_DATA_SKELETON),
        (SYNCH_TIME_TABLE, [{SYNCH_TIME_COLUMN: dataset.synch_time}], {SYNCH_TIME_COLUMN: "TEXT"}),
    )

    try:
        with get_db_connection(db_path) as conn:
            with transaction(conn):
                for table, rows, columns in tables:
                    logger.info("Creating new table: %s", table)
                    write_table(conn, table, rows, columns=columns)
    except Exception:
        # sqlite3.connect already created the file
        logger.error("Creating database %s failed. Removing the incomplete file", db_path)
        db_path.unlink(missing_ok=True)
        raise

    logger.info("Finished writing to database %s (%d review rows)", db_path, len(review_rows))
    return len(review_rows)
