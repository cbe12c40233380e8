"""
Synchronization of the review database with newly exported data.

The database keeps the synch time of the data it last received. New data
is merged only if it is newer; stale data never overwrites the database.

Not safe for concurrent writers: the marker check, the log read and the
append are separate round-trips. Use one writer process per database file.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from clinreview.domain.config import ReviewDbSettings
from clinreview.domain.models import ReviewDataset, SyncOutcome, SyncResult
from clinreview.domain.review_merge import update_review_data
from clinreview.infrastructure.sqlite import (
    REVIEW_TABLE,
    SYNCH_TIME_COLUMN,
    SYNCH_TIME_TABLE,
    database_exists,
    get_db_connection,
    read_table,
    transaction,
    write_table,
)

logger = logging.getLogger(__name__)


def read_synch_time(conn: sqlite3.Connection) -> str:
    """
    Stored synch time, or "" if the marker table is missing or empty.
    """
    try:
        row = conn.execute(f"SELECT {SYNCH_TIME_COLUMN} FROM {SYNCH_TIME_TABLE}").fetchone()
    except sqlite3.OperationalError as e:
        logger.debug("No synch time stored: %s", e)
        return ""
    if row is None or row[0] is None:
        return ""
    return str(row[0])


def db_update(
    data: ReviewDataset | Any,
    db_path: Path | str,
    settings: ReviewDbSettings | None = None,
) -> SyncResult:
    """
    Update the review database with newer data.

    Compares the synch time of the data with the one stored in the
    database. Newer (or undated) data is merged: rows for new items and
    for items edited since their current review row are appended with a
    blank review state.

    Args:
        data: Updated review data
        db_path: Path of an existing database
        settings: Key column names

    Returns:
        SyncResult describing what happened

    Raises:
        FileNotFoundError: If the database does not exist
        TypeError: If `data` is not tabular
    """
    settings = settings or ReviewDbSettings()
    if not database_exists(db_path):
        raise FileNotFoundError(f"Database not found: {db_path}")
    dataset = ReviewDataset.coerce(data)
    data_synch_time = dataset.synch_time or ""

    with get_db_connection(db_path) as conn:
        db_synch_time = read_synch_time(conn)

        if data_synch_time and data_synch_time == db_synch_time:
            message = "Database up to date. No update needed"
            logger.info(message)
            return SyncResult(SyncOutcome.UP_TO_DATE, synch_time=db_synch_time, message=message)

        if data_synch_time and db_synch_time > data_synch_time:
            message = (
                f"DB synch time ({db_synch_time}) is more recent than data synch time "
                f"({data_synch_time}). Aborting synchronization."
            )
            logger.warning(message)
            return SyncResult(SyncOutcome.STALE_DATA, synch_time=db_synch_time, message=message)

        # Data is newer, or its synch time is unknown
        review_data = read_table(conn, REVIEW_TABLE)
        logger.info("Start adding new rows to database")
        new_rows = update_review_data(
            review_rows=review_data,
            latest_review_data=dataset.rows,
            common_vars=settings.common_vars,
            edit_time_var=settings.edit_time_var,
            update_time=data_synch_time,
        )

        with transaction(conn):
            if new_rows:
                write_table(conn, REVIEW_TABLE, new_rows, append=True)
            write_table(
                conn,
                SYNCH_TIME_TABLE,
                [{SYNCH_TIME_COLUMN: data_synch_time}],
                columns={SYNCH_TIME_COLUMN: "TEXT"},
                overwrite=True,
            )

    message = f"Added {len(new_rows)} rows to the review data"
    logger.info("Finished updating review data: %s", message)
    return SyncResult(
        SyncOutcome.UPDATED,
        rows_added=len(new_rows),
        synch_time=data_synch_time,
        message=message,
    )
