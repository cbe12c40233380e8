"""
Review Database Package.

Append-only review log on SQLite. Rows are never updated in place;
the current state of an item is derived at read time.

Package Structure:
    initializer.py   - db_create: new database from a dataset
    synchronizer.py  - db_update: merge newer exported data
    review_writer.py - db_save_review: append review decisions
    readers.py       - db_save, db_get_query, db_get_review and current views
    service.py       - ReviewDatabaseService (facade bound to one file)
"""

from clinreview.application.review_db.initializer import db_create
from clinreview.application.review_db.readers import (
    db_get_current_queries,
    db_get_current_review,
    db_get_query,
    db_get_review,
    db_save,
)
from clinreview.application.review_db.review_writer import db_save_review
from clinreview.application.review_db.service import ReviewDatabaseService
from clinreview.application.review_db.synchronizer import db_update, read_synch_time

__all__ = [
    "ReviewDatabaseService",
    "db_create",
    "db_get_current_queries",
    "db_get_current_review",
    "db_get_query",
    "db_get_review",
    "db_save",
    "db_save_review",
    "db_update",
    "read_synch_time",
]
