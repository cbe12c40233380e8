"""
Persisted schema of the review database.

Table names are part of the contract with the application UI.
"""

from __future__ import annotations

from clinreview.domain.models import COMMON_VARS, EDIT_TIME_VAR, REVIEW_STATE_COLUMNS

REVIEW_TABLE = "all_review_data"
QUERY_TABLE = "query_data"
SYNCH_TIME_TABLE = "db_synch_time"
SYNCH_TIME_COLUMN = "synch_time"

# Query records start out empty; these columns always exist
QUERY_DATA_SKELETON: dict[str, str] = {
    "query_id": "TEXT",
    "type": "TEXT",
    "subject_id": "TEXT",
    "event_label": "TEXT",
    "item_group": "TEXT",
    "item": "TEXT",
    "timestamp": "TEXT",
    "n": "INTEGER",
    "reviewer": "TEXT",
    "query": "TEXT",
    "resolved": "TEXT",
    "resolved_date": "TEXT",
    "edit_reviewer": "TEXT",
}


def review_table_columns(
    common_vars: tuple[str, ...] | list[str] = COMMON_VARS,
    edit_time_var: str = EDIT_TIME_VAR,
) -> list[str]:
    """Columns the review log always carries, even when seeded empty."""
    return [*common_vars, edit_time_var, *REVIEW_STATE_COLUMNS]
