"""
Domain layer for ClinReview.

Pure data structures and algorithms with no I/O:
- models.py: review states, datasets, result objects
- reconciliation.py: select the current row per group
- review_merge.py: decide which exported rows enter the review log
- config/: pydantic settings
"""

from clinreview.domain.models import (
    COMMON_VARS,
    EDIT_TIME_VAR,
    REVIEW_STATE_COLUMNS,
    ReviewDataset,
    ReviewSaveResult,
    ReviewState,
    RowStatus,
    SyncOutcome,
    SyncResult,
    time_stamp,
)
from clinreview.domain.reconciliation import slice_rows
from clinreview.domain.review_merge import update_review_data

__all__ = [
    "COMMON_VARS",
    "EDIT_TIME_VAR",
    "REVIEW_STATE_COLUMNS",
    "ReviewDataset",
    "ReviewSaveResult",
    "ReviewState",
    "RowStatus",
    "SyncOutcome",
    "SyncResult",
    "slice_rows",
    "time_stamp",
    "update_review_data",
]
