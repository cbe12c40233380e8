"""
ClinReview - review database for clinical trial data review.

Stores review decisions and data updates in an append-only SQLite log
and derives the current review state at read time.

Usage:
    # CLI
    clinreview create data.json data/user_db.sqlite

    # Programmatic
    from clinreview.application.review_db import ReviewDatabaseService

    service = ReviewDatabaseService("data/user_db.sqlite")
    service.synchronize(dataset)
"""

__version__ = "0.1.0"

from clinreview.application.review_db import ReviewDatabaseService
from clinreview.domain.models import ReviewDataset

__all__ = ["ReviewDatabaseService", "ReviewDataset", "__version__"]
