"""
Review Database Service - Main Facade.

Binds a database path and settings to the review database operations
so that callers (CLI, UI) do not pass them around.

Usage:
    from clinreview.application.review_db import ReviewDatabaseService

    service = ReviewDatabaseService("data/user_db.sqlite")
    service.create(dataset)
    service.synchronize(newer_dataset)
    service.save_review({"subject_id": "S1", "item_group": "Vital signs",
                         "reviewed": "Yes", "reviewer": "Dr. A"})
    rows = service.get_review("S1", "Vital signs")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

from clinreview.application.review_db.initializer import db_create
from clinreview.application.review_db.readers import (
    db_get_current_queries,
    db_get_current_review,
    db_get_query,
    db_get_review,
    db_save,
)
from clinreview.application.review_db.review_writer import db_save_review
from clinreview.application.review_db.synchronizer import db_update
from clinreview.domain.config import ReviewDbSettings
from clinreview.domain.models import ReviewDataset, ReviewSaveResult, SyncResult
from clinreview.infrastructure.excel import export_review_workbook
from clinreview.infrastructure.sqlite.schema import review_table_columns

logger = logging.getLogger(__name__)


class ReviewDatabaseService:
    """
    Review database operations for one database file.

    Single writer only: two services writing the same file concurrently
    can interleave their read and append steps.
    """

    def __init__(self, db_path: Path | str, settings: ReviewDbSettings | None = None) -> None:
        self.db_path = Path(db_path)
        self.settings = settings or ReviewDbSettings()

    def create(
        self,
        data: ReviewDataset | Sequence[Mapping[str, Any]],
        reviewed: str = "No",
        reviewer: str = "",
        status: str = "new",
    ) -> int:
        return db_create(
            data, self.db_path, reviewed=reviewed, reviewer=reviewer, status=status, settings=self.settings
        )

    def synchronize(self, data: ReviewDataset | Sequence[Mapping[str, Any]]) -> SyncResult:
        return db_update(data, self.db_path, settings=self.settings)

    def save_review(self, rv_row: Mapping[str, Any] | Sequence[Mapping[str, Any]]) -> ReviewSaveResult:
        return db_save_review(rv_row, self.db_path, settings=self.settings)

    def save_query(self, data: Mapping[str, Any] | Iterable[Mapping[str, Any]]) -> int:
        return db_save(data, self.db_path, db_table=self.settings.query_table)

    def get_query(self, query_id: str, n: int | str | None = None) -> list[dict[str, Any]]:
        return db_get_query(
            self.db_path,
            query_id,
            n=n,
            db_table=self.settings.query_table,
            slice_vars=self.settings.query_slice_vars,
        )

    def get_review(self, subject: str, form: str) -> list[dict[str, Any]]:
        return db_get_review(self.db_path, subject, form, settings=self.settings)

    def current_review(self) -> list[dict[str, Any]]:
        return db_get_current_review(self.db_path, settings=self.settings)

    def export_excel(self, output_path: Path | str) -> Path:
        """Write the current review state and queries to an Excel workbook."""
        review_rows = self.current_review()
        query_rows = db_get_current_queries(self.db_path, settings=self.settings)
        return export_review_workbook(
            output_path,
            review_rows,
            query_rows,
            review_columns=review_table_columns(self.settings.common_vars, self.settings.edit_time_var),
        )
