"""
Review database settings domain model.

Column names and table names used by the review database operations.
Passed explicitly to every operation instead of being read from
module-level defaults.
"""

import logging
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from clinreview.domain.models import COMMON_VARS, EDIT_TIME_VAR

logger = logging.getLogger(__name__)


class ReviewDbSettings(BaseModel):
    """
    Key columns and table names for the review log.

    Defaults match the tables written by `db_create`.
    """

    model_config = ConfigDict(frozen=True)

    common_vars: List[str] = Field(
        default_factory=lambda: list(COMMON_VARS),
        description="Columns that identify one data item occurrence",
    )
    edit_time_var: str = Field(
        default=EDIT_TIME_VAR,
        description="Column holding the last edit time of the clinical value",
    )
    review_by: List[str] = Field(
        default_factory=lambda: ["subject_id", "item_group"],
        description="Key over which one review decision is applied",
    )
    review_tables: List[str] = Field(
        default_factory=lambda: ["all_review_data"],
        description="Tables that receive saved review decisions",
    )
    review_slice_vars: List[str] = Field(
        default_factory=lambda: ["timestamp", EDIT_TIME_VAR],
        description="Ordering fields used to pick the current review row",
    )
    query_table: str = Field(default="query_data", description="Table with query records")
    query_slice_vars: List[str] = Field(
        default_factory=lambda: ["timestamp"],
        description="Ordering fields used to pick the current query record",
    )

    @field_validator("common_vars", "review_by", "review_tables", "review_slice_vars", "query_slice_vars")
    @classmethod
    def validate_not_empty(cls, v: List[str], info) -> List[str]:
        """Key and table lists need at least one entry."""
        if not v:
            raise ValueError(f"{info.field_name} must contain at least one column or table")
        if len(set(v)) != len(v):
            raise ValueError(f"{info.field_name} contains duplicates: {v}")
        return v

    @model_validator(mode="after")
    def validate_review_by(self) -> "ReviewDbSettings":
        """Review decisions can only be keyed on item key columns."""
        unknown = [var for var in self.review_by if var not in self.common_vars]
        if unknown:
            raise ValueError(f"review_by columns not part of common_vars: {unknown}")
        return self


class AppConfig(BaseModel):
    """
    Application configuration for the CLI.

    Loaded from `clinreview.json` by `ConfigRepository`.
    """

    model_config = ConfigDict(extra="ignore")

    db_path: Path = Field(default=Path("data/user_db.sqlite"), description="Path of the review database")
    log_level: str = Field(default="INFO", description="Console log level")
    log_file: Optional[str] = Field(default=None, description="Optional log file (always DEBUG)")
    review: ReviewDbSettings = Field(default_factory=ReviewDbSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def log_level_number(self) -> int:
        return logging.getLevelName(self.log_level)
