"""
Domain models for ClinReview.

This module contains the core entities of the review database:
- Review state values and row status values
- The in-memory review dataset handed over by the data pipeline
- Outcome objects for synchronization and review saves

These models are pure data structures with no I/O dependencies.
Rows themselves are plain dicts so that arbitrary clinical columns
survive the round-trip through SQLite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Sequence


# ============================================================================
# Column Names
# ============================================================================

COMMON_VARS: tuple[str, ...] = (
    "subject_id",
    "event_name",
    "item_group",
    "form_repeat",
    "item_name",
)

EDIT_TIME_VAR = "edit_date_time"

# Columns replaced when a review decision is written
REVIEW_STATE_COLUMNS: tuple[str, ...] = (
    "reviewed",
    "comment",
    "reviewer",
    "timestamp",
    "status",
)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def time_stamp() -> str:
    """Current wall-clock time in the format stored in the database."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


# ============================================================================
# Enumerations
# ============================================================================


class ReviewState(Enum):
    """Allowed values of the `reviewed` column."""

    YES = "Yes"
    NO = "No"
    EMPTY = ""

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)

    @classmethod
    def is_valid(cls, value: Any) -> bool:
        return isinstance(value, str) and value in cls.values()


class RowStatus(Enum):
    """Status written alongside a review row."""

    NEW = "new"
    UPDATED = "updated"
    OLD = "old"


class SyncOutcome(Enum):
    """Result category of a synchronization pass."""

    UPDATED = "updated"
    UP_TO_DATE = "up_to_date"
    STALE_DATA = "stale_data"


# ============================================================================
# Datasets and Results
# ============================================================================


@dataclass
class ReviewDataset:
    """
    Review data as produced by the upstream data pipeline.

    Attributes:
        rows: One mapping per data point (common key, edit time, values)
        synch_time: Time the data was exported from the EDC system.
            Empty string means unknown. Other types are stored as text.
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    synch_time: str = ""

    def __post_init__(self) -> None:
        if self.synch_time is None:
            self.synch_time = ""
        elif not isinstance(self.synch_time, str):
            self.synch_time = str(self.synch_time)

    def __len__(self) -> int:
        return len(self.rows)

    @classmethod
    def from_rows(
        cls, rows: Sequence[Mapping[str, Any]], synch_time: str | None = None
    ) -> ReviewDataset:
        return cls(rows=[dict(row) for row in rows], synch_time=synch_time)

    @classmethod
    def coerce(cls, data: Any) -> ReviewDataset:
        """
        Accept a dataset or a plain sequence of row mappings.

        Raises:
            TypeError: If the data is not tabular
        """
        if isinstance(data, cls):
            return data
        if isinstance(data, (str, bytes, Mapping)) or not isinstance(data, Sequence):
            raise TypeError(f"Expected review data rows, got {type(data).__name__}")
        if not all(isinstance(row, Mapping) for row in data):
            raise TypeError("Every review data row must be a mapping")
        return cls.from_rows(data)


@dataclass
class SyncResult:
    """Outcome of `db_update`."""

    outcome: SyncOutcome
    rows_added: int = 0
    synch_time: str = ""
    message: str = ""

    @property
    def changed(self) -> bool:
        return self.outcome is SyncOutcome.UPDATED


@dataclass
class ReviewSaveResult:
    """Outcome of `db_save_review`."""

    saved: bool
    rows_added: int = 0
    tables: tuple[str, ...] = ()
    message: str = ""
