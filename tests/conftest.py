"""
Shared fixtures for review database tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from clinreview.application.review_db import db_create
from clinreview.domain.models import ReviewDataset

from tests.shared.helpers import CREATED_AT, make_row


@pytest.fixture
def db_path(tmp_path) -> Path:
    return tmp_path / "db" / "user_db.sqlite"


@pytest.fixture
def vital_signs() -> ReviewDataset:
    """Three items of one form of one subject."""
    return ReviewDataset(
        rows=[
            make_row("Pulse", item_value="60"),
            make_row("Systolic blood pressure", item_value="120"),
            make_row("Diastolic blood pressure", item_value="80"),
        ],
        synch_time=CREATED_AT,
    )


@pytest.fixture
def created_db(db_path, vital_signs, monkeypatch) -> Path:
    """Database created at the synch time of the seed data."""
    monkeypatch.setattr(
        "clinreview.application.review_db.initializer.time_stamp",
        lambda: CREATED_AT,
    )
    db_create(vital_signs, db_path)
    return db_path
