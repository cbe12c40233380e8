"""
Tests for creating the review database.
"""

import pytest

from clinreview.application.review_db import db_create
from clinreview.domain.models import ReviewDataset

from tests.shared.helpers import make_row, read_all


class TestDbCreate:
    """db_create seeds the review log, query log and synch time."""

    def test_creates_all_tables(self, created_db):
        assert len(read_all(created_db)) == 3
        assert read_all(created_db, "query_data") == []
        assert read_all(created_db, "db_synch_time") == [{"synch_time": "2024-01-01 10:00:00"}]

    def test_rows_get_default_review_state(self, created_db):
        for row in read_all(created_db):
            assert row["reviewed"] == "No"
            assert row["comment"] == ""
            assert row["reviewer"] == ""
            assert row["status"] == "new"
            assert row["timestamp"]

    def test_clinical_columns_are_kept(self, created_db):
        values = {row["item_name"]: row["item_value"] for row in read_all(created_db)}
        assert values["Pulse"] == "60"
        assert read_all(created_db)[0]["form_repeat"] == 1

    def test_custom_review_state(self, db_path, vital_signs):
        db_create(vital_signs, db_path, reviewed="Yes", reviewer="Dr. A", status="old")
        rows = read_all(db_path)
        assert {r["reviewed"] for r in rows} == {"Yes"}
        assert {r["reviewer"] for r in rows} == {"Dr. A"}
        assert {r["status"] for r in rows} == {"old"}

    def test_returns_row_count(self, db_path, vital_signs):
        assert db_create(vital_signs, db_path) == 3

    def test_existing_path_fails(self, created_db, vital_signs):
        with pytest.raises(FileExistsError):
            db_create(vital_signs, created_db)

    def test_invalid_review_state_fails(self, db_path, vital_signs):
        with pytest.raises(ValueError):
            db_create(vital_signs, db_path, reviewed="Invalid")
        assert not db_path.exists()

    def test_failed_write_leaves_no_file(self, db_path):
        with pytest.raises(ValueError):
            db_create([make_row("Pulse", **{"": "unnamed column"})], db_path)
        assert not db_path.exists()

        assert db_create([make_row("Pulse")], db_path) == 1
        assert len(read_all(db_path)) == 1

    def test_non_plain_column_names_are_stored(self, db_path):
        db_create([make_row("Pulse", **{"Visit date": "2023-11-05"})], db_path)
        assert read_all(db_path)[0]["Visit date"] == "2023-11-05"

    def test_non_tabular_data_fails(self, db_path):
        with pytest.raises(TypeError):
            db_create("not a table", db_path)

    def test_plain_rows_have_empty_synch_time(self, db_path):
        db_create([make_row("Pulse")], db_path)
        assert read_all(db_path, "db_synch_time") == [{"synch_time": ""}]

    def test_empty_dataset_creates_key_columns(self, db_path):
        db_create(ReviewDataset(), db_path)
        assert read_all(db_path) == []

    def test_creates_missing_directory(self, tmp_path, vital_signs):
        path = tmp_path / "nested" / "deeper" / "db.sqlite"
        db_create(vital_signs, path)
        assert path.exists()

    def test_directory_creation_failure_is_loud(self, tmp_path, vital_signs):
        blocker = tmp_path / "file"
        blocker.write_text("not a directory")
        with pytest.raises(OSError, match="Could not create directory"):
            db_create(vital_signs, blocker / "sub" / "db.sqlite")
