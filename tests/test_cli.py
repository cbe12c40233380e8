"""
CLI tests through typer's CliRunner.
"""

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from clinreview.interface import cli
from clinreview.interface.cli import app

from tests.shared.helpers import make_row, read_all

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_logging_setup(monkeypatch):
    """Keep pytest's log capture in place and render tables without wrapping."""
    monkeypatch.setattr(cli, "setup_logging", lambda *args, **kwargs: None)
    monkeypatch.setattr(cli, "console", Console(width=400))


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "data.json"
    path.write_text(
        json.dumps(
            {
                "synch_time": "2024-01-01 10:00:00",
                "rows": [make_row("Pulse"), make_row("Weight")],
            }
        )
    )
    return path


@pytest.fixture
def cli_db(tmp_path, data_file):
    db = tmp_path / "user_db.sqlite"
    result = runner.invoke(app, ["create", str(data_file), "--db", str(db)])
    assert result.exit_code == 0, result.output
    return db


class TestCli:

    def test_create(self, cli_db):
        assert len(read_all(cli_db)) == 2

    def test_create_twice_fails(self, cli_db, data_file):
        result = runner.invoke(app, ["create", str(data_file), "--db", str(cli_db)])
        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_sync_up_to_date(self, cli_db, data_file):
        result = runner.invoke(app, ["sync", str(data_file), "--db", str(cli_db)])
        assert result.exit_code == 0
        assert "up to date" in result.output

    def test_review_and_get_review(self, cli_db):
        result = runner.invoke(
            app, ["review", "S1", "Vital signs", "--reviewed", "Yes", "--reviewer", "Dr. A", "--db", str(cli_db)]
        )
        assert result.exit_code == 0, result.output
        assert len(read_all(cli_db)) == 4

        result = runner.invoke(app, ["get-review", "S1", "Vital signs", "--db", str(cli_db)])
        assert result.exit_code == 0
        assert "Pulse" in result.output

    def test_review_with_bad_key(self, cli_db):
        result = runner.invoke(app, ["review", "S1", "Vital signs", "--key", "novalue", "--db", str(cli_db)])
        assert result.exit_code == 2

    def test_queries(self, cli_db, tmp_path):
        queries = tmp_path / "queries.json"
        queries.write_text(
            json.dumps(
                [
                    {"query_id": "Q1", "n": 1, "timestamp": "2024-02-05 01:01:01", "query": "first"},
                    {"query_id": "Q1", "n": 2, "timestamp": "2024-02-06 01:01:01", "query": "second"},
                ]
            )
        )
        result = runner.invoke(app, ["add-query", str(queries), "--db", str(cli_db)])
        assert result.exit_code == 0, result.output

        result = runner.invoke(app, ["get-query", "Q1", "--db", str(cli_db)])
        assert result.exit_code == 0
        assert "second" in result.output

    def test_export(self, cli_db, tmp_path):
        out = tmp_path / "review.xlsx"
        result = runner.invoke(app, ["export", str(out), "--db", str(cli_db)])
        assert result.exit_code == 0, result.output
        assert out.exists()

    def test_missing_database(self, tmp_path):
        result = runner.invoke(app, ["get-review", "S1", "Vital signs", "--db", str(tmp_path / "none.sqlite")])
        assert result.exit_code == 1

    def test_config_dir(self, tmp_path, data_file):
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "clinreview.json").write_text(json.dumps({"db_path": "review.sqlite"}))

        result = runner.invoke(app, ["--config-dir", str(config_dir), "create", str(data_file)])
        assert result.exit_code == 0, result.output
        assert (config_dir / "review.sqlite").exists()

    def test_missing_config_dir(self, tmp_path, data_file):
        result = runner.invoke(app, ["--config-dir", str(tmp_path / "nope"), "create", str(data_file)])
        assert result.exit_code == 1

    def test_sync_with_numeric_synch_time(self, cli_db, tmp_path):
        data = tmp_path / "numeric.json"
        data.write_text(json.dumps({"synch_time": 20240102, "rows": [make_row("Pulse")]}))

        result = runner.invoke(app, ["sync", str(data), "--db", str(cli_db)])
        assert result.exit_code == 0, result.output
        assert read_all(cli_db, "db_synch_time") == [{"synch_time": "20240102"}]
