"""
CLI main entry point.

Thin command wiring around ReviewDatabaseService. Each command resolves
the configuration, runs one operation and renders the result with rich.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from clinreview.application.review_db import ReviewDatabaseService
from clinreview.domain.config import AppConfig
from clinreview.domain.models import ReviewDataset, SyncOutcome
from clinreview.infrastructure.config import ConfigRepository
from clinreview.infrastructure.logging_config import setup_logging

logger = logging.getLogger(__name__)

console = Console()

app = typer.Typer(
    name="clinreview",
    help="Review database for clinical trial data review.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# ============================================================================
# Helpers
# ============================================================================


def load_json_rows(path: Path) -> ReviewDataset:
    """
    Read rows from a JSON file.

    Accepts a list of row objects, a single row object, or an object
    {"synch_time": "...", "rows": [...]}.
    """
    try:
        content = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    if isinstance(content, dict) and "rows" in content:
        return ReviewDataset.from_rows(content["rows"], content.get("synch_time"))
    if isinstance(content, dict):
        return ReviewDataset.from_rows([content])
    return ReviewDataset.coerce(content)


def parse_key_values(pairs: List[str]) -> dict[str, str]:
    result = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected KEY=VALUE, got '{pair}'")
        result[key] = value
    return result


def render_rows(rows: list[dict[str, Any]], title: str) -> None:
    if not rows:
        console.print(f"[yellow]No rows found for {title}[/yellow]")
        return
    columns: list[str] = []
    for row in rows:
        columns.extend(name for name in row if name not in columns)
    table = Table(title=title, show_lines=False)
    for name in columns:
        table.add_column(name)
    for row in rows:
        table.add_row(*("" if row.get(name) is None else str(row.get(name)) for name in columns))
    console.print(table)


def get_service(ctx: typer.Context, db: Optional[Path]) -> ReviewDatabaseService:
    config: AppConfig = ctx.obj
    return ReviewDatabaseService(db or config.db_path, settings=config.review)


def fail(command: str, error: Exception) -> None:
    logger.error("%s failed: %s", command, error)
    console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


DbOption = typer.Option(None, "--db", help="Database path (overrides the configuration).")


# ============================================================================
# Commands
# ============================================================================


@app.callback()
def main_callback(
    ctx: typer.Context,
    config_dir: Optional[Path] = typer.Option(
        None, "--config-dir", "-c", help="Directory containing clinreview.json."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level."),
):
    """
    Manage the review database of the data review application.
    """
    try:
        config = ConfigRepository(config_dir).load_app_config() if config_dir else AppConfig()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(logging.DEBUG if verbose else config.log_level_number, config.log_file)
    ctx.obj = config


@app.command()
def create(
    ctx: typer.Context,
    data: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with review data."),
    db: Optional[Path] = DbOption,
    reviewed: str = typer.Option("No", help="Initial review state (Yes, No or empty)."),
    reviewer: str = typer.Option("", help="Initial reviewer."),
    status: str = typer.Option("new", help="Initial status."),
):
    """Create a new review database."""
    service = get_service(ctx, db)
    try:
        count = service.create(load_json_rows(data), reviewed=reviewed, reviewer=reviewer, status=status)
    except Exception as e:
        fail("create", e)
    console.print(f"[green]Created {service.db_path} with {count} review rows[/green]")


@app.command()
def sync(
    ctx: typer.Context,
    data: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with updated review data."),
    db: Optional[Path] = DbOption,
):
    """Synchronize the database with newly exported data."""
    service = get_service(ctx, db)
    try:
        result = service.synchronize(load_json_rows(data))
    except Exception as e:
        fail("sync", e)

    color = {
        SyncOutcome.UPDATED: "green",
        SyncOutcome.UP_TO_DATE: "blue",
        SyncOutcome.STALE_DATA: "yellow",
    }[result.outcome]
    console.print(f"[{color}]{result.message}[/{color}]")


@app.command()
def review(
    ctx: typer.Context,
    subject: str = typer.Argument(..., help="Subject identifier."),
    form: str = typer.Argument(..., help="Form (item group)."),
    reviewed: str = typer.Option("Yes", help="New review state (Yes, No or empty)."),
    reviewer: str = typer.Option("", help="Name of the reviewer."),
    comment: str = typer.Option("", help="Review comment."),
    key: List[str] = typer.Option([], "--key", "-k", help="Extra review-by value as KEY=VALUE."),
    db: Optional[Path] = DbOption,
):
    """Save a review decision for a form of a subject."""
    service = get_service(ctx, db)
    rv_row: dict[str, Any] = {"subject_id": subject, "item_group": form}
    try:
        rv_row.update(parse_key_values(key))
        rv_row.update(reviewed=reviewed, reviewer=reviewer, comment=comment)
        result = service.save_review(rv_row)
    except typer.BadParameter:
        raise
    except Exception as e:
        fail("review", e)

    color = "green" if result.saved else "yellow"
    console.print(f"[{color}]{result.message}[/{color}]")


@app.command("add-query")
def add_query(
    ctx: typer.Context,
    data: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with query records."),
    db: Optional[Path] = DbOption,
):
    """Append query records to the query log."""
    service = get_service(ctx, db)
    try:
        count = service.save_query(load_json_rows(data).rows)
    except Exception as e:
        fail("add-query", e)
    console.print(f"[green]Saved {count} query records[/green]")


@app.command("get-query")
def get_query(
    ctx: typer.Context,
    query_id: str = typer.Argument(..., help="Query identifier."),
    n: Optional[int] = typer.Option(None, "--n", help="Follow-up number."),
    db: Optional[Path] = DbOption,
):
    """Show the latest record of a query."""
    service = get_service(ctx, db)
    try:
        rows = service.get_query(query_id, n=n)
    except Exception as e:
        fail("get-query", e)
    render_rows(rows, f"query {query_id}")


@app.command("get-review")
def get_review(
    ctx: typer.Context,
    subject: str = typer.Argument(..., help="Subject identifier."),
    form: str = typer.Argument(..., help="Form (item group)."),
    db: Optional[Path] = DbOption,
):
    """Show the current review state of a form of a subject."""
    service = get_service(ctx, db)
    try:
        rows = service.get_review(subject, form)
    except Exception as e:
        fail("get-review", e)
    render_rows(rows, f"{subject} / {form}")


@app.command()
def export(
    ctx: typer.Context,
    output: Path = typer.Argument(..., dir_okay=False, help="Target .xlsx file."),
    db: Optional[Path] = DbOption,
):
    """Export the current review state to Excel."""
    service = get_service(ctx, db)
    try:
        path = service.export_excel(output)
    except Exception as e:
        fail("export", e)
    console.print(f"[green]Exported review state to {path}[/green]")


def main() -> int:
    """
    Main entry point for the ClinReview CLI.

    Returns:
        int: Exit code (0 for success, non-zero for failure)
    """
    app()
    return 0


if __name__ == "__main__":
    main()
