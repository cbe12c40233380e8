"""
Table-level helpers on top of sqlite3.

Rows are plain dicts. Tables are created from the rows they receive,
similar to writing a data frame: column types are inferred from the
first non-null value of each column.

Table and column names cannot be bound as parameters, so they are
quoted with embedded quotes doubled. Every value goes through a bound parameter.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Sequence

logger = logging.getLogger(__name__)


def quote_identifier(name: str) -> str:
    """
    Quote a table or column name.

    Any non-empty name is allowed, e.g. "Visit date". Embedded double
    quotes are doubled, so the name can never end the quoted identifier.

    Raises:
        ValueError: If the name is empty, not a string or contains NUL
    """
    if not isinstance(name, str) or not name or "\x00" in name:
        raise ValueError(f"Invalid SQL identifier: {name!r}")
    escaped = name.replace('"', '""')
    return f'"{escaped}"'


def sql_type(value: Any) -> str:
    """SQLite column type for a Python value."""
    if isinstance(value, bool) or isinstance(value, int):
        return "INTEGER"
    if isinstance(value, float):
        return "REAL"
    if isinstance(value, bytes):
        return "BLOB"
    return "TEXT"


def to_db_value(value: Any) -> Any:
    """Convert values sqlite3 cannot store natively."""
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.isoformat()
    if value is None or isinstance(value, (str, int, float, bytes)):
        return value
    return str(value)


def collect_columns(rows: Sequence[Mapping[str, Any]], columns: Sequence[str] = ()) -> dict[str, str]:
    """
    Ordered column -> type map for a set of rows.

    Columns listed in `columns` come first; other columns follow in the
    order they are first seen.
    """
    result: dict[str, str] = {name: "" for name in columns}
    for row in rows:
        for name, value in row.items():
            if not result.get(name) and value is not None:
                result[name] = sql_type(value)
            elif name not in result:
                result[name] = ""
    return {name: col_type or "TEXT" for name, col_type in result.items()}


def table_exists(conn: sqlite3.Connection, table: str) -> bool:
    row = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?",
        (table,),
    ).fetchone()
    return row is not None


def table_columns(conn: sqlite3.Connection, table: str) -> list[str]:
    """Column names of a table in definition order."""
    cursor = conn.execute(f"PRAGMA table_info({quote_identifier(table)})")
    return [row[1] for row in cursor.fetchall()]


def create_table(conn: sqlite3.Connection, table: str, columns: Mapping[str, str]) -> None:
    """Create a table from a column -> type map."""
    if not columns:
        raise ValueError(f"Cannot create table '{table}' without columns")
    column_sql = ", ".join(
        f"{quote_identifier(name)} {col_type}" for name, col_type in columns.items()
    )
    conn.execute(f"CREATE TABLE {quote_identifier(table)} ({column_sql})")
    logger.debug("Created table %s with %d columns", table, len(columns))


def insert_rows(conn: sqlite3.Connection, table: str, rows: Sequence[Mapping[str, Any]]) -> int:
    """Insert rows into an existing table. Missing columns become NULL."""
    if not rows:
        return 0
    columns = table_columns(conn, table)
    column_sql = ", ".join(quote_identifier(name) for name in columns)
    placeholders = ", ".join("?" for _ in columns)
    conn.executemany(
        f"INSERT INTO {quote_identifier(table)} ({column_sql}) VALUES ({placeholders})",
        [tuple(to_db_value(row.get(name)) for name in columns) for row in rows],
    )
    return len(rows)


def write_table(
    conn: sqlite3.Connection,
    table: str,
    rows: Sequence[Mapping[str, Any]],
    columns: Mapping[str, str] | Sequence[str] = (),
    append: bool = False,
    overwrite: bool = False,
) -> int:
    """
    Write rows to a table.

    Args:
        conn: Open connection. The caller commits.
        table: Table name
        rows: Rows to write
        columns: Columns that must exist even if no row carries them.
            A mapping gives explicit types.
        append: Add rows to an existing table, adding missing columns
        overwrite: Replace an existing table

    Returns:
        Number of rows written

    Raises:
        ValueError: If the table exists and neither append nor overwrite is set
    """
    if append and overwrite:
        raise ValueError("append and overwrite are mutually exclusive")

    explicit_types = dict(columns) if isinstance(columns, Mapping) else {}
    wanted = collect_columns(rows, list(columns))
    wanted.update(explicit_types)

    exists = table_exists(conn, table)
    if exists and overwrite:
        conn.execute(f"DROP TABLE {quote_identifier(table)}")
        exists = False
    elif exists and not append:
        raise ValueError(f"Table '{table}' already exists")

    if not exists:
        create_table(conn, table, wanted)
    else:
        present = set(table_columns(conn, table))
        for name, col_type in wanted.items():
            if name not in present:
                conn.execute(
                    f"ALTER TABLE {quote_identifier(table)} "
                    f"ADD COLUMN {quote_identifier(name)} {col_type}"
                )
                logger.info("Added column '%s' to table '%s'", name, table)

    return insert_rows(conn, table, rows)


def fetch_rows(conn: sqlite3.Connection, sql: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
    """Run a parameterized SELECT and return rows as dicts."""
    cursor = conn.execute(sql, tuple(to_db_value(p) for p in params))
    return [dict(row) for row in cursor.fetchall()]


def read_table(conn: sqlite3.Connection, table: str) -> list[dict[str, Any]]:
    """All rows of a table in insertion order."""
    return fetch_rows(conn, f"SELECT * FROM {quote_identifier(table)} ORDER BY rowid")


def select_where(
    conn: sqlite3.Connection,
    table: str,
    filters: Mapping[str, Any],
) -> list[dict[str, Any]]:
    """
    Rows where every column in `filters` equals the given value.

    Rows come back in insertion order.
    """
    clauses = [f"{quote_identifier(name)} = ?" for name in filters]
    where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
    return fetch_rows(
        conn,
        f"SELECT * FROM {quote_identifier(table)}{where} ORDER BY rowid",
        list(filters.values()),
    )


def as_row_list(data: Mapping[str, Any] | Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """
    Normalize a single mapping or an iterable of mappings to a list of dicts.

    Raises:
        TypeError: If the input is not tabular
    """
    if isinstance(data, Mapping):
        return [dict(data)]
    if isinstance(data, (str, bytes)) or not isinstance(data, Iterable):
        raise TypeError(f"Expected a mapping or a sequence of mappings, got {type(data).__name__}")
    rows = list(data)
    for row in rows:
        if not isinstance(row, Mapping):
            raise TypeError(f"Expected rows as mappings, got {type(row).__name__}")
    return [dict(row) for row in rows]
