"""
Scoped SQLite connections.

Keeps the connection arguments in one place so the driver settings
are identical for every operation in the application.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

MEMORY_DB = ":memory:"


@contextmanager
def get_db_connection(db_path: Path | str) -> Iterator[sqlite3.Connection]:
    """
    Open a database connection for the duration of a `with` block.

    The connection is closed on every exit path. Uncommitted changes
    are rolled back when the block raises.

    Args:
        db_path: Path to the SQLite file, or ":memory:"
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    logger.debug("Database connection opened: %s", db_path)
    try:
        yield conn
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()
        logger.debug("Database connection closed: %s", db_path)


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """
    Group the writes of one operation, including DDL, into a single commit.
    """
    conn.execute("BEGIN")
    try:
        yield conn
        conn.commit()
    except Exception as e:
        conn.rollback()
        logger.error("Transaction rolled back: %s", e)
        raise


def db_temp_connect(db_path: Path | str, code: Callable[[sqlite3.Connection], T]) -> T:
    """
    Run `code` with a temporary connection and return its result.

    Example:
        db_temp_connect(path, lambda con: read_table(con, "query_data"))
    """
    with get_db_connection(db_path) as conn:
        return code(conn)


def database_exists(db_path: Path | str) -> bool:
    """True if the database file exists. In-memory databases never do."""
    if str(db_path) == MEMORY_DB:
        return False
    return Path(db_path).exists()
