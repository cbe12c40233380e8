"""
Raw database access, bypassing the application layer.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path


def read_all(db_path: Path, table: str = "all_review_data") -> list[dict]:
    """Raw table contents in insertion order."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    try:
        return [dict(r) for r in conn.execute(f'SELECT * FROM "{table}" ORDER BY rowid')]
    finally:
        conn.close()
