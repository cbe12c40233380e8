"""
SQLite infrastructure package.

Provides scoped connections and table helpers for the review database.
"""

from clinreview.infrastructure.sqlite.connection import (
    database_exists,
    db_temp_connect,
    get_db_connection,
    transaction,
)
from clinreview.infrastructure.sqlite.schema import (
    QUERY_DATA_SKELETON,
    QUERY_TABLE,
    REVIEW_TABLE,
    SYNCH_TIME_COLUMN,
    SYNCH_TIME_TABLE,
)
from clinreview.infrastructure.sqlite.tables import (
    fetch_rows,
    quote_identifier,
    read_table,
    select_where,
    write_table,
)

__all__ = [
    "QUERY_DATA_SKELETON",
    "QUERY_TABLE",
    "REVIEW_TABLE",
    "SYNCH_TIME_COLUMN",
    "SYNCH_TIME_TABLE",
    "database_exists",
    "db_temp_connect",
    "fetch_rows",
    "get_db_connection",
    "quote_identifier",
    "read_table",
    "select_where",
    "transaction",
    "write_table",
]
