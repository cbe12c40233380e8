"""
Shared Helpers - Review data builders and raw database access for tests.
"""

from .db import read_all
from .rows import CREATED_AT, make_row

__all__ = [
    "CREATED_AT",
    "make_row",
    "read_all",
]
