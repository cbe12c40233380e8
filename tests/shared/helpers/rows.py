"""
Review data builders.
"""

from __future__ import annotations

CREATED_AT = "2024-01-01 10:00:00"


def make_row(
    item_name: str,
    subject_id: str = "S1",
    item_group: str = "Vital signs",
    event_name: str = "Visit 1",
    form_repeat: int = 1,
    edit_date_time: str = "2023-11-05 01:26:00",
    **extra,
) -> dict:
    """One data point of the review dataset."""
    row = {
        "subject_id": subject_id,
        "event_name": event_name,
        "item_group": item_group,
        "form_repeat": form_repeat,
        "item_name": item_name,
        "edit_date_time": edit_date_time,
    }
    row.update(extra)
    return row
