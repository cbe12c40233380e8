"""
Excel export of the current review state.

Writes one sheet with the reconciled review rows and one with the
current query records. Review state cells are colored so open items
stand out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger(__name__)


class Colors:
    """Report color palette (hex codes without #)."""

    HEADER_BG = "203764"
    HEADER_TEXT = "FFFFFF"
    REVIEWED_BG = "C6EFCE"
    REVIEWED_TEXT = "006100"
    OPEN_BG = "FFEB9C"
    OPEN_TEXT = "9C5700"


HEADER_FONT = Font(name="Segoe UI", size=11, bold=True, color=Colors.HEADER_TEXT)
HEADER_FILL = PatternFill(start_color=Colors.HEADER_BG, end_color=Colors.HEADER_BG, fill_type="solid")
HEADER_ALIGNMENT = Alignment(horizontal="center", vertical="center", wrap_text=True)
THIN_BORDER = Border(
    left=Side(style="thin", color="B4B4B4"),
    right=Side(style="thin", color="B4B4B4"),
    top=Side(style="thin", color="B4B4B4"),
    bottom=Side(style="thin", color="B4B4B4"),
)
REVIEWED_STYLE = (
    Font(name="Segoe UI", size=10, color=Colors.REVIEWED_TEXT),
    PatternFill(start_color=Colors.REVIEWED_BG, end_color=Colors.REVIEWED_BG, fill_type="solid"),
)
OPEN_STYLE = (
    Font(name="Segoe UI", size=10, color=Colors.OPEN_TEXT),
    PatternFill(start_color=Colors.OPEN_BG, end_color=Colors.OPEN_BG, fill_type="solid"),
)


@dataclass
class ColumnDef:
    """Column of an exported sheet."""

    name: str
    width: int = 16


def build_columns(rows: Sequence[Mapping[str, Any]], preferred: Sequence[str] = ()) -> list[ColumnDef]:
    """Preferred columns first, then the remaining ones in first-seen order."""
    names: list[str] = list(preferred)
    for row in rows:
        for name in row:
            if name not in names:
                names.append(name)
    return [ColumnDef(name=name, width=max(12, min(40, len(name) + 4))) for name in names]


def apply_header_row(ws: Worksheet, columns: list[ColumnDef], row: int = 1) -> None:
    for col_idx, col_def in enumerate(columns, start=1):
        cell = ws.cell(row=row, column=col_idx)
        cell.value = col_def.name
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGNMENT
        cell.border = THIN_BORDER
        ws.column_dimensions[get_column_letter(col_idx)].width = col_def.width


def write_sheet(
    ws: Worksheet,
    rows: Sequence[Mapping[str, Any]],
    columns: list[ColumnDef],
    status_column: str | None = None,
) -> None:
    apply_header_row(ws, columns)
    for row_idx, row in enumerate(rows, start=2):
        for col_idx, col_def in enumerate(columns, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=row.get(col_def.name))
            cell.border = THIN_BORDER
            if col_def.name == status_column:
                font, fill = REVIEWED_STYLE if cell.value == "Yes" else OPEN_STYLE
                cell.font = font
                cell.fill = fill

    ws.freeze_panes = ws.cell(row=2, column=1)
    if columns:
        ws.auto_filter.ref = f"A1:{get_column_letter(len(columns))}1"


def export_review_workbook(
    output_path: Path | str,
    review_rows: Sequence[Mapping[str, Any]],
    query_rows: Sequence[Mapping[str, Any]] = (),
    review_columns: Sequence[str] = (),
) -> Path:
    """
    Write the current review state to an .xlsx file.

    Args:
        output_path: Target file, parent directories are created
        review_rows: Reconciled review rows
        query_rows: Current query records
        review_columns: Columns to place first on the review sheet

    Returns:
        Path of the written workbook
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    ws_review = wb.active
    ws_review.title = "Review"
    write_sheet(
        ws_review,
        review_rows,
        build_columns(review_rows, review_columns),
        status_column="reviewed",
    )

    ws_queries = wb.create_sheet("Queries")
    write_sheet(ws_queries, query_rows, build_columns(query_rows))

    wb.save(output_path)
    logger.info(
        "Exported %d review rows and %d queries to %s",
        len(review_rows),
        len(query_rows),
        output_path,
    )
    return output_path
