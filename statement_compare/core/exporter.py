# statement_compare/core/exporter.py

"""
Excel export of cleaned statements.
"""

from typing import Iterable
import io
import logging

from openpyxl import Workbook
from openpyxl.styles import Font

from statement_compare.models import CleanedRow

logger = logging.getLogger(__name__)

SHEET_NAME = "Cleaned Statement"
HEADER_FONT = Font(bold=True)


def record_columns(records: Iterable[dict[str, str]]) -> list[str]:
    """Union of record keys, in the order they are first seen."""
    columns: dict[str, None] = {}
    for record in records:
        for key in record:
            columns.setdefault(key, None)
    return list(columns)


def _append_text_row(ws, values: list) -> None:
    """Append a row, storing strings that start with "=" as text, not formulas."""
    ws.append(values)
    for cell in ws[ws.max_row]:
        if cell.data_type == "f":
            cell.data_type = "s"


def cleaned_rows_to_xlsx(rows: list[CleanedRow]) -> bytes:
    """
    Write cleaned rows to a single-sheet workbook.

    The header is every original and canonical column name; a row missing
    a column gets an empty cell.

    Returns:
        The .xlsx file contents
    """
    records = [row.to_record() for row in rows]
    columns = record_columns(records)

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME

    _append_text_row(ws, columns)
    for cell in ws[1]:
        cell.font = HEADER_FONT

    for record in records:
        _append_text_row(ws, [record.get(col) for col in columns])

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info(f"Exported {len(records)} rows x {len(columns)} columns")
    return buffer.getvalue()
