# statement_compare/core/loader.py

"""
Spreadsheet loading.

Decodes an uploaded statement into row records: first sheet only, first
row as column labels, every cell as text.
"""

from datetime import date, datetime, time
from pathlib import Path
from typing import Any
import io
import logging

import pandas as pd

from statement_compare.exceptions import FileParseError
from statement_compare.models import RawRow

logger = logging.getLogger(__name__)

FILE_TYPES = {
    ".xlsx": "xlsx",
    ".xlsm": "xlsx",
    ".xls": "xls",
    ".csv": "csv",
}

# pandas reader engine per spreadsheet type
EXCEL_ENGINES = {
    "xlsx": "openpyxl",
    "xls": "xlrd",
}

# xlsx/xlsm are zip containers, legacy xls is an OLE2 compound file
ZIP_MAGIC = b"PK\x03\x04"
OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


def detect_file_type(filename: str, contents: bytes) -> str:
    """
    Return "xlsx", "xls" or "csv".

    Uses the file extension when there is one, otherwise sniffs the bytes.
    """
    suffix = Path(filename or "").suffix.lower()
    if suffix in FILE_TYPES:
        return FILE_TYPES[suffix]
    if suffix:
        raise FileParseError(f"Unsupported file type: {suffix}")

    if contents.startswith(ZIP_MAGIC):
        return "xlsx"
    if contents.startswith(OLE2_MAGIC):
        return "xls"
    return "csv"


def cell_to_string(value: Any) -> str:
    """
    Coerce a cell value to the text a user would see.

    Handles:
    - Empty cells / NaN
    - Dates and datetimes (date only when there is no time part)
    - Whole-number floats ("12.0" -> "12")
    """
    if value is None:
        return ""

    if isinstance(value, str):
        return value

    if isinstance(value, datetime):
        if pd.isna(value):
            return ""
        if value.time() == time(0, 0):
            return value.strftime("%Y-%m-%d")
        return value.strftime("%Y-%m-%d %H:%M:%S")

    if isinstance(value, date):
        return value.isoformat()

    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"

    if isinstance(value, float):
        if pd.isna(value):
            return ""
        if value.is_integer():
            return str(int(value))

    return str(value)


def dataframe_to_rows(df: pd.DataFrame) -> list[RawRow]:
    """Convert a DataFrame to row records, skipping fully empty rows."""
    columns = [str(col) for col in df.columns]
    rows: list[RawRow] = []

    for values in df.itertuples(index=False, name=None):
        row = {col: cell_to_string(value) for col, value in zip(columns, values)}
        if any(row.values()):
            rows.append(row)

    return rows


def _read_excel(contents: bytes, engine: str) -> pd.DataFrame:
    return pd.read_excel(
        io.BytesIO(contents),
        sheet_name=0,
        header=0,
        dtype=object,
        engine=engine,
    )


def _read_csv(contents: bytes) -> pd.DataFrame:
    return pd.read_csv(
        io.BytesIO(contents),
        dtype=str,
        keep_default_na=False,
        encoding="utf-8-sig",
        skip_blank_lines=True,
    )


def load_statement(contents: bytes, filename: str = "") -> list[RawRow]:
    """
    Decode an uploaded spreadsheet into row records.

    Args:
        contents: Raw file bytes
        filename: Original file name, used to pick the format

    Returns:
        Rows in source order, each mapping column label to cell text

    Raises:
        FileParseError: If the bytes cannot be read as a supported spreadsheet
    """
    if not contents:
        raise FileParseError("File is empty")

    file_type = detect_file_type(filename, contents)
    logger.info(f"Loading {file_type} statement: {filename or '<unnamed>'}")

    try:
        if file_type in EXCEL_ENGINES:
            df = _read_excel(contents, EXCEL_ENGINES[file_type])
        else:
            df = _read_csv(contents)
    except pd.errors.EmptyDataError:
        logger.info("Statement has no header row; no rows loaded")
        return []
    except Exception as e:
        logger.warning(f"Failed to read {file_type} file {filename!r}: {e}")
        raise FileParseError(str(e)) from e

    rows = dataframe_to_rows(df)
    logger.info(f"Loaded {len(rows)} rows with columns {[str(c) for c in df.columns]}")
    return rows
