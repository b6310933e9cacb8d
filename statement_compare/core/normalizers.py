# statement_compare/core/normalizers.py

"""
Row normalization for uploaded statements.

Maps each row onto the canonical fields while keeping every original
column, then orders the statement by date.
"""

from datetime import datetime, timezone
from typing import Any, Optional
import logging
import re

from statement_compare.models import (
    CANONICAL_FIELDS,
    ColumnMapping,
    CleanedRow,
    RawRow,
)

logger = logging.getLogger(__name__)

_NON_AMOUNT_CHARS = re.compile(r"[^0-9.\-]")

_DATE_FORMATS = [
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%d/%m/%Y",
    "%Y/%m/%d",
    "%m/%d/%y",
    "%d-%m-%Y",
    "%d-%b-%Y",
    "%d-%b-%y",
    "%d %b %Y",
    "%d %B %Y",
    "%b %d, %Y",
    "%B %d, %Y",
    "%b %d %Y",
]

_TIME_SUFFIXES = ["", " %H:%M:%S", " %H:%M"]


def strip_amount(amount: Any) -> str:
    """
    Strip everything but digits, decimal points and minus signs.

    A textual strip, not a numeric parse: "$1,200.50" -> "1200.50",
    "(45.00)" -> "45.00". Applying it twice gives the same result.
    """
    if amount is None:
        return ""
    return _NON_AMOUNT_CHARS.sub("", str(amount))


def parse_date(d: Any) -> Optional[datetime]:
    """
    Parse a statement date cell.

    Handles:
    - datetime objects
    - ISO strings (including a trailing Z)
    - Common day/month/year layouts, with or without a time

    Returns None when the value is not a recognisable date. Aware values
    are converted to naive UTC so any two results compare.
    """
    if d is None:
        return None

    if isinstance(d, datetime):
        parsed = d
    else:
        text = str(d).strip()
        if not text:
            return None
        parsed = _parse_date_text(text)
        if parsed is None:
            return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _parse_date_text(text: str) -> Optional[datetime]:
    # Try ISO format first
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        for suffix in _TIME_SUFFIXES:
            try:
                return datetime.strptime(text, fmt + suffix)
            except ValueError:
                continue

    return None


def clean_row(row: RawRow, mapping: ColumnMapping) -> CleanedRow:
    """Derive the canonical fields of one row from its mapped columns."""
    values = {}
    for field in CANONICAL_FIELDS:
        column = mapping.source_for(field)
        values[field.lower()] = (row.get(column) or "") if column else ""

    cleaned = CleanedRow(source=dict(row), **values)

    if cleaned.amount:
        cleaned.original_amount = cleaned.amount
        cleaned.amount = strip_amount(cleaned.amount)

    return cleaned


def sort_by_date(rows: list[CleanedRow]) -> list[CleanedRow]:
    """
    Order rows by ascending date.

    Rows whose date cannot be parsed have no ordering preference: they stay
    at their positions, and the dated rows are sorted into the remaining
    positions. Equal dates keep their input order.
    """
    parsed = [parse_date(row.date) for row in rows]
    dated_slots = [i for i, value in enumerate(parsed) if value is not None]

    ordered = sorted(dated_slots, key=lambda i: parsed[i])

    result = list(rows)
    for slot, source_index in zip(dated_slots, ordered):
        result[slot] = rows[source_index]

    undated = len(rows) - len(dated_slots)
    if undated:
        logger.debug(f"{undated} of {len(rows)} rows have unparseable dates")

    return result


def clean_statement(rows: list[RawRow], mapping: ColumnMapping) -> list[CleanedRow]:
    """
    Normalize a statement onto the canonical fields.

    Every original column is kept as-is on each row; the result is
    ordered by date.
    """
    cleaned = [clean_row(row, mapping) for row in rows]
    return sort_by_date(cleaned)
