# statement_compare/core/__init__.py

from statement_compare.core.loader import load_statement
from statement_compare.core.normalizers import (
    clean_statement,
    clean_row,
    parse_date,
    sort_by_date,
    strip_amount,
)
from statement_compare.core.ai_assist import (
    infer_column_mappings,
    clean_statements,
    compare_statements,
)
from statement_compare.core.exporter import cleaned_rows_to_xlsx

__all__ = [
    "load_statement",
    "clean_statement",
    "clean_row",
    "parse_date",
    "sort_by_date",
    "strip_amount",
    "infer_column_mappings",
    "clean_statements",
    "compare_statements",
    "cleaned_rows_to_xlsx",
]
