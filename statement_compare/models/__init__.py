# statement_compare/models/__init__.py

from statement_compare.models.statement import (
    CANONICAL_FIELDS,
    RawRow,
    ColumnMapping,
    StatementMappings,
    MappingInference,
    CleanedRow,
    CleanedStatement,
)
from statement_compare.models.report import (
    ReportSummary,
    MatchingDetails,
    ReportIssue,
    ReconciliationReport,
)
from statement_compare.models.session import (
    Step,
    Slot,
    UploadedStatement,
    ComparisonSession,
)

__all__ = [
    # Statement
    "CANONICAL_FIELDS",
    "RawRow",
    "ColumnMapping",
    "StatementMappings",
    "MappingInference",
    "CleanedRow",
    "CleanedStatement",
    # Report
    "ReportSummary",
    "MatchingDetails",
    "ReportIssue",
    "ReconciliationReport",
    # Session
    "Step",
    "Slot",
    "UploadedStatement",
    "ComparisonSession",
]
