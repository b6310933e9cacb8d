# statement_compare/models/session.py

from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, Field

from statement_compare.exceptions import MissingInputError, StepInProgressError
from statement_compare.models.report import ReconciliationReport
from statement_compare.models.statement import CleanedStatement, RawRow

Step = Literal["upload", "clean", "compare"]
Slot = Literal[1, 2]


class UploadedStatement(BaseModel):
    """A statement as loaded from the uploaded file."""

    filename: str
    rows: list[RawRow] = Field(default_factory=list)


class ComparisonSession(BaseModel):
    """
    One user's upload -> clean -> compare workflow.

    Results of a step are only assigned once the step succeeds, so a
    failed step leaves the previous state as it was.
    """

    id: str
    created_at: datetime
    last_active_at: datetime = Field(default_factory=datetime.now)
    step: Step = "upload"
    busy: bool = False
    statements: dict[int, UploadedStatement] = Field(default_factory=dict)
    cleaned: dict[int, CleanedStatement] = Field(default_factory=dict)
    comparison: Optional[ReconciliationReport] = None

    def set_statement(self, slot: Slot, statement: UploadedStatement) -> None:
        """
        Replace one uploaded statement; earlier results no longer apply.

        Rejected while a step is running, since its result would describe
        the replaced rows.
        """
        if self.busy:
            raise StepInProgressError(
                f"Cannot replace a statement while a {self.step} request is in progress"
            )
        self.statements[slot] = statement
        self.cleaned = {}
        self.comparison = None

    def require_statements(self) -> tuple[UploadedStatement, UploadedStatement]:
        if 1 not in self.statements or 2 not in self.statements:
            raise MissingInputError("Please upload both files first")
        return self.statements[1], self.statements[2]

    def require_cleaned(self) -> tuple[CleanedStatement, CleanedStatement]:
        if 1 not in self.cleaned or 2 not in self.cleaned:
            raise MissingInputError("Please clean the statements first")
        return self.cleaned[1], self.cleaned[2]

    def require_cleaned_statement(self, slot: Slot) -> CleanedStatement:
        if slot not in self.cleaned:
            raise MissingInputError("Please clean the statements first")
        return self.cleaned[slot]
