# statement_compare/models/statement.py

from typing import Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator

# Column label -> cell text, in source column order
RawRow = dict[str, str]

CANONICAL_FIELDS = ("Date", "Description", "Amount", "Balance", "Reference")


def null_as_default(model: type[BaseModel], value, info: ValidationInfo):
    """
    Treat an explicit JSON null in an inference reply like a missing key.

    Null entries inside a list are dropped.
    """
    if value is None:
        field = model.model_fields[info.field_name]
        return field.get_default(call_default_factory=True)
    if isinstance(value, list):
        return [item for item in value if item is not None]
    return value


# ============================================
# Column Mapping
# ============================================

class ColumnMapping(BaseModel):
    """Which source column holds each canonical field, for one statement."""

    date_column: Optional[str] = Field(None, alias="dateColumn")
    description_column: Optional[str] = Field(None, alias="descriptionColumn")
    amount_column: Optional[str] = Field(None, alias="amountColumn")
    balance_column: Optional[str] = Field(None, alias="balanceColumn")
    reference_column: Optional[str] = Field(None, alias="referenceColumn")

    class Config:
        populate_by_name = True

    def source_for(self, field: str) -> Optional[str]:
        """Source column label for a canonical field name, e.g. "Amount"."""
        return getattr(self, f"{field.lower()}_column")


class StatementMappings(BaseModel):
    statement1: ColumnMapping = Field(default_factory=ColumnMapping)
    statement2: ColumnMapping = Field(default_factory=ColumnMapping)

    @field_validator("statement1", "statement2", mode="before")
    @classmethod
    def default_null_mapping(cls, value, info: ValidationInfo):
        return null_as_default(cls, value, info)


class MappingInference(BaseModel):
    """Reply to the column mapping request."""

    mappings: StatementMappings = Field(default_factory=StatementMappings)
    standard_columns: list[str] = Field(
        default_factory=lambda: list(CANONICAL_FIELDS), alias="standardColumns"
    )
    cleaning_rules: list[str] = Field(default_factory=list, alias="cleaningRules")
    data_issues: list[str] = Field(default_factory=list, alias="dataIssues")

    class Config:
        populate_by_name = True
        extra = "allow"

    @field_validator(
        "mappings", "standard_columns", "cleaning_rules", "data_issues", mode="before"
    )
    @classmethod
    def default_null_fields(cls, value, info: ValidationInfo):
        return null_as_default(cls, value, info)


# ============================================
# Cleaned Rows
# ============================================

class CleanedRow(BaseModel):
    """
    A statement row with canonical fields derived from it.

    `source` is the row exactly as loaded and is never modified. The
    canonical fields are derived and sit alongside it.
    """

    source: RawRow
    date: str = ""
    description: str = ""
    amount: str = ""
    balance: str = ""
    reference: str = ""
    original_amount: Optional[str] = None

    def to_record(self) -> dict[str, str]:
        """Flat record: original columns followed by the canonical fields."""
        record = dict(self.source)
        record["Date"] = self.date
        record["Description"] = self.description
        record["Amount"] = self.amount
        record["Balance"] = self.balance
        record["Reference"] = self.reference
        if self.original_amount is not None:
            record["OriginalAmount"] = self.original_amount
        return record

    def preview(self) -> dict[str, str]:
        return {
            "Date": self.date,
            "Description": self.description,
            "Amount": self.amount,
        }


class CleanedStatement(BaseModel):
    """A normalized statement with the mapping and rules that produced it."""

    rows: list[CleanedRow] = Field(default_factory=list)
    mapping: ColumnMapping
    rules: list[str] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)

    @property
    def records(self) -> list[dict[str, str]]:
        return [row.to_record() for row in self.rows]
