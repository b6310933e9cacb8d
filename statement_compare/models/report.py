# statement_compare/models/report.py

"""
Reconciliation report returned by the inference service.

The reply is loosely typed: every field is optional and unknown keys are
kept, but the overall shape is checked when the reply is parsed.
"""

from typing import Optional
from pydantic import BaseModel, Field, ValidationInfo, field_validator

from statement_compare.models.statement import null_as_default


class ReportSummary(BaseModel):
    total_transactions1: Optional[int] = Field(None, alias="totalTransactions1")
    total_transactions2: Optional[int] = Field(None, alias="totalTransactions2")
    matched_with_description: Optional[int] = Field(None, alias="matchedWithDescription")
    matched_amount_only: Optional[int] = Field(None, alias="matchedAmountOnly")
    unique_to_statement1: Optional[int] = Field(None, alias="uniqueToStatement1")
    unique_to_statement2: Optional[int] = Field(None, alias="uniqueToStatement2")
    potential_duplicates: Optional[int] = Field(None, alias="potentialDuplicates")

    class Config:
        populate_by_name = True
        extra = "allow"

    @property
    def matching_transactions(self) -> int:
        """Both matching passes combined."""
        return (self.matched_with_description or 0) + (self.matched_amount_only or 0)


class MatchingDetails(BaseModel):
    perfect_matches: Optional[int] = Field(None, alias="perfectMatches")
    description_mismatches: Optional[int] = Field(None, alias="descriptionMismatches")
    amount_mismatches: Optional[int] = Field(None, alias="amountMismatches")

    class Config:
        populate_by_name = True
        extra = "allow"


class ReportIssue(BaseModel):
    """
    A potential issue found while comparing.

    `type` is one of missing, duplicate, description_mismatch,
    amount_difference or debit_credit_mismatch, and `severity` one of
    high, medium or low, but other values are passed through.
    """

    type: str = "unknown"
    description: str = ""
    severity: str = "low"
    details: Optional[str] = None
    transaction1: Optional[str] = None
    transaction2: Optional[str] = None

    class Config:
        extra = "allow"

    @field_validator("type", "description", "severity", mode="before")
    @classmethod
    def default_null_fields(cls, value, info: ValidationInfo):
        return null_as_default(cls, value, info)

    @property
    def heading(self) -> str:
        return f"{self.type.replace('_', ' ').title()} ({self.severity} severity)"


class ReconciliationReport(BaseModel):
    summary: ReportSummary = Field(default_factory=ReportSummary)
    matching_details: MatchingDetails = Field(
        default_factory=MatchingDetails, alias="matchingDetails"
    )
    insights: list[str] = Field(default_factory=list)
    potential_issues: list[ReportIssue] = Field(
        default_factory=list, alias="potentialIssues"
    )
    recommendations: list[str] = Field(default_factory=list)

    class Config:
        populate_by_name = True
        extra = "allow"

    @field_validator(
        "summary",
        "matching_details",
        "insights",
        "potential_issues",
        "recommendations",
        mode="before",
    )
    @classmethod
    def default_null_fields(cls, value, info: ValidationInfo):
        return null_as_default(cls, value, info)

    def issues_by_severity(self) -> dict[str, list[ReportIssue]]:
        """Group issues into high, medium and low; anything else counts as low."""
        grouped: dict[str, list[ReportIssue]] = {"high": [], "medium": [], "low": []}
        for issue in self.potential_issues:
            grouped.get(issue.severity, grouped["low"]).append(issue)
        return grouped

    def to_response(self) -> dict:
        """Report as returned to clients, plus the combined matching count."""
        body = self.model_dump(by_alias=True)
        body["summary"]["matchingTransactions"] = self.summary.matching_transactions
        return body
