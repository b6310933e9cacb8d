# tests/test_ai_assist.py

"""
Tests for the mapping and reconciliation workflow around the inference client.
"""

import asyncio
import json

import pytest

from statement_compare.core.ai_assist import (
    clean_statements,
    compare_statements,
    infer_column_mappings,
)
from statement_compare.exceptions import FormatError, TransportError
from statement_compare.models import (
    CleanedRow,
    CleanedStatement,
    ColumnMapping,
    ReconciliationReport,
)
from tests.conftest import MAPPING_REPLY, REPORT_REPLY, FakeInferenceClient


def statement_rows(count: int, prefix: str) -> list[dict]:
    return [
        {"Date": f"2024-01-{i % 28 + 1:02d}", "Memo": f"{prefix}-{i}", "Amount": f"${i}.00"}
        for i in range(count)
    ]


def cleaned_statement(count: int, prefix: str) -> CleanedStatement:
    rows = [
        CleanedRow(source={"Ref": f"{prefix}-{i}"}, date="2024-01-05", amount=str(i))
        for i in range(count)
    ]
    return CleanedStatement(rows=rows, mapping=ColumnMapping())


# ============================================
# Column Mapping
# ============================================

class TestInferColumnMappings:

    def test_sample_is_bounded(self):
        """Only the column labels and first five rows are sent."""
        client = FakeInferenceClient(replies=[MAPPING_REPLY])

        asyncio.run(infer_column_mappings(client, statement_rows(8, "a"), statement_rows(3, "b")))

        prompt, max_tokens = client.calls[0]
        assert max_tokens == 8000
        assert '["Date", "Memo", "Amount"]' in prompt
        assert '"a-4"' in prompt
        assert '"a-5"' not in prompt
        assert '"b-2"' in prompt

    def test_reply_parsed(self):
        client = FakeInferenceClient(replies=[MAPPING_REPLY])

        inference = asyncio.run(infer_column_mappings(client, [], []))

        assert inference.mappings.statement1.date_column == "Txn Date"
        assert inference.mappings.statement2.reference_column == "Ref"
        assert inference.mappings.statement2.balance_column is None
        assert inference.cleaning_rules == ["Remove currency symbols from amounts"]

    def test_partial_reply_defaults(self):
        client = FakeInferenceClient(replies=[{"mappings": {"statement1": {"dateColumn": "D"}}}])

        inference = asyncio.run(infer_column_mappings(client, [], []))

        assert inference.mappings.statement1.date_column == "D"
        assert inference.mappings.statement2.amount_column is None
        assert inference.data_issues == []

    def test_null_fields_default(self):
        client = FakeInferenceClient(replies=[{
            "mappings": {"statement1": None, "statement2": {"dateColumn": "Posted"}},
            "standardColumns": None,
            "cleaningRules": None,
            "dataIssues": ["Blank dates", None],
        }])

        inference = asyncio.run(infer_column_mappings(client, [], []))

        assert inference.mappings.statement1.date_column is None
        assert inference.mappings.statement2.date_column == "Posted"
        assert inference.standard_columns == ["Date", "Description", "Amount", "Balance", "Reference"]
        assert inference.cleaning_rules == []
        assert inference.data_issues == ["Blank dates"]

    def test_wrong_shape(self):
        client = FakeInferenceClient(replies=[{"mappings": "statement1: Date"}])

        with pytest.raises(FormatError):
            asyncio.run(infer_column_mappings(client, [], []))


class TestCleanStatements:

    def test_both_statements_cleaned(self):
        rows1 = [
            {"Txn Date": "2024-03-01", "Narrative": "Grocer", "Amt": "$-45.20", "Running Balance": "1,154.80"},
            {"Txn Date": "2024-01-15", "Narrative": "Salary", "Amt": "$1,200.00", "Running Balance": "1,200.00"},
        ]
        rows2 = [{"Posted": "2024-01-15", "Details": "Salary", "Value": "1200", "Ref": "L-1"}]
        client = FakeInferenceClient(replies=[MAPPING_REPLY])

        cleaned1, cleaned2 = asyncio.run(clean_statements(client, rows1, rows2))

        assert [r.date for r in cleaned1.rows] == ["2024-01-15", "2024-03-01"]
        assert cleaned1.rows[0].amount == "1200.00"
        assert cleaned1.rows[0].balance == "1,200.00"
        assert cleaned2.rows[0].reference == "L-1"
        assert cleaned1.mapping.amount_column == "Amt"
        assert cleaned2.rules == cleaned1.rules == MAPPING_REPLY["cleaningRules"]

    def test_transport_error_propagates(self):
        client = FakeInferenceClient(error=TransportError("connection reset"))

        with pytest.raises(TransportError):
            asyncio.run(clean_statements(client, [], []))


# ============================================
# Reconciliation
# ============================================

class TestCompareStatements:

    def test_rows_are_bounded(self):
        """At most 50 rows per statement are sent, with the full counts."""
        client = FakeInferenceClient(replies=[REPORT_REPLY])

        asyncio.run(compare_statements(client, cleaned_statement(60, "s1"), cleaned_statement(3, "s2")))

        prompt, max_tokens = client.calls[0]
        assert max_tokens == 4000
        assert "Statement 1 (60 transactions)" in prompt
        assert "Statement 2 (3 transactions)" in prompt
        assert '"s1-49"' in prompt
        assert '"s1-50"' not in prompt
        assert "Second Pass" in prompt

    def test_records_include_canonical_fields(self):
        client = FakeInferenceClient(replies=[REPORT_REPLY])
        statement = cleaned_statement(1, "s1")
        statement.rows[0].original_amount = "$0"

        asyncio.run(compare_statements(client, statement, cleaned_statement(0, "s2")))

        prompt = client.calls[0][0]
        sent = json.loads(prompt.split("Statement 1 (1 transactions):\n", 1)[1].split("\n\nStatement 2", 1)[0])
        assert sent == [
            {
                "Ref": "s1-0",
                "Date": "2024-01-05",
                "Description": "",
                "Amount": "0",
                "Balance": "",
                "Reference": "",
                "OriginalAmount": "$0",
            }
        ]

    def test_report_parsed(self):
        client = FakeInferenceClient(replies=[REPORT_REPLY])

        report = asyncio.run(
            compare_statements(client, cleaned_statement(3, "s1"), cleaned_statement(2, "s2"))
        )

        assert isinstance(report, ReconciliationReport)
        assert report.summary.matching_transactions == 2
        assert report.potential_issues[0].severity == "high"
        assert report.recommendations == ["Check the pending transfer"]

    def test_wrong_shape(self):
        client = FakeInferenceClient(replies=[{"summary": "all good"}])

        with pytest.raises(FormatError):
            asyncio.run(
                compare_statements(client, cleaned_statement(1, "s1"), cleaned_statement(1, "s2"))
            )


# ============================================
# Report Model
# ============================================

class TestReconciliationReport:

    def test_missing_fields_default(self):
        report = ReconciliationReport.model_validate({})

        assert report.summary.total_transactions1 is None
        assert report.summary.matching_transactions == 0
        assert report.insights == []
        assert report.potential_issues == []

    def test_unknown_keys_kept(self):
        report = ReconciliationReport.model_validate({"confidence": "high"})

        assert report.model_dump(by_alias=True)["confidence"] == "high"

    def test_issues_by_severity(self):
        report = ReconciliationReport.model_validate({
            "potentialIssues": [
                {"type": "duplicate", "severity": "medium"},
                {"type": "amount_difference", "severity": "critical"},
                {"type": "missing", "severity": "high"},
            ]
        })

        grouped = report.issues_by_severity()

        assert [i.type for i in grouped["high"]] == ["missing"]
        assert [i.type for i in grouped["medium"]] == ["duplicate"]
        assert [i.type for i in grouped["low"]] == ["amount_difference"]

    def test_issue_heading(self):
        report = ReconciliationReport.model_validate({
            "potentialIssues": [{"type": "debit_credit_mismatch", "severity": "high"}]
        })

        assert report.potential_issues[0].heading == "Debit Credit Mismatch (high severity)"

    def test_null_fields_default(self):
        """A null anywhere in the reply reads as a missing key."""
        report = ReconciliationReport.model_validate({
            "summary": None,
            "matchingDetails": None,
            "insights": ["Totals agree", None],
            "potentialIssues": [
                {"type": "missing", "description": "x", "severity": None},
                {"type": None, "description": None, "severity": "high"},
                None,
            ],
            "recommendations": None,
        })

        assert report.summary.matching_transactions == 0
        assert report.matching_details.perfect_matches is None
        assert report.insights == ["Totals agree"]
        assert len(report.potential_issues) == 2
        assert report.potential_issues[0].severity == "low"
        assert report.potential_issues[1].type == "unknown"
        assert report.potential_issues[1].description == ""
        assert report.recommendations == []

    def test_to_response_adds_matching_count(self):
        report = ReconciliationReport.model_validate(REPORT_REPLY)

        body = report.to_response()

        assert body["summary"]["matchingTransactions"] == 2
        assert body["summary"]["matchedAmountOnly"] == 1
        assert body["potentialIssues"][0]["type"] == "missing"
