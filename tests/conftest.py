"""Shared fixtures and helpers for the statement comparison tests."""

from datetime import datetime
import io

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from statement_compare.dependencies import get_inference_client, get_store
from statement_compare.main import app
from statement_compare.sessions import SessionStore

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ============================================
# Test Data
# ============================================

def make_xlsx(rows: list[list], extra_sheet: list[list] | None = None) -> bytes:
    """Build an .xlsx file whose first sheet holds `rows` (first row = header)."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Statement"
    for row in rows:
        ws.append(row)

    if extra_sheet is not None:
        other = wb.create_sheet("Other")
        for row in extra_sheet:
            other.append(row)

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


BANK_ROWS = [
    ["Txn Date", "Narrative", "Amt", "Running Balance"],
    [datetime(2024, 3, 1), "Card payment - Grocer", "$-45.20", "1,154.80"],
    [datetime(2024, 1, 15), "Salary", "$1,200.00", "1,200.00"],
    ["pending", "Transfer out", "$-100.00", ""],
]

LEDGER_ROWS = [
    ["Posted", "Details", "Value", "Ref"],
    ["2024-01-15", "Salary January", "1200", "L-001"],
    ["2024-03-01", "Groceries", "-45.2", "L-002"],
]

MAPPING_REPLY = {
    "mappings": {
        "statement1": {
            "dateColumn": "Txn Date",
            "descriptionColumn": "Narrative",
            "amountColumn": "Amt",
            "balanceColumn": "Running Balance",
            "referenceColumn": None,
        },
        "statement2": {
            "dateColumn": "Posted",
            "descriptionColumn": "Details",
            "amountColumn": "Value",
            "balanceColumn": None,
            "referenceColumn": "Ref",
        },
    },
    "standardColumns": ["Date", "Description", "Amount", "Balance", "Reference"],
    "cleaningRules": ["Remove currency symbols from amounts"],
    "dataIssues": ["Statement 1 has a pending row without a date"],
}

REPORT_REPLY = {
    "summary": {
        "totalTransactions1": 3,
        "totalTransactions2": 2,
        "matchedWithDescription": 1,
        "matchedAmountOnly": 1,
        "uniqueToStatement1": 1,
        "uniqueToStatement2": 0,
        "potentialDuplicates": 0,
    },
    "matchingDetails": {
        "perfectMatches": 1,
        "descriptionMismatches": 1,
        "amountMismatches": 0,
    },
    "insights": ["Both salaries match"],
    "potentialIssues": [
        {
            "type": "missing",
            "description": "Transfer out is only in statement 1",
            "severity": "high",
            "details": "pending, -100.00",
            "transaction1": "Transfer out",
        }
    ],
    "recommendations": ["Check the pending transfer"],
}


class FakeInferenceClient:
    """InferenceClient returning canned replies, in order."""

    def __init__(self, replies: list[dict] | None = None, error: Exception | None = None):
        self.replies = list(replies or [])
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def infer(self, prompt: str, max_tokens: int) -> dict:
        self.calls.append((prompt, max_tokens))
        if self.error is not None:
            raise self.error
        return self.replies.pop(0)


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def fake_client() -> FakeInferenceClient:
    return FakeInferenceClient()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def client(fake_client, store):
    """TestClient with a fresh session store and the fake inference client."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_inference_client] = lambda: fake_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def bank_xlsx() -> bytes:
    return make_xlsx(BANK_ROWS)


@pytest.fixture
def ledger_xlsx() -> bytes:
    return make_xlsx(LEDGER_ROWS)
