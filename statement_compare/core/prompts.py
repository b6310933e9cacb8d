# statement_compare/core/prompts.py

"""
Prompt text for the two inference requests.
"""

import json

from statement_compare.models import RawRow

MAPPING_REPLY_SHAPE = """{
  "mappings": {
    "statement1": {
      "dateColumn": "detected column name for date",
      "descriptionColumn": "detected column name for description/transaction details",
      "amountColumn": "detected column name for amount/debit/credit",
      "balanceColumn": "detected column name for balance (if exists)",
      "referenceColumn": "detected column name for reference/transaction id (if exists)"
    },
    "statement2": {
      "dateColumn": "...",
      "descriptionColumn": "...",
      "amountColumn": "...",
      "balanceColumn": "...",
      "referenceColumn": "..."
    }
  },
  "standardColumns": ["Date", "Description", "Amount", "Balance", "Reference"],
  "cleaningRules": [
    "rule 1: e.g., convert dates to YYYY-MM-DD format",
    "rule 2: e.g., remove currency symbols from amounts",
    "rule 3: e.g., trim whitespace from descriptions"
  ],
  "dataIssues": [
    "issue 1: e.g., missing values in column X",
    "issue 2: e.g., inconsistent date formats"
  ]
}"""

REPORT_REPLY_SHAPE = """{
  "summary": {
    "totalTransactions1": number,
    "totalTransactions2": number,
    "matchedWithDescription": number,
    "matchedAmountOnly": number,
    "uniqueToStatement1": number,
    "uniqueToStatement2": number,
    "potentialDuplicates": number
  },
  "matchingDetails": {
    "perfectMatches": number,
    "descriptionMismatches": number,
    "amountMismatches": number
  },
  "insights": ["insight 1", "insight 2"],
  "potentialIssues": [
    {
      "type": "missing" | "duplicate" | "description_mismatch" | "amount_difference" | "debit_credit_mismatch",
      "description": "detailed description",
      "severity": "high" | "medium" | "low",
      "details": "specific transaction info (date, amount, descriptions from both statements)",
      "transaction1": "description from statement 1 if applicable",
      "transaction2": "description from statement 2 if applicable"
    }
  ],
  "recommendations": ["recommendation 1"]
}"""


def column_labels(rows: list[RawRow]) -> list[str]:
    """Column labels of a statement, taken from its first row."""
    return list(rows[0].keys()) if rows else []


def _dump(value) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def build_mapping_prompt(
    rows1: list[RawRow],
    rows2: list[RawRow],
    sample_rows: int = 5,
) -> str:
    """Ask for the column mapping of both statements from a small sample."""
    return f"""I need you to clean and standardize two account statements for comparison.

Statement 1 columns: {json.dumps(column_labels(rows1), ensure_ascii=False)}
Statement 1 sample (first {sample_rows} rows):
{_dump(rows1[:sample_rows])}

Statement 2 columns: {json.dumps(column_labels(rows2), ensure_ascii=False)}
Statement 2 sample (first {sample_rows} rows):
{_dump(rows2[:sample_rows])}

Please analyze both statements and return ONLY a JSON object (no markdown, no backticks) with:
{MAPPING_REPLY_SHAPE}"""


def build_reconciliation_prompt(
    records1: list[dict[str, str]],
    records2: list[dict[str, str]],
    max_rows: int = 50,
) -> str:
    """Ask for a two-pass reconciliation of the cleaned statements."""
    return f"""Compare these cleaned account statements using a two-pass matching strategy:

MATCHING STRATEGY:
1. First Pass: Match transactions by Date + Amount + Description (exact or similar description match)
2. Second Pass: For unmatched transactions, match by Date + Amount only (ignore description)

When analyzing amounts, determine if they are debits or credits based on:
- The description context (words like "payment", "withdrawal", "debit" vs "deposit", "credit", "transfer in")
- The sign of the amount (negative typically = debit, positive = credit)
- Compare debits to debits and credits to credits

Statement 1 ({len(records1)} transactions):
{_dump(records1[:max_rows])}

Statement 2 ({len(records2)} transactions):
{_dump(records2[:max_rows])}

Return ONLY a JSON object (no markdown, no backticks):
{REPORT_REPLY_SHAPE}"""
