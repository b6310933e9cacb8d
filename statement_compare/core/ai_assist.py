# statement_compare/core/ai_assist.py

"""
AI-assisted cleaning and comparison.

The inference service does the column detection and the transaction
matching; this module bounds what is sent, and checks what comes back.
"""

import logging

from pydantic import ValidationError

from statement_compare.config import get_settings
from statement_compare.core.normalizers import clean_statement
from statement_compare.core.prompts import (
    build_mapping_prompt,
    build_reconciliation_prompt,
)
from statement_compare.exceptions import FormatError
from statement_compare.integrations import InferenceClient
from statement_compare.models import (
    CleanedStatement,
    MappingInference,
    RawRow,
    ReconciliationReport,
)

logger = logging.getLogger(__name__)


async def infer_column_mappings(
    client: InferenceClient,
    rows1: list[RawRow],
    rows2: list[RawRow],
) -> MappingInference:
    """
    Ask the inference service which column holds each canonical field.

    Only the column labels and the first few rows of each statement are sent.
    """
    settings = get_settings()
    prompt = build_mapping_prompt(rows1, rows2, settings.mapping_sample_rows)

    reply = await client.infer(prompt, settings.mapping_max_tokens)

    try:
        inference = MappingInference.model_validate(reply)
    except ValidationError as e:
        raise FormatError(f"Unexpected mapping reply: {e}") from e

    logger.info(
        f"Column mappings: statement1={inference.mappings.statement1.model_dump(by_alias=True)} "
        f"statement2={inference.mappings.statement2.model_dump(by_alias=True)}"
    )
    return inference


async def clean_statements(
    client: InferenceClient,
    rows1: list[RawRow],
    rows2: list[RawRow],
) -> tuple[CleanedStatement, CleanedStatement]:
    """
    Infer mappings for both statements, then normalize them.

    Returns the two cleaned statements; both carry the same rules and issues.
    """
    inference = await infer_column_mappings(client, rows1, rows2)

    cleaned = []
    for rows, mapping in (
        (rows1, inference.mappings.statement1),
        (rows2, inference.mappings.statement2),
    ):
        cleaned.append(
            CleanedStatement(
                rows=clean_statement(rows, mapping),
                mapping=mapping,
                rules=inference.cleaning_rules,
                issues=inference.data_issues,
            )
        )

    return cleaned[0], cleaned[1]


async def compare_statements(
    client: InferenceClient,
    statement1: CleanedStatement,
    statement2: CleanedStatement,
) -> ReconciliationReport:
    """
    Ask the inference service to reconcile two cleaned statements.

    At most `reconcile_max_rows` rows of each statement are sent; the
    full row counts are stated in the prompt.
    """
    settings = get_settings()
    prompt = build_reconciliation_prompt(
        statement1.records,
        statement2.records,
        settings.reconcile_max_rows,
    )

    reply = await client.infer(prompt, settings.reconcile_max_tokens)

    try:
        report = ReconciliationReport.model_validate(reply)
    except ValidationError as e:
        raise FormatError(f"Unexpected reconciliation reply: {e}") from e

    logger.info(
        f"Reconciliation: {report.summary.matching_transactions} matched, "
        f"{len(report.potential_issues)} potential issues"
    )
    return report
