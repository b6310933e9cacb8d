# statement_compare/routers/clean.py

"""
Cleaning route.

Asks the inference service for column mappings, then normalizes both
uploaded statements onto the canonical fields.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
import logging

from statement_compare.config import get_settings
from statement_compare.core.ai_assist import clean_statements
from statement_compare.dependencies import get_inference_client, get_session
from statement_compare.exceptions import (
    FormatError,
    MissingInputError,
    StepInProgressError,
    TransportError,
)
from statement_compare.integrations import InferenceClient
from statement_compare.models import CleanedStatement, ComparisonSession
from statement_compare.sessions import begin_step

router = APIRouter()
logger = logging.getLogger(__name__)


class CleanedStatementResponse(BaseModel):
    rows: int
    mapping: dict
    preview: list[dict]


class CleanResponse(BaseModel):
    success: bool
    statement1: CleanedStatementResponse
    statement2: CleanedStatementResponse
    cleaning_rules: list[str]
    data_issues: list[str]


def _describe(statement: CleanedStatement, preview_rows: int) -> CleanedStatementResponse:
    return CleanedStatementResponse(
        rows=len(statement.rows),
        mapping=statement.mapping.model_dump(by_alias=True),
        preview=[row.preview() for row in statement.rows[:preview_rows]],
    )


@router.post("/{session_id}/clean", response_model=CleanResponse)
async def clean_session_statements(
    session: ComparisonSession = Depends(get_session),
    client: InferenceClient = Depends(get_inference_client),
):
    """
    Clean and standardize both uploaded statements.

    1. Sends column labels and a 5-row sample of each statement for mapping
    2. Copies mapped columns onto Date/Description/Amount/Balance/Reference
    3. Strips amounts to digits, '.' and '-', keeping OriginalAmount
    4. Sorts each statement by date
    """
    settings = get_settings()

    try:
        statement1, statement2 = session.require_statements()
        with begin_step(session, "clean"):
            cleaned1, cleaned2 = await clean_statements(
                client, statement1.rows, statement2.rows
            )
    except MissingInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StepInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (TransportError, FormatError) as e:
        logger.exception(f"Cleaning failed for session {session.id}")
        raise HTTPException(
            status_code=502,
            detail=f"Error cleaning statements: {e}",
        )

    session.cleaned = {1: cleaned1, 2: cleaned2}
    session.comparison = None

    return CleanResponse(
        success=True,
        statement1=_describe(cleaned1, settings.preview_rows),
        statement2=_describe(cleaned2, settings.preview_rows),
        cleaning_rules=cleaned1.rules,
        data_issues=cleaned1.issues,
    )
