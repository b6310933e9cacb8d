# statement_compare/routers/reconcile.py

"""
Reconciliation route.

Sends both cleaned statements to the inference service for a two-pass
match and returns its report.
"""

from fastapi import APIRouter, Depends, HTTPException
import logging

from statement_compare.core.ai_assist import compare_statements
from statement_compare.dependencies import get_inference_client, get_session
from statement_compare.exceptions import (
    FormatError,
    MissingInputError,
    StepInProgressError,
    TransportError,
)
from statement_compare.integrations import InferenceClient
from statement_compare.models import ComparisonSession
from statement_compare.sessions import begin_step

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/{session_id}/reconcile")
async def reconcile_session_statements(
    session: ComparisonSession = Depends(get_session),
    client: InferenceClient = Depends(get_inference_client),
):
    """
    Compare the two cleaned statements.

    Matches by date, amount and description first, then by date and
    amount alone. Up to 50 rows per statement are sent.
    """
    try:
        statement1, statement2 = session.require_cleaned()
        with begin_step(session, "compare"):
            report = await compare_statements(client, statement1, statement2)
    except MissingInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StepInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except (TransportError, FormatError) as e:
        logger.exception(f"Comparison failed for session {session.id}")
        raise HTTPException(
            status_code=502,
            detail=f"Error comparing statements: {e}",
        )

    session.comparison = report

    return {
        "success": True,
        "report": report.to_response(),
    }
