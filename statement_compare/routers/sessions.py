# statement_compare/routers/sessions.py

"""
Session routes: create a comparison, upload statements, download results.
"""

from fastapi import APIRouter, Depends, File, HTTPException, Path, Response, UploadFile
from pydantic import BaseModel
from typing import Optional
import logging

from statement_compare.config import get_settings
from statement_compare.core.exporter import cleaned_rows_to_xlsx
from statement_compare.core.loader import load_statement
from statement_compare.dependencies import get_session, get_store
from statement_compare.exceptions import (
    FileParseError,
    MissingInputError,
    StepInProgressError,
)
from statement_compare.models import ComparisonSession, UploadedStatement
from statement_compare.sessions import SessionStore

router = APIRouter()
logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ============================================
# Request/Response Models
# ============================================

class UploadResponse(BaseModel):
    success: bool
    slot: int
    filename: str
    rows_loaded: int
    columns: list[str]


class StatementOverview(BaseModel):
    filename: Optional[str] = None
    rows_loaded: int = 0
    cleaned: bool = False
    cleaned_rows: int = 0


def session_overview(session: ComparisonSession) -> dict:
    """Summary of where a session is in the workflow."""
    statements = {}
    for slot in (1, 2):
        uploaded = session.statements.get(slot)
        cleaned = session.cleaned.get(slot)
        statements[str(slot)] = StatementOverview(
            filename=uploaded.filename if uploaded else None,
            rows_loaded=len(uploaded.rows) if uploaded else 0,
            cleaned=cleaned is not None,
            cleaned_rows=len(cleaned.rows) if cleaned else 0,
        ).model_dump()

    return {
        "id": session.id,
        "created_at": session.created_at.isoformat(),
        "step": session.step,
        "busy": session.busy,
        "statements": statements,
        "comparison": (
            session.comparison.to_response() if session.comparison else None
        ),
    }


# ============================================
# Sessions
# ============================================

@router.post("", status_code=201)
async def create_session(sessions: SessionStore = Depends(get_store)):
    """Start a new comparison."""
    session = sessions.create()
    return session_overview(session)


@router.get("/{session_id}")
async def get_session_overview(session: ComparisonSession = Depends(get_session)):
    return session_overview(session)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session: ComparisonSession = Depends(get_session),
    sessions: SessionStore = Depends(get_store),
):
    sessions.delete(session.id)
    return Response(status_code=204)


# ============================================
# Upload
# ============================================

@router.post("/{session_id}/statements/{slot}", response_model=UploadResponse)
async def upload_statement(
    slot: int = Path(..., ge=1, le=2),
    file: UploadFile = File(...),
    session: ComparisonSession = Depends(get_session),
):
    """
    Upload statement 1 or 2 (.xlsx, .xlsm, .xls or .csv).

    The first sheet is read with its first row as column labels.
    Replacing a statement discards earlier cleaning and comparison results.
    """
    settings = get_settings()
    contents = await file.read()

    if len(contents) > settings.max_upload_mb * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File is larger than {settings.max_upload_mb} MB",
        )

    filename = file.filename or f"statement{slot}"
    try:
        rows = load_statement(contents, filename)
    except FileParseError as e:
        raise HTTPException(status_code=422, detail=f"Error parsing file: {e}")

    try:
        session.set_statement(slot, UploadedStatement(filename=filename, rows=rows))
    except StepInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))

    logger.info(f"Session {session.id}: statement {slot} loaded with {len(rows)} rows")

    return UploadResponse(
        success=True,
        slot=slot,
        filename=filename,
        rows_loaded=len(rows),
        columns=list(rows[0].keys()) if rows else [],
    )


# ============================================
# Download
# ============================================

@router.get("/{session_id}/statements/{slot}/cleaned")
async def download_cleaned_statement(
    slot: int = Path(..., ge=1, le=2),
    session: ComparisonSession = Depends(get_session),
):
    """Download a cleaned statement as .xlsx."""
    try:
        cleaned = session.require_cleaned_statement(slot)
    except MissingInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    contents = cleaned_rows_to_xlsx(cleaned.rows)
    filename = f"Statement{slot}_Cleaned.xlsx"

    return Response(
        content=contents,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
