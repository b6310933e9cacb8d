# statement_compare/dependencies.py

"""
Shared FastAPI dependencies.

The session store and the inference client are injected here so tests
can swap them through `app.dependency_overrides`.
"""

from functools import lru_cache

from fastapi import Depends, HTTPException, status

from statement_compare.exceptions import SessionNotFoundError
from statement_compare.integrations import ClaudeInferenceClient, InferenceClient
from statement_compare.models import ComparisonSession
from statement_compare.sessions import SessionStore, store


def get_store() -> SessionStore:
    return store


@lru_cache()
def get_inference_client() -> InferenceClient:
    """Claude client, created on first use."""
    return ClaudeInferenceClient()


def get_session(
    session_id: str,
    sessions: SessionStore = Depends(get_store),
) -> ComparisonSession:
    """Look up the session named in the path, or 404."""
    try:
        return sessions.get(session_id)
    except SessionNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
