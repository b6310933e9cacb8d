# statement_compare/routers/health.py

from fastapi import APIRouter, Depends

from statement_compare.config import get_settings
from statement_compare.dependencies import get_store
from statement_compare.sessions import SessionStore

router = APIRouter()


@router.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {
        "status": "healthy",
        "service": "statement-compare-api",
    }


@router.get("/ready")
async def readiness_check(sessions: SessionStore = Depends(get_store)):
    """Readiness check: reports whether Claude is configured."""
    settings = get_settings()
    return {
        "status": "ready",
        "checks": {
            "anthropic": "configured" if settings.anthropic_api_key else "missing_api_key",
            "sessions": len(sessions),
        },
    }
