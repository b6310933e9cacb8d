# statement_compare/sessions.py

"""
In-memory session store.

Nothing is persisted. Sessions idle for longer than `session_ttl_minutes`
are dropped the next time the store is used.
"""

from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Iterator, Optional
import logging
import uuid

from statement_compare.config import get_settings
from statement_compare.exceptions import SessionNotFoundError, StepInProgressError
from statement_compare.models import ComparisonSession, Step

logger = logging.getLogger(__name__)


class SessionStore:
    """Process-local map of session id -> ComparisonSession."""

    def __init__(self, ttl_minutes: Optional[int] = None):
        self._sessions: dict[str, ComparisonSession] = {}
        self._ttl_minutes = ttl_minutes

    @property
    def ttl(self) -> timedelta:
        minutes = self._ttl_minutes
        if minutes is None:
            minutes = get_settings().session_ttl_minutes
        return timedelta(minutes=minutes)

    def prune(self) -> int:
        """Drop idle sessions; a session with a step running is kept."""
        cutoff = datetime.now() - self.ttl
        expired = [
            session_id
            for session_id, session in self._sessions.items()
            if session.last_active_at < cutoff and not session.busy
        ]
        for session_id in expired:
            del self._sessions[session_id]

        if expired:
            logger.info(f"Expired {len(expired)} idle sessions")
        return len(expired)

    def create(self) -> ComparisonSession:
        self.prune()
        now = datetime.now()
        session = ComparisonSession(id=uuid.uuid4().hex, created_at=now, last_active_at=now)
        self._sessions[session.id] = session
        logger.info(f"Created session {session.id}")
        return session

    def get(self, session_id: str) -> ComparisonSession:
        self.prune()
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Session {session_id} not found")
        session.last_active_at = datetime.now()
        return session

    def delete(self, session_id: str) -> bool:
        return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)


@contextmanager
def begin_step(session: ComparisonSession, step: Step) -> Iterator[ComparisonSession]:
    """
    Mark a session busy for the duration of one inference step.

    Only one step may run per session at a time; a second one is rejected
    rather than queued.
    """
    if session.busy:
        raise StepInProgressError(
            f"A {session.step} request is already in progress for this session"
        )

    session.busy = True
    session.step = step
    try:
        yield session
    finally:
        session.busy = False
        session.last_active_at = datetime.now()


# Shared store for the running app
store = SessionStore()
