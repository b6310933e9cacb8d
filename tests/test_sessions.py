# tests/test_sessions.py

"""
Tests for the in-memory session store and the one-step-at-a-time guard.
"""

from datetime import datetime, timedelta

import pytest

from statement_compare.exceptions import SessionNotFoundError, StepInProgressError
from statement_compare.models import UploadedStatement
from statement_compare.sessions import SessionStore, begin_step


def idle_for(session, minutes: int) -> None:
    session.last_active_at = datetime.now() - timedelta(minutes=minutes)


# ============================================
# Session Store
# ============================================

class TestSessionStore:

    def test_create_get_delete(self):
        store = SessionStore(ttl_minutes=30)

        session = store.create()

        assert store.get(session.id) is session
        assert store.delete(session.id) is True
        assert store.delete(session.id) is False
        with pytest.raises(SessionNotFoundError):
            store.get(session.id)

    def test_idle_session_expires(self):
        store = SessionStore(ttl_minutes=30)
        session = store.create()
        idle_for(session, 31)

        with pytest.raises(SessionNotFoundError):
            store.get(session.id)
        assert len(store) == 0

    def test_create_prunes_idle_sessions(self):
        store = SessionStore(ttl_minutes=30)
        stale = store.create()
        recent = store.create()
        idle_for(stale, 45)
        idle_for(recent, 10)

        store.create()

        assert len(store) == 2
        assert store.get(recent.id) is recent

    def test_get_keeps_session_alive(self):
        store = SessionStore(ttl_minutes=30)
        session = store.create()
        idle_for(session, 20)

        store.get(session.id)

        assert datetime.now() - session.last_active_at < timedelta(minutes=1)

    def test_busy_session_not_expired(self):
        store = SessionStore(ttl_minutes=30)
        session = store.create()
        idle_for(session, 90)
        session.busy = True

        assert store.prune() == 0
        assert store.get(session.id) is session

    def test_ttl_from_settings(self):
        assert SessionStore().ttl == timedelta(minutes=60)


# ============================================
# Step Guard
# ============================================

class TestBeginStep:

    def test_marks_busy(self):
        session = SessionStore(ttl_minutes=30).create()

        with begin_step(session, "clean"):
            assert session.busy is True
            assert session.step == "clean"

        assert session.busy is False

    def test_second_step_rejected(self):
        session = SessionStore(ttl_minutes=30).create()

        with begin_step(session, "clean"):
            with pytest.raises(StepInProgressError):
                with begin_step(session, "compare"):
                    pass

        assert session.step == "clean"

    def test_statement_locked_during_step(self):
        session = SessionStore(ttl_minutes=30).create()
        session.set_statement(1, UploadedStatement(filename="bank.csv"))

        with begin_step(session, "clean"):
            with pytest.raises(StepInProgressError):
                session.set_statement(1, UploadedStatement(filename="new.csv"))

        assert session.statements[1].filename == "bank.csv"

    def test_busy_cleared_on_error(self):
        session = SessionStore(ttl_minutes=30).create()

        with pytest.raises(RuntimeError):
            with begin_step(session, "compare"):
                raise RuntimeError("boom")

        assert session.busy is False
