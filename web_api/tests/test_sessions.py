"""Tests for the editing session registry."""

import pytest
from fastapi import HTTPException

from web_api import sessions


@pytest.fixture
def clock(monkeypatch):
    """Controllable clock for the registry; advance with clock.now += seconds."""

    class Clock:
        now = 1000.0

        def __call__(self):
            return self.now

    fake = Clock()
    monkeypatch.setattr(sessions, "_clock", fake)
    yield fake
    sessions.clear_sessions()


def test_idle_sessions_expire(clock, session, monkeypatch):
    monkeypatch.setattr(sessions, "SESSION_TTL_SECONDS", 60)
    stale = sessions.register_session(session)
    clock.now += 30
    fresh = sessions.register_session(session)

    clock.now += 45
    assert sessions.get_session(fresh) is session
    with pytest.raises(HTTPException) as exc_info:
        sessions.get_session(stale)
    assert exc_info.value.status_code == 404
    assert sessions.session_count() == 1


def test_access_keeps_session_alive(clock, session, monkeypatch):
    monkeypatch.setattr(sessions, "SESSION_TTL_SECONDS", 60)
    session_id = sessions.register_session(session)
    for _ in range(5):
        clock.now += 50
        assert sessions.get_session(session_id) is session


def test_least_recently_used_evicted_over_capacity(clock, session, monkeypatch):
    monkeypatch.setattr(sessions, "MAX_SESSIONS", 2)
    first = sessions.register_session(session)
    second = sessions.register_session(session)
    sessions.get_session(first)

    third = sessions.register_session(session)

    assert sessions.session_count() == 2
    assert sessions.get_session(first) is session
    assert sessions.get_session(third) is session
    with pytest.raises(HTTPException):
        sessions.get_session(second)


def test_close_session(clock, session):
    session_id = sessions.register_session(session)
    sessions.close_session(session_id)
    sessions.close_session(session_id)
    assert sessions.session_count() == 0
