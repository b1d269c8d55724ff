"""
In-process registry of editing sessions.

Each browser tab editing a lesson gets one EditingSession, looked up by the
session id returned when it was opened.

Sessions idle for longer than SESSION_TTL_SECONDS are dropped, and at most
MAX_SESSIONS are kept (least recently used go first). An evicted session's
staged draft stays in its staging slot and can be resumed with a new session.
"""

import logging
import os
import time
import uuid
from collections import OrderedDict

from fastapi import HTTPException

from core.lessons import EditingSession

logger = logging.getLogger(__name__)

SESSION_TTL_SECONDS = float(os.environ.get("EDITOR_SESSION_TTL_SECONDS", 3600))
MAX_SESSIONS = int(os.environ.get("EDITOR_MAX_SESSIONS", 500))

# session_id -> (session, last access), least recently used first
_sessions: "OrderedDict[str, tuple[EditingSession, float]]" = OrderedDict()

_clock = time.monotonic


def _evict() -> None:
    now = _clock()
    expired = [
        session_id
        for session_id, (_, last_seen) in _sessions.items()
        if now - last_seen > SESSION_TTL_SECONDS
    ]
    for session_id in expired:
        del _sessions[session_id]
    evicted = len(expired)
    while len(_sessions) > MAX_SESSIONS:
        _sessions.popitem(last=False)
        evicted += 1
    if evicted:
        logger.info("Evicted %d editing session(s), %d open", evicted, len(_sessions))


def register_session(session: EditingSession) -> str:
    session_id = uuid.uuid4().hex
    _sessions[session_id] = (session, _clock())
    _evict()
    return session_id


def get_session(session_id: str) -> EditingSession:
    """Look up a session, 404 if it is unknown, closed or evicted."""
    _evict()
    entry = _sessions.get(session_id)
    if entry is None:
        raise HTTPException(404, f"Editing session not found: {session_id}")
    session = entry[0]
    _sessions[session_id] = (session, _clock())
    _sessions.move_to_end(session_id)
    return session


def close_session(session_id: str) -> None:
    _sessions.pop(session_id, None)


def session_count() -> int:
    return len(_sessions)


def clear_sessions() -> None:
    """Forget all sessions (for testing or shutdown)."""
    _sessions.clear()


__all__ = [
    "register_session",
    "get_session",
    "close_session",
    "session_count",
    "clear_sessions",
]
