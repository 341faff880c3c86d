"""Participant Sessions — pure bookkeeping for a participant's study sessions.

Invariants:
    - The "current" session is the FIRST session in list order with ended_at unset
    - start_session always appends; it never closes an older open session
    - end_session and increment_tasks_completed are no-ops when nothing is open
    - All functions return new lists; inputs are never mutated
"""

import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime

from app.core.domain_types import SessionId
from app.core.problem_lifecycle import compute_duration_minutes


def start_session(
    sessions: Sequence[Mapping], now: datetime,
) -> tuple[list[dict], SessionId]:
    """Append a new open session and return (sessions, session_id)."""
    session_id = SessionId(str(uuid.uuid4()))
    record = {
        "session_id": session_id,
        "started_at": now.isoformat(),
        "ended_at": None,
        "tasks_completed_count": 0,
        "duration_minutes": None,
    }
    return [dict(s) for s in sessions] + [record], session_id


def current_session_index(sessions: Sequence[Mapping]) -> int | None:
    for index, session in enumerate(sessions):
        if session.get("ended_at") is None:
            return index
    return None


def current_session(sessions: Sequence[Mapping]) -> dict | None:
    index = current_session_index(sessions)
    return dict(sessions[index]) if index is not None else None


def _update_current(sessions: Sequence[Mapping], **changes: object) -> list[dict]:
    index = current_session_index(sessions)
    updated = [dict(s) for s in sessions]
    if index is not None:
        updated[index].update(changes)
    return updated


def end_session(sessions: Sequence[Mapping], now: datetime) -> list[dict]:
    """Close the current session, stamping ended_at and duration_minutes."""
    open_session = current_session(sessions)
    if open_session is None:
        return [dict(s) for s in sessions]
    started_at = datetime.fromisoformat(open_session["started_at"])
    return _update_current(
        sessions,
        ended_at=now.isoformat(),
        duration_minutes=compute_duration_minutes(started_at, now),
    )


def increment_tasks_completed(sessions: Sequence[Mapping]) -> list[dict]:
    open_session = current_session(sessions)
    if open_session is None:
        return [dict(s) for s in sessions]
    return _update_current(
        sessions,
        tasks_completed_count=open_session.get("tasks_completed_count", 0) + 1,
    )
