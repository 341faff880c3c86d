"""Problem Lifecycle — state machine for in-progress → completed | abandoned.

Invariants:
    - in-progress is the only non-terminal state; completed/abandoned have no outgoing transitions
    - Every transition function is PURE: returns a dict of field changes, does NOT mutate
    - status != in-progress ⇒ ended_at and duration_minutes are set
    - duration_minutes = round((ended_at − started_at) / 60s), half-up
    - Statement edits after a terminal transition are ignored, never applied

Design Decisions:
    - Transition descriptors (dict of changes) over methods on the ORM model: the shell
      applies them inside its optimistic-concurrency loop, core stays testable without a DB
    - LifecyclePolicy makes the two relaxations observed in the field explicit and named
      instead of commented-out checks
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Protocol

from app.core.domain_types import ProblemStatus, TaskCategory
from app.core.errors import InputValidationError, InvalidStateError


FINAL_STATEMENT_MIN: int = 10
FINAL_STATEMENT_MAX: int = 2000
REASONING_MIN: int = 20
REASONING_MAX: int = 3000
DRAFT_MAX: int = 2000


@dataclass(frozen=True)
class LifecyclePolicy:
    """Named switches for the lifecycle's configurable edges."""
    allow_append_after_completion: bool = True
    allow_complete_from_any_status: bool = False
    allow_rating_overwrite: bool = True


class ProblemLike(Protocol):
    """Structural view of a Problem that transitions read from."""
    status: str
    started_at: datetime


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from storage (SQLite drops tzinfo)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compute_duration_minutes(started_at: datetime, ended_at: datetime) -> int:
    """Whole minutes between start and end, rounded half-up."""
    delta = (ensure_utc(ended_at) - ensure_utc(started_at)).total_seconds()
    if delta < 0:
        raise InputValidationError(
            "ended_at precedes started_at", "ended_at",
        )
    return math.floor(delta / 60 + 0.5)


def initial_fields(
    task_prompt: str,
    task_category: TaskCategory,
    initial_statement: str,
    started_at: datetime | None,
) -> dict:
    """Field values for a freshly created, in-progress problem."""
    if started_at is None:
        raise InputValidationError("started_at is required", "started_at")
    if started_at.tzinfo is None:
        raise InputValidationError(
            "started_at must be timezone-aware", "started_at",
        )
    return {
        "task_prompt": task_prompt,
        "task_category": TaskCategory(task_category).value,
        "initial_statement": initial_statement,
        "current_statement": initial_statement,
        "final_statement": None,
        "reasoning": "",
        "status": ProblemStatus.IN_PROGRESS.value,
        "started_at": started_at,
        "ended_at": None,
        "duration_minutes": None,
        "interactions": [],
    }


def _check_length(value: str, field: str, low: int, high: int) -> str:
    stripped = (value or "").strip()
    if not low <= len(stripped) <= high:
        raise InputValidationError(
            f"{field} must be between {low} and {high} characters", field,
        )
    return stripped


def _terminal_fields(
    problem: ProblemLike, status: ProblemStatus, now: datetime,
) -> dict:
    return {
        "status": status.value,
        "ended_at": now,
        "duration_minutes": compute_duration_minutes(problem.started_at, now),
    }


def complete(
    problem: ProblemLike,
    final_statement: str,
    reasoning: str,
    now: datetime,
    policy: LifecyclePolicy = LifecyclePolicy(),
) -> dict:
    """in-progress → completed. Validates lengths before checking state."""
    final_statement = _check_length(
        final_statement, "finalProblem", FINAL_STATEMENT_MIN, FINAL_STATEMENT_MAX,
    )
    reasoning = _check_length(reasoning, "reasoning", REASONING_MIN, REASONING_MAX)
    status = ProblemStatus(problem.status)
    if status is not ProblemStatus.IN_PROGRESS and not policy.allow_complete_from_any_status:
        raise InvalidStateError("complete problem", status.value)
    return {
        **_terminal_fields(problem, ProblemStatus.COMPLETED, now),
        "final_statement": final_statement,
        "current_statement": final_statement,
        "reasoning": reasoning,
    }


def abandon(
    problem: ProblemLike, now: datetime, reason: str | None = None,
) -> dict:
    """in-progress → abandoned."""
    status = ProblemStatus(problem.status)
    if status is not ProblemStatus.IN_PROGRESS:
        raise InvalidStateError("abandon problem", status.value)
    return {
        **_terminal_fields(problem, ProblemStatus.ABANDONED, now),
        "abandon_reason": reason or None,
    }


def update_draft(problem: ProblemLike, text: str) -> dict | None:
    """Replace the working statement. Returns None (ignored) once terminal."""
    if len(text) > DRAFT_MAX:
        raise InputValidationError(
            f"currentProblem must not exceed {DRAFT_MAX} characters",
            "currentProblem",
        )
    if ProblemStatus(problem.status).is_terminal:
        return None
    return {"current_statement": text}


def check_can_append(
    status: str, policy: LifecyclePolicy = LifecyclePolicy(),
) -> None:
    """Raise InvalidStateError unless interactions may be appended in this state."""
    current = ProblemStatus(status)
    if current is ProblemStatus.IN_PROGRESS:
        return
    if current is ProblemStatus.COMPLETED and policy.allow_append_after_completion:
        return
    raise InvalidStateError("append interaction", current.value)
