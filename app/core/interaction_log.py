"""Interaction Log — append-only ordered history of AI exchanges on a Problem.

Invariants:
    - append_interaction returns a NEW list: stored order == append order
    - interaction_id, prompt_type, ai_response_text, created_at never change after creation
    - Only rating fields and time_spent_seconds are updated in place (by interaction_id)
    - No function here mutates its input list or the dicts inside it

Design Decisions:
    - Records are plain JSON-ready dicts: they are stored verbatim in the
      problems.interactions JSON column, so no ORM row per interaction
    - Copy-on-write over in-place mutation: SQLAlchemy only detects JSON changes
      when the attribute is reassigned
"""

import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime

from app.core.domain_types import (
    InteractionId, PromptType, MAX_TIME_SPENT_SECONDS,
)
from app.core.errors import InputValidationError, ResourceNotFoundError


IMMUTABLE_FIELDS: tuple[str, ...] = (
    "interaction_id", "prompt_type", "ai_response_text", "created_at",
)


def new_interaction_record(
    prompt_type: PromptType,
    user_input: str | None,
    ai_response_text: str,
    now: datetime,
) -> dict:
    """Build a fresh record: unrated, not accepted, zero time spent."""
    return {
        "interaction_id": InteractionId(uuid.uuid4().hex),
        "created_at": now.isoformat(),
        "prompt_type": PromptType(prompt_type).value,
        "user_input": user_input,
        "ai_response_text": ai_response_text,
        "rating": None,
        "feedback_text": None,
        "was_accepted": False,
        "time_spent_seconds": 0,
    }


def append_interaction(
    interactions: Sequence[Mapping], record: Mapping,
) -> list[dict]:
    """Return a new history with record at the end."""
    if any(i["interaction_id"] == record["interaction_id"] for i in interactions):
        raise InputValidationError(
            f"Duplicate interaction_id '{record['interaction_id']}'",
            "interaction_id",
        )
    return [dict(i) for i in interactions] + [dict(record)]


def find_interaction(
    interactions: Sequence[Mapping], interaction_id: str,
) -> dict:
    """Locate a record by id or raise ResourceNotFoundError."""
    for interaction in interactions:
        if interaction.get("interaction_id") == interaction_id:
            return dict(interaction)
    raise ResourceNotFoundError("Interaction", interaction_id)


def replace_interaction(
    interactions: Sequence[Mapping], interaction_id: str, **changes: object,
) -> list[dict]:
    """Return a new history with one record's mutable fields overwritten."""
    forbidden = set(changes) & set(IMMUTABLE_FIELDS)
    if forbidden:
        raise InputValidationError(
            f"Immutable interaction fields: {', '.join(sorted(forbidden))}",
            sorted(forbidden)[0],
        )
    find_interaction(interactions, interaction_id)
    return [
        {**i, **changes} if i.get("interaction_id") == interaction_id else dict(i)
        for i in interactions
    ]


def update_timing(
    interactions: Sequence[Mapping], interaction_id: str, seconds: int,
) -> list[dict]:
    """Overwrite time_spent_seconds. Seconds must be within [0, 3600]."""
    if isinstance(seconds, bool) or not isinstance(seconds, int):
        raise InputValidationError("timeSpent must be an integer", "time_spent")
    if not 0 <= seconds <= MAX_TIME_SPENT_SECONDS:
        raise InputValidationError(
            f"timeSpent must be between 0 and {MAX_TIME_SPENT_SECONDS} seconds",
            "time_spent",
        )
    return replace_interaction(
        interactions, interaction_id, time_spent_seconds=seconds,
    )
