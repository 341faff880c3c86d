"""Rating Ledger — records participant feedback against a single interaction.

Invariants:
    - Rating is exactly {usefulness, cognitive_load, satisfaction}, each an int in 1–5
    - A rate call overwrites rating, feedback_text and was_accepted together: never merges
    - feedback_text defaults to "" and was_accepted to False on every call
    - With allow_rating_overwrite=False a second rating raises InvalidStateError
"""

from collections.abc import Mapping, Sequence

from app.core.domain_types import RATING_MAX, RATING_MIN
from app.core.errors import InputValidationError, InvalidStateError
from app.core.interaction_log import find_interaction, replace_interaction
from app.core.problem_lifecycle import LifecyclePolicy


RATING_DIMENSIONS: tuple[str, ...] = ("usefulness", "cognitive_load", "satisfaction")


def validate_rating(rating: Mapping) -> dict:
    """Return a clean rating dict or raise InputValidationError."""
    missing = [d for d in RATING_DIMENSIONS if d not in rating]
    if missing:
        raise InputValidationError(
            f"Missing rating dimensions: {', '.join(missing)}", missing[0],
        )
    extra = sorted(set(rating) - set(RATING_DIMENSIONS))
    if extra:
        raise InputValidationError(
            f"Unknown rating dimensions: {', '.join(extra)}", extra[0],
        )
    clean = {}
    for dimension in RATING_DIMENSIONS:
        value = rating[dimension]
        if isinstance(value, bool) or not isinstance(value, int):
            raise InputValidationError(
                f"{dimension} must be an integer", dimension,
            )
        if not RATING_MIN <= value <= RATING_MAX:
            raise InputValidationError(
                f"{dimension} must be between {RATING_MIN} and {RATING_MAX}",
                dimension,
            )
        clean[dimension] = value
    return clean


def apply_rating(
    interactions: Sequence[Mapping],
    interaction_id: str,
    rating: Mapping,
    feedback_text: str | None = None,
    was_accepted: bool | None = None,
    policy: LifecyclePolicy = LifecyclePolicy(),
) -> list[dict]:
    """Return a new history with the interaction's rating fields overwritten."""
    clean = validate_rating(rating)
    existing = find_interaction(interactions, interaction_id)
    if existing.get("rating") is not None and not policy.allow_rating_overwrite:
        raise InvalidStateError("rate interaction", "already rated")
    return replace_interaction(
        interactions,
        interaction_id,
        rating=clean,
        feedback_text=feedback_text or "",
        was_accepted=bool(was_accepted),
    )
