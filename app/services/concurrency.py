"""Optimistic Mutation Loop — read-modify-write with version-checked retry.

Invariants:
    - load() is re-run on every attempt with populate_existing: never trusts stale identity-map state
    - decide() is a pure function of the loaded row; it returns a change dict or None (no-op)
    - A StaleDataError rolls back and retries; after `attempts` losses → ConcurrencyError
    - Domain errors raised by decide() propagate immediately, nothing is written

Design Decisions:
    - One loop shared by ProblemService and ParticipantService: both aggregates are
      documents with embedded arrays guarded by version_id_col
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import ConcurrencyError

logger = logging.getLogger(__name__)

Row = TypeVar("Row")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


async def mutate_with_retry(
    db: AsyncSession,
    load: Callable[[], Awaitable[Row]],
    decide: Callable[[Row], dict | None],
    attempts: int = 3,
) -> tuple[Row, bool]:
    """Apply decide(row) to a freshly loaded row and commit.

    Returns (row, applied). applied is False when decide() returned None.
    """
    for attempt in range(1, max(attempts, 1) + 1):
        row = await load()
        changes = decide(row)
        if changes is None:
            return row, False
        for field, value in changes.items():
            setattr(row, field, value)
        try:
            await db.commit()
            return row, True
        except StaleDataError:
            await db.rollback()
            logger.warning(
                "Stale write, retrying", extra={"attempt": attempt},
            )
    raise ConcurrencyError(
        f"Resource was modified concurrently {attempts} times, retry later",
    )
