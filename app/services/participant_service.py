"""Participant Service — registration, study sessions, and withdrawal.

Invariants:
    - Email is unique (case-insensitive, stored lower-cased) → ConflictError on reuse
    - Consent is recorded at registration time
    - Session bookkeeping delegated to core/participant_session.py, written via mutate_with_retry
    - Withdrawal deactivates the participant; further authentication fails
"""

import logging
import secrets
import string
from collections.abc import Callable
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import participant_session
from app.core.domain_types import SessionId
from app.core.errors import ConflictError, ErrorContext, ResourceNotFoundError
from app.models.participant import Participant
from app.services.concurrency import mutate_with_retry, utc_now

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def generate_participant_id(now: datetime) -> str:
    """'P' + epoch milliseconds + 5 random base36 characters."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(5))
    return f"P{int(now.timestamp() * 1000)}{suffix}"


class ParticipantService:
    """Participant document operations."""

    def __init__(
        self,
        db: AsyncSession,
        retry_attempts: int = 3,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.retry_attempts = retry_attempts
        self.clock = clock

    async def get(self, participant_id: str) -> Participant:
        result = await self.db.execute(
            select(Participant)
            .where(Participant.id == participant_id)
            .execution_options(populate_existing=True),
        )
        participant = result.scalar_one_or_none()
        if not participant:
            raise ResourceNotFoundError(
                "Participant", participant_id,
                ErrorContext(participant_id=participant_id),
            )
        return participant

    async def register(
        self,
        username: str,
        email: str,
        study_group: str,
        academic_level: str,
        data_science_experience: str,
    ) -> Participant:
        email = email.lower()
        existing = await self.db.execute(
            select(Participant.id).where(Participant.email == email),
        )
        if existing.scalar_one_or_none():
            raise ConflictError("Email address is already registered")

        now = self.clock()
        participant = Participant(
            id=generate_participant_id(now),
            email=email,
            username=username,
            study_group=study_group,
            academic_level=academic_level,
            data_science_experience=data_science_experience,
            consent_given=True,
            consent_at=now,
            last_active_at=now,
            sessions=[],
        )
        self.db.add(participant)
        await self.db.commit()
        logger.info(
            "Participant registered", extra={"participant_id": participant.id},
        )
        return participant

    async def start_session(self, participant_id: str) -> SessionId:
        now = self.clock()
        started: list[SessionId] = []

        def decide(participant: Participant) -> dict:
            sessions, session_id = participant_session.start_session(
                participant.sessions or [], now,
            )
            started.append(session_id)
            return {"sessions": sessions, "last_active_at": now}

        await mutate_with_retry(
            self.db, lambda: self.get(participant_id), decide, self.retry_attempts,
        )
        return started[-1]

    async def end_session(self, participant_id: str) -> Participant:
        now = self.clock()

        def decide(participant: Participant) -> dict | None:
            if participant_session.current_session(participant.sessions or []) is None:
                return None
            return {
                "sessions": participant_session.end_session(participant.sessions, now),
                "last_active_at": now,
            }

        participant, _ = await mutate_with_retry(
            self.db, lambda: self.get(participant_id), decide, self.retry_attempts,
        )
        return participant

    async def increment_tasks_completed(self, participant_id: str) -> bool:
        """Returns False when no session is open (nothing to count against)."""
        def decide(participant: Participant) -> dict | None:
            if participant_session.current_session(participant.sessions or []) is None:
                return None
            return {
                "sessions": participant_session.increment_tasks_completed(
                    participant.sessions,
                ),
            }

        _, applied = await mutate_with_retry(
            self.db, lambda: self.get(participant_id), decide, self.retry_attempts,
        )
        return applied

    async def withdraw(self, participant_id: str, reason: str | None = None) -> None:
        now = self.clock()
        await mutate_with_retry(
            self.db,
            lambda: self.get(participant_id),
            lambda p: {
                "withdrew_from_study": True,
                "withdrawal_reason": reason or "",
                "withdrawal_at": now,
                "is_active": False,
            },
            self.retry_attempts,
        )
        logger.info("Participant withdrew", extra={"participant_id": participant_id})
