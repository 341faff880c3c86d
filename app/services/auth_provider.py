"""Participant Lookup Auth — default AuthProvider: the bearer token is the participant id.

Invariants:
    - Unknown participant → AuthenticationError (401), never 404
    - Inactive (withdrawn) participant → AuthenticationError
    - Returns only what the core needs: id, study group, active flag

Design Decisions:
    - Password-less lookup matches how study participants log in (they keep their
      participant id); a signed-token provider can replace it behind the same Protocol
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import ParticipantId, StudyGroup
from app.core.errors import AuthenticationError
from app.core.repository_protocols import AuthenticatedParticipant
from app.models.participant import Participant


class ParticipantLookupAuth:
    """Implements AuthProvider against the participants table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def verify(self, token: str) -> AuthenticatedParticipant:
        if not token:
            raise AuthenticationError("Access denied. No token provided.")
        result = await self.db.execute(
            select(Participant).where(Participant.id == token),
        )
        participant = result.scalar_one_or_none()
        if not participant:
            raise AuthenticationError("Invalid token. Participant not found.")
        if not participant.is_active:
            raise AuthenticationError("Account is inactive.")
        return AuthenticatedParticipant(
            participant_id=ParticipantId(participant.id),
            study_group=StudyGroup(participant.study_group),
            active=participant.is_active,
        )
