"""Participant Routes — registration, study sessions, withdrawal, profile.

Invariants:
    - register is the only unauthenticated route; its token is the participant id
    - Withdrawal deactivates the account; later requests with the same token → 401
"""

import logging

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_current_participant, get_participant_service
from app.core.repository_protocols import AuthenticatedParticipant
from app.schemas.ai import MessageResponse
from app.schemas.participant import (
    ParticipantInfo, ParticipantRegister, ParticipantRegistered, SessionOut,
    SessionStarted, WithdrawRequest,
)
from app.services.participant_service import ParticipantService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/participants", tags=["participants"])


@router.post(
    "/register",
    response_model=ParticipantRegistered,
    status_code=status.HTTP_201_CREATED,
)
async def register_participant(
    body: ParticipantRegister,
    participants: ParticipantService = Depends(get_participant_service),
):
    participant = await participants.register(
        body.username,
        body.email,
        body.study_group.value,
        body.demographic_data.academic_level.value,
        body.demographic_data.data_science_experience.value,
    )
    return ParticipantRegistered(
        participant_id=participant.id,
        username=participant.username,
        study_group=participant.study_group,
        token=participant.id,
        message="Registration successful! Save your Participant ID for future logins.",
    )


@router.get("/me", response_model=ParticipantInfo)
async def get_me(
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    participants: ParticipantService = Depends(get_participant_service),
):
    row = await participants.get(participant.participant_id)
    return ParticipantInfo(
        participant_id=row.id,
        username=row.username,
        study_group=row.study_group,
        consent_given=row.consent_given,
        is_active=row.is_active,
        withdrew_from_study=row.withdrew_from_study,
        last_active_at=row.last_active_at,
        sessions=[SessionOut(**s) for s in (row.sessions or [])],
    )


@router.post("/me/sessions/start", response_model=SessionStarted)
async def start_session(
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    participants: ParticipantService = Depends(get_participant_service),
):
    session_id = await participants.start_session(participant.participant_id)
    return SessionStarted(
        session_id=session_id, participant_id=participant.participant_id,
    )


@router.post("/me/sessions/end", response_model=MessageResponse)
async def end_session(
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    participants: ParticipantService = Depends(get_participant_service),
):
    await participants.end_session(participant.participant_id)
    return MessageResponse(message="Session ended")


@router.post("/me/withdraw", response_model=MessageResponse)
async def withdraw(
    body: WithdrawRequest | None = None,
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    participants: ParticipantService = Depends(get_participant_service),
):
    """Leave the study. The participant's data is kept; the account is deactivated."""
    await participants.withdraw(
        participant.participant_id, body.reason if body else None,
    )
    return MessageResponse(message="You have withdrawn from the study")
