"""Problem Routes — create, list, read, edit, complete, abandon problems; interaction timing.

Invariants:
    - Every route is scoped to the authenticated participant (foreign ids → 404)
    - Terminal problems ignore draft edits (applied=false, still 200)
    - complete/abandon from a terminal status → 409 INVALID_STATE
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_current_participant, get_problem_service
from app.core.domain_types import ProblemStatus
from app.core.repository_protocols import AuthenticatedParticipant
from app.schemas.ai import MessageResponse
from app.schemas.problem import (
    ProblemAbandon, ProblemComplete, ProblemCompleted, ProblemCreate,
    ProblemDetail, ProblemPage, ProblemSummary, ProblemUpdate, TimingUpdate,
    UpdateAck, build_detail, build_summary,
)
from app.services.problem_service import ProblemService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/problems", tags=["problems"])


@router.post(
    "/", response_model=ProblemSummary, status_code=status.HTTP_201_CREATED,
)
async def create_problem(
    body: ProblemCreate,
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    problems: ProblemService = Depends(get_problem_service),
):
    problem = await problems.create(
        participant.participant_id,
        body.task_prompt,
        body.task_category,
        body.initial_problem,
        body.device_info.model_dump(exclude_none=True) if body.device_info else None,
    )
    return build_summary(problem)


@router.get("/", response_model=ProblemPage)
async def list_problems(
    status_filter: ProblemStatus | None = Query(None, alias="status"),
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    problems: ProblemService = Depends(get_problem_service),
):
    """Newest first, optionally filtered by status."""
    rows, total = await problems.list_owned(
        participant.participant_id, status_filter, limit, offset,
    )
    return ProblemPage(
        problems=[build_summary(p) for p in rows],
        limit=limit, offset=offset, total=total,
    )


@router.get("/{problem_id}", response_model=ProblemDetail)
async def get_problem(
    problem_id: str,
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    problems: ProblemService = Depends(get_problem_service),
):
    problem = await problems.get_owned(problem_id, participant.participant_id)
    return build_detail(problem)


@router.put("/{problem_id}", response_model=UpdateAck)
async def update_problem(
    problem_id: str,
    body: ProblemUpdate,
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    problems: ProblemService = Depends(get_problem_service),
):
    """Save the working draft. Ignored once the problem is completed or abandoned."""
    applied = await problems.update_draft(
        problem_id, participant.participant_id, body.current_problem,
    )
    message = "Problem updated successfully" if applied else (
        "Problem is no longer in progress; draft not saved"
    )
    return UpdateAck(message=message, applied=applied)


@router.post("/{problem_id}/complete", response_model=ProblemCompleted)
async def complete_problem(
    problem_id: str,
    body: ProblemComplete,
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    problems: ProblemService = Depends(get_problem_service),
):
    problem = await problems.complete(
        problem_id, participant.participant_id, body.final_problem, body.reasoning,
    )
    summary = build_summary(problem)
    return ProblemCompleted(
        problem_id=summary.problem_id,
        status=summary.status,
        end_time=summary.end_time,
        duration_minutes=summary.duration_minutes,
        interaction_count=summary.interaction_count,
    )


@router.post("/{problem_id}/abandon", response_model=MessageResponse)
async def abandon_problem(
    problem_id: str,
    body: ProblemAbandon | None = None,
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    problems: ProblemService = Depends(get_problem_service),
):
    await problems.abandon(
        problem_id, participant.participant_id, body.reason if body else None,
    )
    return MessageResponse(message="Problem abandoned")


@router.put(
    "/{problem_id}/interactions/{interaction_id}/time",
    response_model=MessageResponse,
)
async def update_interaction_time(
    problem_id: str,
    interaction_id: str,
    body: TimingUpdate,
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    problems: ProblemService = Depends(get_problem_service),
):
    await problems.update_interaction_timing(
        problem_id, participant.participant_id, interaction_id, body.time_spent,
    )
    return MessageResponse(message="Interaction time updated")
