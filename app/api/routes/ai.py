"""AI Routes — generate editor/challenger responses, rate them, suggest the next mode.

Invariants:
    - Invalid promptType is rejected by the schema (400) before the Generator is touched
    - problemId not owned by caller, or abandoned → 404, checked BEFORE generation
    - Generation failure → 503 AI_SERVICE_ERROR and no interaction is appended
    - Interaction appended only after a successful generation

Design Decisions:
    - Append-permission checked up front as well as inside the write: a completed
      problem with appends disabled fails fast instead of paying for a generation
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.dependencies import (
    get_current_participant, get_gateway, get_problem_service,
)
from app.core.domain_types import ProblemStatus, PromptType
from app.core.errors import ErrorContext, GenerationServiceError
from app.core.problem_lifecycle import check_can_append
from app.core.prompt_sequencer import count_prompt_types
from app.core.repository_protocols import AuthenticatedParticipant
from app.infrastructure.database import get_db
from app.models.problem import Problem
from app.schemas.ai import (
    GenerateRequest, GenerateResponse, MessageResponse, NextModeResponse,
    PromptStatsResponse, RateRequest,
)
from app.services.ai_response_gateway import AIResponseGateway, prompt_statistics
from app.services.problem_service import ProblemService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/ai", tags=["ai"])


@router.post("/generate", response_model=GenerateResponse)
async def generate_response(
    body: GenerateRequest,
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    gateway: AIResponseGateway = Depends(get_gateway),
    problems: ProblemService = Depends(get_problem_service),
):
    """Generate an AI response; log it on the problem when problemId is given."""
    owner_id = participant.participant_id
    if body.problem_id:
        problem = await problems.get_owned(
            body.problem_id, owner_id,
            (ProblemStatus.IN_PROGRESS, ProblemStatus.COMPLETED),
        )
        check_can_append(problem.status, problems.policy)

    result = await gateway.generate(
        body.prompt_type, body.problem_statement, body.user_input,
    )
    if not result.success:
        raise GenerationServiceError(
            result.error or "generation failed", "provider",
            ErrorContext(
                problem_id=body.problem_id,
                participant_id=owner_id,
                user_message="AI service error, please try again",
            ),
        )

    interaction_id = None
    if body.problem_id:
        record = await problems.append_interaction(
            body.problem_id, owner_id, result.prompt_type,
            body.user_input, result.text,
        )
        interaction_id = record["interaction_id"]

    return GenerateResponse(
        response=result.text,
        prompt_type=result.prompt_type,
        timestamp=result.generated_at,
        model=result.model_id,
        interaction_id=interaction_id,
    )


@router.post("/rate", response_model=MessageResponse)
async def rate_response(
    body: RateRequest,
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    problems: ProblemService = Depends(get_problem_service),
):
    """Rate one of the caller's interactions (last write wins)."""
    await problems.rate_interaction(
        participant.participant_id,
        body.interaction_id,
        body.ratings.model_dump(),
        body.feedback,
        body.was_accepted,
    )
    return MessageResponse(message="Rating saved successfully")


@router.get("/next-mode", response_model=NextModeResponse)
async def suggest_next_mode(
    problem_id: str | None = Query(None, alias="problemId"),
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    problems: ProblemService = Depends(get_problem_service),
):
    """Suggest editor/challenger for the caller's next interaction."""
    mode, counts = await problems.suggest_next_mode(
        participant.study_group, participant.participant_id, problem_id,
    )
    return NextModeResponse(
        suggested_mode=mode,
        study_group=participant.study_group.value,
        editor_count=counts[PromptType.EDITOR],
        challenger_count=counts[PromptType.CHALLENGER],
    )


@router.get("/stats", response_model=PromptStatsResponse)
async def prompt_stats(
    participant: AuthenticatedParticipant = Depends(get_current_participant),
    db: AsyncSession = Depends(get_db),
):
    """Available modes plus the caller's own usage counts."""
    result = await db.execute(
        select(Problem.interactions)
        .where(Problem.owner_id == participant.participant_id),
    )
    interactions = [i for row in result.scalars().all() for i in (row or [])]
    counts = count_prompt_types(interactions)
    return PromptStatsResponse(
        available_types=prompt_statistics()["available_types"],
        usage_stats={mode.value: n for mode, n in counts.items()},
    )
