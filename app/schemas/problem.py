"""Problem Schemas — Pydantic models with field-level validation for problem routes.

Invariants:
    - ProblemCreate.task_prompt: 10–1000 chars; initial_problem: 10–2000 chars
    - ProblemComplete.final_problem: 10–2000 chars; reasoning: 20–3000 chars
    - ProblemUpdate.current_problem: required, at most 2000 chars
    - TimingUpdate.time_spent: integer seconds within [0, 3600]

Design Decisions:
    - Wire names follow the study client (initialProblem, finalProblem, currentProblem)
      while columns use statement vocabulary (initial_statement, final_statement)
    - Response builders live here so every route serializes a Problem the same way
"""

from datetime import datetime

from pydantic import Field, StrictInt

from app.core.domain_types import (
    MAX_TIME_SPENT_SECONDS, ProblemStatus, PromptType, TaskCategory,
)
from app.core.problem_lifecycle import ensure_utc
from app.core.prompt_sequencer import primary_prompt_type
from app.schemas.base import CamelModel


class DeviceInfo(CamelModel):
    user_agent: str | None = Field(None, max_length=500)
    screen_resolution: str | None = Field(None, max_length=50)
    platform: str | None = Field(None, max_length=100)


class ProblemCreate(CamelModel):
    task_prompt: str = Field(min_length=10, max_length=1000)
    task_category: TaskCategory
    initial_problem: str = Field(min_length=10, max_length=2000)
    device_info: DeviceInfo | None = None


class ProblemUpdate(CamelModel):
    current_problem: str = Field(max_length=2000)


class ProblemComplete(CamelModel):
    final_problem: str = Field(min_length=10, max_length=2000)
    reasoning: str = Field(min_length=20, max_length=3000)


class ProblemAbandon(CamelModel):
    reason: str | None = Field(None, max_length=500)


class TimingUpdate(CamelModel):
    time_spent: StrictInt = Field(ge=0, le=MAX_TIME_SPENT_SECONDS)


class UpdateAck(CamelModel):
    message: str
    applied: bool


class ProblemSummary(CamelModel):
    problem_id: str
    task_prompt: str
    task_category: TaskCategory
    initial_problem: str
    status: ProblemStatus
    start_time: datetime
    end_time: datetime | None = None
    duration_minutes: int | None = None
    interaction_count: int = 0


class InteractionRating(CamelModel):
    usefulness: int
    cognitive_load: int
    satisfaction: int


class InteractionOut(CamelModel):
    interaction_id: str
    created_at: datetime
    prompt_type: PromptType
    user_input: str | None = None
    ai_response_text: str
    rating: InteractionRating | None = None
    feedback_text: str | None = None
    was_accepted: bool = False
    time_spent_seconds: int = 0


class ProblemDetail(ProblemSummary):
    current_problem: str
    final_problem: str | None = None
    reasoning: str
    abandon_reason: str | None = None
    interactions: list[InteractionOut]
    primary_prompt_type: PromptType
    device_info: dict | None = None
    evaluation: dict | None = None


class ProblemCompleted(CamelModel):
    problem_id: str
    status: ProblemStatus
    end_time: datetime
    duration_minutes: int
    interaction_count: int


class ProblemPage(CamelModel):
    problems: list[ProblemSummary]
    limit: int
    offset: int
    total: int


def build_summary(problem) -> ProblemSummary:
    """Serialize a Problem row into its list/summary shape."""
    return ProblemSummary(
        problem_id=problem.id,
        task_prompt=problem.task_prompt,
        task_category=problem.task_category,
        initial_problem=problem.initial_statement,
        status=problem.status,
        start_time=ensure_utc(problem.started_at),
        end_time=ensure_utc(problem.ended_at) if problem.ended_at else None,
        duration_minutes=problem.duration_minutes,
        interaction_count=len(problem.interactions or []),
    )


def build_detail(problem) -> ProblemDetail:
    """Serialize a Problem row with its full interaction history."""
    interactions = problem.interactions or []
    return ProblemDetail(
        **build_summary(problem).model_dump(),
        current_problem=problem.current_statement,
        final_problem=problem.final_statement,
        reasoning=problem.reasoning,
        abandon_reason=problem.abandon_reason,
        interactions=[InteractionOut(**i) for i in interactions],
        primary_prompt_type=primary_prompt_type(interactions),
        device_info=problem.device_info,
        evaluation=problem.evaluation,
    )
