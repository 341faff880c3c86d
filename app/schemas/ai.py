"""AI Schemas — request/response models for generation, rating, and mode suggestion.

Invariants:
    - GenerateRequest.problem_statement: 10–2000 chars after stripping
    - GenerateRequest.prompt_type: editor | challenger (anything else → 400, no external call)
    - RatingScores: usefulness, cognitive_load, satisfaction each an int in 1–5
    - RateRequest.feedback: at most 500 chars
"""

from datetime import datetime

from pydantic import Field, StrictInt

from app.core.domain_types import PromptType
from app.schemas.base import CamelModel


class GenerateRequest(CamelModel):
    """Ask for an editor/challenger response, optionally bound to a problem."""
    problem_statement: str = Field(min_length=10, max_length=2000)
    user_input: str | None = Field(None, max_length=1000)
    prompt_type: PromptType
    problem_id: str | None = None


class GenerateResponse(CamelModel):
    response: str
    prompt_type: PromptType
    timestamp: datetime
    model: str
    interaction_id: str | None = None


class RatingScores(CamelModel):
    """Per-interaction ratings on a 1–5 scale (cognitive load: 1=low, 5=high)."""
    usefulness: StrictInt = Field(ge=1, le=5)
    cognitive_load: StrictInt = Field(ge=1, le=5)
    satisfaction: StrictInt = Field(ge=1, le=5)


class RateRequest(CamelModel):
    interaction_id: str = Field(min_length=1, max_length=64)
    ratings: RatingScores
    feedback: str | None = Field(None, max_length=500)
    was_accepted: bool | None = None


class MessageResponse(CamelModel):
    message: str


class NextModeResponse(CamelModel):
    suggested_mode: PromptType
    study_group: str
    editor_count: int
    challenger_count: int


class PromptStatsResponse(CamelModel):
    available_types: list[PromptType]
    usage_stats: dict[str, int]
