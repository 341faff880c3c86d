"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ProblemId, ParticipantId, InteractionId wrap str — never use bare str for identity
    - Rating values are integers bounded by RATING_MIN..RATING_MAX
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (interactions live in a JSON column)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ProblemId = NewType("ProblemId", str)
ParticipantId = NewType("ParticipantId", str)
InteractionId = NewType("InteractionId", str)
SessionId = NewType("SessionId", str)


# ─── Value Types ─────────────────────────────────────────────────

RATING_MIN: int = 1
RATING_MAX: int = 5
MAX_TIME_SPENT_SECONDS: int = 3600


# ─── Enums ───────────────────────────────────────────────────────

class PromptType(str, Enum):
    """AI assistance mode — editor refines, challenger reframes."""
    EDITOR = "editor"
    CHALLENGER = "challenger"


class StudyGroup(str, Enum):
    """Per-participant assignment — decides which mode is preferred first."""
    EDITOR_FIRST = "editor-first"
    CHALLENGER_FIRST = "challenger-first"

    @property
    def preferred_mode(self) -> PromptType:
        if self is StudyGroup.EDITOR_FIRST:
            return PromptType.EDITOR
        return PromptType.CHALLENGER


class ProblemStatus(str, Enum):
    """Problem lifecycle states — maps to DB `status` column."""
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self is not ProblemStatus.IN_PROGRESS


class TaskCategory(str, Enum):
    """Fixed set of task domains a problem can belong to."""
    HEALTHCARE = "healthcare"
    FINANCE = "finance"
    EDUCATION = "education"
    ENVIRONMENT = "environment"
    SOCIAL = "social"
    BUSINESS = "business"
    OTHER = "other"


class AcademicLevel(str, Enum):
    UNDERGRADUATE = "undergraduate"
    GRADUATE = "graduate"
    POSTGRADUATE = "postgraduate"
    OTHER = "other"


class DataScienceExperience(str, Enum):
    NONE = "none"
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
