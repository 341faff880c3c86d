"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - External capabilities (text generation, authentication) accessed through Protocol types
    - Implementations provided by shell via dependency injection (FastAPI Depends)

Design Decisions:
    - Protocol over ABC: structural subtyping, test stubs need no inheritance
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never await — the shell orchestrates the calls
"""

from dataclasses import dataclass
from typing import Protocol

from app.core.domain_types import ParticipantId, StudyGroup


class Generator(Protocol):
    """External text-generation capability.

    Raises GenerationServiceError on any provider failure.
    """
    model_id: str

    async def generate(self, system_prompt: str, user_message: str) -> str: ...


@dataclass(frozen=True)
class AuthenticatedParticipant:
    """What the shell knows about the caller after token verification."""
    participant_id: ParticipantId
    study_group: StudyGroup
    active: bool


class AuthProvider(Protocol):
    """Verifies a bearer token. Raises AuthenticationError when it cannot."""
    async def verify(self, token: str) -> AuthenticatedParticipant: ...
