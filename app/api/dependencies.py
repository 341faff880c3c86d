"""API Dependencies — FastAPI Depends providers for services, generator, and auth.

Invariants:
    - The Generator is built lazily on first use, never at import time
    - Every service receives the request-scoped AsyncSession from get_db
    - get_current_participant is the only place a bearer token is read

Design Decisions:
    - Overridable via app.dependency_overrides: tests swap get_generator and get_db
      without patching module globals
"""

from functools import lru_cache

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.core.errors import AuthenticationError
from app.core.repository_protocols import (
    AuthenticatedParticipant, AuthProvider, Generator,
)
from app.infrastructure.anthropic_client import AnthropicGenerator
from app.infrastructure.database import get_db
from app.services.ai_response_gateway import AIResponseGateway
from app.services.auth_provider import ParticipantLookupAuth
from app.services.participant_service import ParticipantService
from app.services.problem_service import ProblemService

_bearer = HTTPBearer(auto_error=False)


@lru_cache
def _anthropic_generator() -> AnthropicGenerator:
    settings = get_settings()
    return AnthropicGenerator(
        api_key=settings.anthropic_api_key,
        model=settings.generation_model,
        max_tokens=settings.generation_max_tokens,
        temperature=settings.generation_temperature,
        timeout_seconds=settings.generation_timeout_seconds,
    )


def get_generator() -> Generator:
    return _anthropic_generator()


def get_gateway(
    generator: Generator = Depends(get_generator),
    settings: Settings = Depends(get_settings),
) -> AIResponseGateway:
    return AIResponseGateway(
        generator, timeout_seconds=settings.generation_timeout_seconds,
    )


def get_auth_provider(db: AsyncSession = Depends(get_db)) -> AuthProvider:
    return ParticipantLookupAuth(db)


async def get_current_participant(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    auth: AuthProvider = Depends(get_auth_provider),
) -> AuthenticatedParticipant:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Access denied. No token provided.")
    return await auth.verify(credentials.credentials)


def get_problem_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ProblemService:
    return ProblemService(
        db,
        policy=settings.lifecycle_policy(),
        retry_attempts=settings.mutation_retry_attempts,
    )


def get_participant_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ParticipantService:
    return ParticipantService(db, retry_attempts=settings.mutation_retry_attempts)
