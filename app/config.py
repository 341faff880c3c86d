"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - Lifecycle relaxations are named flags, surfaced to core via lifecycle_policy()

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

from app.core.problem_lifecycle import LifecyclePolicy


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://framelab:framelab@db:5432/framelab"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted PostgreSQL URLs use postgresql://; asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Generation (Anthropic)
    anthropic_api_key: str = "sk-ant-placeholder"
    generation_model: str = "claude-sonnet-4-5"
    generation_max_tokens: int = 1000
    generation_temperature: float = 0.7
    generation_timeout_seconds: float = 60.0

    # Lifecycle policy
    allow_append_after_completion: bool = True
    allow_complete_from_any_status: bool = False
    allow_rating_overwrite: bool = True

    # Optimistic concurrency on problems/participants
    mutation_retry_attempts: int = 3

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    def lifecycle_policy(self) -> LifecyclePolicy:
        return LifecyclePolicy(
            allow_append_after_completion=self.allow_append_after_completion,
            allow_complete_from_any_status=self.allow_complete_from_any_status,
            allow_rating_overwrite=self.allow_rating_overwrite,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
