"""AI Response Gateway — one generation request, normalized into a tagged result.

Invariants:
    - Invalid prompt_type or blank statement → InputValidationError BEFORE any external call
    - Exactly one Generator.generate() call per invocation: no retry here
    - Provider failures and timeouts become GenerationResult(success=False), never raised
    - Successful text is returned trimmed of surrounding whitespace
    - Persists nothing: the caller appends to the InteractionLog on success only

Design Decisions:
    - Generator injected (constructor) instead of a process-wide client, so tests
      substitute a stub without touching global state
    - asyncio.wait_for bounds the call even when the Generator has no timeout of its own
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from app.core.domain_types import PromptType
from app.core.errors import GenerationServiceError, InputValidationError
from app.core.prompt_templates import TEMPLATES, build_messages
from app.core.repository_protocols import Generator
from app.services.concurrency import utc_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationResult:
    """Tagged outcome of a generation request."""
    success: bool
    prompt_type: PromptType
    generated_at: datetime
    text: str | None = None
    model_id: str | None = None
    error: str | None = None


class AIResponseGateway:
    """Turns (prompt_type, statement, user input) into a GenerationResult."""

    def __init__(
        self,
        generator: Generator,
        timeout_seconds: float = 60.0,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.generator = generator
        self.timeout_seconds = timeout_seconds
        self.clock = clock

    async def generate(
        self,
        prompt_type: PromptType | str,
        problem_statement: str,
        user_input: str | None = None,
    ) -> GenerationResult:
        mode = _parse_prompt_type(prompt_type)
        if not problem_statement or not problem_statement.strip():
            raise InputValidationError(
                "problemStatement must not be empty", "problem_statement",
            )
        system_prompt, user_message = build_messages(
            mode, problem_statement.strip(), user_input,
        )

        try:
            text = await asyncio.wait_for(
                self.generator.generate(system_prompt, user_message),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            return self._failure(mode, "Generation timed out")
        except GenerationServiceError as e:
            return self._failure(mode, e.message)
        except Exception as e:
            logger.error(f"Unexpected generator error: {e}", exc_info=True)
            return self._failure(mode, str(e) or type(e).__name__)

        if not isinstance(text, str) or not text.strip():
            return self._failure(mode, "Malformed response from generator")
        return GenerationResult(
            success=True,
            prompt_type=mode,
            generated_at=self.clock(),
            text=text.strip(),
            model_id=self.generator.model_id,
        )

    def _failure(self, mode: PromptType, error: str) -> GenerationResult:
        logger.warning(
            f"Generation failed: {error}",
            extra={"prompt_type": mode.value, "error_code": "AI_SERVICE_ERROR"},
        )
        return GenerationResult(
            success=False,
            prompt_type=mode,
            generated_at=self.clock(),
            model_id=self.generator.model_id,
            error=error,
        )


def _parse_prompt_type(prompt_type: PromptType | str) -> PromptType:
    try:
        return PromptType(prompt_type)
    except ValueError:
        raise InputValidationError(
            'Prompt type must be either "editor" or "challenger"', "prompt_type",
        )


def prompt_statistics() -> dict:
    """Available generation modes (research metadata)."""
    return {"available_types": list(TEMPLATES)}
