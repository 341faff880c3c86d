"""Anthropic Generator — single-attempt text generation with timeout and error mapping.

Invariants:
    - Exactly one HTTP call per generate(): SDK retries disabled (max_retries=0),
      retrying is a caller/UI decision
    - Every provider failure (rate limit, 5xx, connection, timeout, empty reply)
      surfaces as GenerationServiceError (core/errors.py)
    - Returned text is the concatenation of the reply's text blocks, unmodified

Design Decisions:
    - Wrapper over raw client: isolates SDK error types from services
    - Instantiated by the FastAPI dependency layer, never at import time, so tests
      swap in a stub through app.dependency_overrides
"""

import logging

import anthropic
from anthropic import (
    APIError,
    APIConnectionError,
    APIStatusError,
    RateLimitError,
    APITimeoutError,
)

from app.core.errors import GenerationServiceError

logger = logging.getLogger(__name__)


class AnthropicGenerator:
    """Implements the Generator protocol on top of AsyncAnthropic."""

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        timeout_seconds: float = 60.0,
    ):
        self.client = anthropic.AsyncAnthropic(
            api_key=api_key,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model_id = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def generate(self, system_prompt: str, user_message: str) -> str:
        """Single generation call. Raises GenerationServiceError on failure."""
        try:
            response = await self.client.messages.create(
                model=self.model_id,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_message}],
            )
        except RateLimitError as e:
            raise GenerationServiceError(str(e), "rate_limit")
        except APITimeoutError:
            raise GenerationServiceError("API timeout", "timeout")
        except APIConnectionError as e:
            raise GenerationServiceError(str(e), "connection_error")
        except APIStatusError as e:
            raise GenerationServiceError(
                str(e), f"http_{e.status_code}",
            )
        except APIError as e:
            raise GenerationServiceError(str(e), "client_error")

        self._log_success(response)
        text = "".join(
            block.text for block in response.content
            if getattr(block, "type", None) == "text"
        )
        if not text.strip():
            raise GenerationServiceError(
                "Empty response from model", "malformed_response",
            )
        return text

    def _log_success(self, response) -> None:
        usage = response.usage
        logger.info(
            "Anthropic API success",
            extra={
                "model": self.model_id,
                "input_tokens": usage.input_tokens,
                "output_tokens": usage.output_tokens,
            },
        )
