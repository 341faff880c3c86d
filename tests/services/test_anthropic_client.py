"""Anthropic Generator — SDK call shape and error mapping, with the SDK client faked."""

from types import SimpleNamespace

import anthropic
import httpx
import pytest

from app.core.errors import GenerationServiceError
from app.infrastructure.anthropic_client import AnthropicGenerator

_REQUEST = httpx.Request("POST", "https://api.anthropic.com/v1/messages")


def _response(status_code):
    return httpx.Response(status_code, request=_REQUEST)


def _message(*texts):
    return SimpleNamespace(
        content=[SimpleNamespace(type="text", text=t) for t in texts],
        usage=SimpleNamespace(input_tokens=120, output_tokens=80),
    )


def _generator(create):
    gen = AnthropicGenerator(api_key="sk-ant-test", model="claude-test")
    gen.client = SimpleNamespace(messages=SimpleNamespace(create=create))
    return gen


async def test_generate_sends_system_and_user_message():
    calls = []

    async def create(**kwargs):
        calls.append(kwargs)
        return _message("First part. ", "Second part.")

    text = await _generator(create).generate("system prompt", "user message")

    assert text == "First part. Second part."
    assert calls[0]["model"] == "claude-test"
    assert calls[0]["system"] == "system prompt"
    assert calls[0]["messages"] == [{"role": "user", "content": "user message"}]
    assert calls[0]["max_tokens"] == 1000


def test_sdk_retries_disabled():
    gen = AnthropicGenerator(api_key="sk-ant-test", model="claude-test")
    assert gen.client.max_retries == 0


@pytest.mark.parametrize("error, error_type", [
    (anthropic.RateLimitError("slow down", response=_response(429), body=None), "rate_limit"),
    (anthropic.InternalServerError("boom", response=_response(500), body=None), "http_500"),
    (anthropic.APITimeoutError(request=_REQUEST), "timeout"),
    (anthropic.APIConnectionError(request=_REQUEST), "connection_error"),
])
async def test_sdk_errors_mapped(error, error_type):
    async def create(**kwargs):
        raise error

    with pytest.raises(GenerationServiceError) as exc:
        await _generator(create).generate("system", "user")
    assert exc.value.api_error_type == error_type
    assert exc.value.http_status == 503


async def test_empty_reply_is_malformed():
    async def create(**kwargs):
        return _message("  ")

    with pytest.raises(GenerationServiceError) as exc:
        await _generator(create).generate("system", "user")
    assert exc.value.api_error_type == "malformed_response"
