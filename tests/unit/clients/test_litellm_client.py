"""Tests for LiteLLMClient."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import BaseModel, ConfigDict, ValidationError

from portal.clients.litellm_client import (
    SCHEMA_AWARE_PROVIDERS,
    LiteLLMClient,
    provider_of,
    strip_code_fence,
)
from portal.exceptions import LLMTimeoutError

ACOMPLETION = "portal.clients.litellm_client.litellm.acompletion"


class Verdict(BaseModel):
    """Verdict model used by the tests."""

    model_config = ConfigDict(extra="forbid")

    score: float
    reasoning: str


def _answer(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


@pytest.fixture
def client():
    """Create a LiteLLMClient for an OpenAI model."""
    return LiteLLMClient(model="openai/gpt-4o-mini", timeout=30.0)


class TestProvider:
    """Tests for provider detection."""

    def test_prefix_is_provider(self):
        assert LiteLLMClient(model="ollama/llama3").provider_name == "ollama"

    def test_bare_model_defaults_to_openai(self):
        assert provider_of("gpt-4o-mini") == "openai"

    def test_nested_model_name_keeps_first_segment(self):
        assert provider_of("openrouter/meta-llama/llama-3-8b") == "openrouter"


class TestEvaluate:
    """Tests for LiteLLMClient.evaluate."""

    @pytest.mark.asyncio
    async def test_returns_validated_verdict(self, client):
        with patch(ACOMPLETION, new_callable=AsyncMock) as mock:
            mock.return_value = _answer('{"score": 0.4, "reasoning": "Sound method."}')

            verdict = await client.evaluate("Judge this paper.", "Body", Verdict)

        assert verdict == Verdict(score=0.4, reasoning="Sound method.")
        mock.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_schema_aware_provider_gets_pydantic_format(self, client):
        with patch(ACOMPLETION, new_callable=AsyncMock) as mock:
            mock.return_value = _answer('{"score": 0.4, "reasoning": "ok"}')
            await client.evaluate("Judge this paper.", "Body", Verdict)

        request = mock.call_args.kwargs
        assert request["response_format"] is Verdict
        assert request["messages"] == [
            {"role": "system", "content": "Judge this paper."},
            {"role": "user", "content": "Paper Text:\nBody"},
        ]
        assert "api_key" not in request

    @pytest.mark.asyncio
    async def test_other_provider_gets_schema_in_prompt(self):
        client = LiteLLMClient(model="ollama/llama3")
        assert "ollama" not in SCHEMA_AWARE_PROVIDERS

        with patch(ACOMPLETION, new_callable=AsyncMock) as mock:
            mock.return_value = _answer('```json\n{"score": 0.1, "reasoning": "ok"}\n```')
            verdict = await client.evaluate("Judge this paper.", "Body", Verdict)

        request = mock.call_args.kwargs
        assert request["response_format"] == {"type": "json_object"}
        system = request["messages"][0]["content"]
        assert system.startswith("Judge this paper.")
        assert '"reasoning"' in system
        assert verdict.score == 0.1

    @pytest.mark.asyncio
    async def test_api_key_is_forwarded(self):
        client = LiteLLMClient(api_key="sk-test")

        with patch(ACOMPLETION, new_callable=AsyncMock) as mock:
            mock.return_value = _answer('{"score": 0.4, "reasoning": "ok"}')
            await client.evaluate("Judge.", "Body", Verdict)

        assert mock.call_args.kwargs["api_key"] == "sk-test"

    @pytest.mark.asyncio
    async def test_timeout_raises_llm_timeout(self, client):
        with patch(ACOMPLETION, new_callable=AsyncMock) as mock:
            mock.side_effect = asyncio.TimeoutError()
            with pytest.raises(LLMTimeoutError) as exc_info:
                await client.evaluate("Judge.", "Body", Verdict, timeout=1.0)

        assert exc_info.value.timeout_seconds == 1.0
        assert exc_info.value.details["provider"] == "openai"

    @pytest.mark.asyncio
    async def test_empty_answer_raises_value_error(self, client):
        with patch(ACOMPLETION, new_callable=AsyncMock) as mock:
            mock.return_value = _answer(None)
            with pytest.raises(ValueError):
                await client.evaluate("Judge.", "Body", Verdict)

    @pytest.mark.asyncio
    async def test_schema_mismatch_is_not_retried(self, client):
        with patch(ACOMPLETION, new_callable=AsyncMock) as mock:
            mock.return_value = _answer('{"score": "high"}')
            with pytest.raises(ValidationError):
                await client.evaluate("Judge.", "Body", Verdict)

        mock.assert_awaited_once()


class TestStripCodeFence:
    """Tests for strip_code_fence."""

    def test_plain_json_is_unchanged(self):
        assert strip_code_fence(' {"a": 1} ') == '{"a": 1}'

    def test_fence_is_removed(self):
        assert strip_code_fence('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_unlabelled_fence_is_removed(self):
        assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'
