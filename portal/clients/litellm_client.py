"""LiteLLM client for the advisory checks.

The model string carries the provider prefix (openai/gpt-4o-mini,
anthropic/claude-3-5-haiku-latest, ollama/llama3). Each call is made once.
"""

import asyncio
import json
import re
from typing import Any, Optional, Type, TypeVar

import litellm
from openai.types.chat import ChatCompletionMessageParam
from pydantic import BaseModel

from portal.clients.base_llm_client import BaseLLMClient
from portal.exceptions import LLMTimeoutError
from portal.utils.logger import get_logger, truncate

V = TypeVar("V", bound=BaseModel)

log = get_logger(__name__)

# Providers that accept a pydantic class as response_format. The rest get the
# JSON schema spelled out in the system prompt and run in JSON mode.
SCHEMA_AWARE_PROVIDERS: frozenset[str] = frozenset({"openai", "anthropic", "google"})

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


def provider_of(model: str) -> str:
    prefix, sep, _ = model.partition("/")
    return prefix if sep else "openai"


def schema_instructions(verdict_model: Type[BaseModel]) -> str:
    return (
        "\n\nAnswer with one JSON object that validates against this JSON schema:\n"
        f"{json.dumps(verdict_model.model_json_schema())}\n"
        "Do not wrap it in markdown and do not add commentary."
    )


def strip_code_fence(content: str) -> str:
    """Remove a ```json fence some models put around their answer."""
    content = content.strip()
    match = _CODE_FENCE.match(content)
    return match.group(1) if match else content


class LiteLLMClient(BaseLLMClient):
    """Advisory LLM backed by LiteLLM's provider routing."""

    def __init__(
        self,
        model: str = "openai/gpt-4o-mini",
        timeout: float = 60.0,
        api_key: Optional[str] = None,
    ):
        self._model = model
        self.default_timeout = timeout
        self.api_key = api_key or None

    @property
    def provider_name(self) -> str:
        return provider_of(self._model)

    @property
    def model(self) -> str:
        return self._model

    @property
    def schema_aware(self) -> bool:
        return self.provider_name in SCHEMA_AWARE_PROVIDERS

    def build_messages(
        self, instructions: str, document_text: str, verdict_model: Type[BaseModel]
    ) -> list[ChatCompletionMessageParam]:
        if not self.schema_aware:
            instructions += schema_instructions(verdict_model)
        return [
            {"role": "system", "content": instructions},
            {"role": "user", "content": f"Paper Text:\n{document_text}"},
        ]

    async def evaluate(
        self,
        instructions: str,
        document_text: str,
        verdict_model: Type[V],
        timeout: Optional[float] = None,
        temperature: float = 0.2,
    ) -> V:
        seconds = timeout if timeout is not None else self.default_timeout
        request: dict[str, Any] = {
            "model": self._model,
            "messages": self.build_messages(instructions, document_text, verdict_model),
            "temperature": temperature,
            "response_format": verdict_model if self.schema_aware else {"type": "json_object"},
        }
        if self.api_key:
            request["api_key"] = self.api_key

        log.debug(
            "llm verdict requested",
            model=self._model,
            verdict=verdict_model.__name__,
            schema_aware=self.schema_aware,
            document_chars=len(document_text),
            timeout=seconds,
        )

        try:
            response = await asyncio.wait_for(litellm.acompletion(**request), timeout=seconds)
        except asyncio.TimeoutError:
            raise LLMTimeoutError(provider=self.provider_name, timeout_seconds=seconds)

        content = response.choices[0].message.content  # type: ignore[union-attr]
        if not content:
            raise ValueError(f"{self._model} returned an empty answer")

        verdict = verdict_model.model_validate_json(strip_code_fence(content))
        log.debug("llm verdict received", model=self._model, verdict=truncate(verdict.model_dump_json()))
        return verdict
