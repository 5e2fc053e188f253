"""Interface the advisory checks use to get a structured verdict from an LLM."""

from abc import ABC, abstractmethod
from typing import Optional, Type, TypeVar

from pydantic import BaseModel

V = TypeVar("V", bound=BaseModel)


class BaseLLMClient(ABC):
    """An LLM that reads a manuscript and answers with a pydantic-validated verdict."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider prefix of the configured model, e.g. 'openai'."""

    @property
    @abstractmethod
    def model(self) -> str:
        """Full model string."""

    @abstractmethod
    async def evaluate(
        self,
        instructions: str,
        document_text: str,
        verdict_model: Type[V],
        timeout: Optional[float] = None,
    ) -> V:
        """
        Ask the model to judge a document and parse its answer.

        Args:
            instructions: System prompt describing the check
            document_text: Manuscript text to judge
            verdict_model: Pydantic model the answer must validate against
            timeout: Seconds to wait; the client default when None

        Raises:
            LLMTimeoutError: The provider did not answer in time
            ValueError: The answer was empty
            pydantic.ValidationError: The answer does not match verdict_model
        """
