"""Advisory AI checks: plagiarism likelihood and acceptance probability.

Results are advisory only. `assess()` never raises; callers get an
`AdvisoryOutcome` and decide what to do with a failure.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from portal.clients.base_llm_client import BaseLLMClient
from portal.exceptions import LLMTimeoutError
from portal.utils.logger import get_logger

log = get_logger(__name__)


PLAGIARISM_SYSTEM_PROMPT = """You are an AI plagiarism checker for an academic publishing portal.
Given the text of a research paper, estimate how likely it is that parts of it were copied
or closely paraphrased from existing published work.

Return a plagiarism score between 0 and 1, where 1 indicates definite plagiarism, and list
the specific passages (quoted verbatim from the paper) that look copied or reused. Return an
empty list when nothing stands out."""

ACCEPTANCE_SYSTEM_PROMPT = """You are an AI assistant that evaluates the acceptance probability
of a research paper for publication in a conference or journal.

Assess the paper based on content quality, originality, clarity, structure, and novelty.
Provide a probability score between 0 and 1, where 0 indicates a very low chance of acceptance
and 1 indicates a very high chance, and explain the reasoning behind the score."""


class PlagiarismAssessment(BaseModel):
    """Structured LLM output for the plagiarism check."""

    plagiarism_score: float = Field(..., ge=0.0, le=1.0)
    highlighted_sections: list[str] = Field(default_factory=list)


class AcceptanceAssessment(BaseModel):
    """Structured LLM output for the acceptance estimate."""

    probability_score: float = Field(..., ge=0.0, le=1.0)
    reasoning: str


@dataclass(frozen=True)
class AdvisoryReport:
    plagiarism_score: float
    highlighted_sections: list[str]
    acceptance_probability: float
    reasoning: str


class AdvisoryErrorKind(StrEnum):
    EMPTY_INPUT = "empty_input"
    TIMEOUT = "timeout"
    INVALID_OUTPUT = "invalid_output"
    PROVIDER_ERROR = "provider_error"


@dataclass(frozen=True)
class AdvisoryOutcome:
    """Either a report or an error kind, never both."""

    report: Optional[AdvisoryReport] = None
    error: Optional[AdvisoryErrorKind] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.report is not None

    @classmethod
    def success(cls, report: AdvisoryReport) -> "AdvisoryOutcome":
        return cls(report=report)

    @classmethod
    def failure(cls, kind: AdvisoryErrorKind, message: str) -> "AdvisoryOutcome":
        return cls(error=kind, message=message)


class AdvisoryService:
    """Runs the two advisory LLM checks over a document's text."""

    def __init__(
        self,
        llm_client: BaseLLMClient,
        max_chars: int = 40_000,
        timeout_seconds: Optional[float] = None,
    ):
        self.llm_client = llm_client
        self.max_chars = max_chars
        self.timeout_seconds = timeout_seconds

    async def assess(self, document_text: str) -> AdvisoryOutcome:
        """
        Score a document for plagiarism and acceptance likelihood.

        Each LLM call is made at most once. Text longer than `max_chars` is cut.

        Returns:
            AdvisoryOutcome with a report, or with the kind of failure
        """
        text = (document_text or "").strip()
        if not text:
            return AdvisoryOutcome.failure(
                AdvisoryErrorKind.EMPTY_INPUT, "No text could be read from the document"
            )
        if len(text) > self.max_chars:
            log.debug("advisory input truncated", original_chars=len(text), max_chars=self.max_chars)
            text = text[: self.max_chars]

        log.info("advisory assessment started", chars=len(text), model=self.llm_client.model)

        try:
            plagiarism = await self.llm_client.evaluate(
                PLAGIARISM_SYSTEM_PROMPT,
                text,
                PlagiarismAssessment,
                timeout=self.timeout_seconds,
            )
            acceptance = await self.llm_client.evaluate(
                ACCEPTANCE_SYSTEM_PROMPT,
                text,
                AcceptanceAssessment,
                timeout=self.timeout_seconds,
            )
        except LLMTimeoutError as e:
            log.warning("advisory assessment timed out", timeout_seconds=e.timeout_seconds)
            return AdvisoryOutcome.failure(AdvisoryErrorKind.TIMEOUT, e.message)
        except (PydanticValidationError, ValueError) as e:
            log.warning("advisory output rejected", error=str(e))
            return AdvisoryOutcome.failure(
                AdvisoryErrorKind.INVALID_OUTPUT, "The AI model returned an unusable answer"
            )
        except Exception as e:
            log.error("advisory provider error", error=str(e), error_type=type(e).__name__)
            return AdvisoryOutcome.failure(
                AdvisoryErrorKind.PROVIDER_ERROR, "The AI provider request failed"
            )

        report = AdvisoryReport(
            plagiarism_score=plagiarism.plagiarism_score,
            highlighted_sections=plagiarism.highlighted_sections,
            acceptance_probability=acceptance.probability_score,
            reasoning=acceptance.reasoning,
        )
        log.info(
            "advisory assessment completed",
            plagiarism_score=report.plagiarism_score,
            acceptance_probability=report.acceptance_probability,
        )
        return AdvisoryOutcome.success(report)
