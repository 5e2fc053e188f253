"""Schemas for advisory (AI pre-check) endpoints."""

from pydantic import BaseModel, Field


class PreCheckRequest(BaseModel):
    """Paper text to score before submission."""

    paper_text: str = Field(..., min_length=1, description="Full text of the manuscript")


class AdvisoryReportResponse(BaseModel):
    """Advisory scores. Non-binding."""

    plagiarism_score: float
    highlighted_sections: list[str]
    acceptance_probability: float
    reasoning: str
