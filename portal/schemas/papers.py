"""Schemas for paper endpoints."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from portal.lifecycle import DisplayStatus, display_status
from portal.models.paper import Paper


class PaperResponse(BaseModel):
    """Paper as returned to clients. The file payload is never included."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    title: str
    abstract: str
    authors: list[str]
    keywords: list[str]
    file_name: str
    file_mime_type: str
    file_size: int
    status: str
    display_status: DisplayStatus
    payment_option: str | None = None
    upload_date: datetime
    submission_date: datetime | None = None
    payment_due_date: datetime | None = None
    paid_at: datetime | None = None
    plagiarism_score: float | None = None
    plagiarism_sections: list[str] | None = None
    acceptance_probability: float | None = None
    acceptance_reasoning: str | None = None
    admin_feedback: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_paper(cls, paper: Paper, now: datetime) -> "PaperResponse":
        """Build a response with the status projected at `now`."""
        return cls(
            id=paper.id,
            user_id=paper.user_id,
            title=paper.title,
            abstract=paper.abstract,
            authors=list(paper.authors or []),
            keywords=list(paper.keywords or []),
            file_name=paper.file_name,
            file_mime_type=paper.file_mime_type,
            file_size=paper.file_size or 0,
            status=paper.status,
            display_status=display_status(paper.status, paper.payment_due_date, now),
            payment_option=paper.payment_option,
            upload_date=paper.upload_date,
            submission_date=paper.submission_date,
            payment_due_date=paper.payment_due_date,
            paid_at=paper.paid_at,
            plagiarism_score=paper.plagiarism_score,
            plagiarism_sections=paper.plagiarism_sections,
            acceptance_probability=paper.acceptance_probability,
            acceptance_reasoning=paper.acceptance_reasoning,
            admin_feedback=paper.admin_feedback,
            created_at=paper.created_at,
            updated_at=paper.updated_at,
        )


class PaperListResponse(BaseModel):
    """Response for list papers endpoint."""

    total: int
    offset: int
    limit: int
    papers: list[PaperResponse]


class PaperUpdateRequest(BaseModel):
    """Status and advisory changes. Only fields present in the body are applied."""

    model_config = ConfigDict(extra="forbid")

    status: str | None = None
    admin_feedback: str | None = None
    plagiarism_score: float | None = Field(None, ge=0.0, le=1.0)
    plagiarism_sections: list[str] | None = None
    acceptance_probability: float | None = Field(None, ge=0.0, le=1.0)
    acceptance_reasoning: str | None = None
    paid_at: datetime | None = None


class PaymentResponse(BaseModel):
    """Response for the simulated payment endpoint."""

    reference: str
    amount: float
    paper: PaperResponse
    message: str = "Payment processed and paper submitted"
