"""Admin dashboard schemas."""

from pydantic import BaseModel


class AdminStatsResponse(BaseModel):
    """Submission counts shown on the admin dashboard."""

    total_submissions: int
    pending_review: int
    issues_found: int
    payment_pending: int
    payment_overdue: int
    by_status: dict[str, int]
