"""Advisory pre-check router."""

from fastapi import APIRouter

from portal.dependencies import AdvisoryServiceDep, CurrentUser
from portal.exceptions import AdvisoryServiceError
from portal.schemas.advisory import AdvisoryReportResponse, PreCheckRequest
from portal.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/advisory", tags=["Advisory"])


@router.post("/pre-check", response_model=AdvisoryReportResponse)
async def pre_check(
    request: PreCheckRequest,
    current_user: CurrentUser,
    advisory: AdvisoryServiceDep,
) -> AdvisoryReportResponse:
    """Score manuscript text before submission. Nothing is stored."""
    outcome = await advisory.assess(request.paper_text)
    if not outcome.ok or outcome.report is None:
        kind = outcome.error.value if outcome.error else "unknown"
        log.warning("pre-check failed", uid=current_user.uid, kind=kind)
        raise AdvisoryServiceError(kind=kind, message=outcome.message or "AI analysis failed")

    report = outcome.report
    return AdvisoryReportResponse(
        plagiarism_score=report.plagiarism_score,
        highlighted_sections=report.highlighted_sections,
        acceptance_probability=report.acceptance_probability,
        reasoning=report.reasoning,
    )
