"""Admin dashboard router."""

from fastapi import APIRouter, Query

from portal.dependencies import AdminUser, PaperServiceDep, SettingsDep, UserRepoDep
from portal.schemas.admin import AdminStatsResponse
from portal.schemas.users import UserResponse
from portal.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/stats", response_model=AdminStatsResponse)
async def get_stats(
    admin: AdminUser,
    service: PaperServiceDep,
    settings: SettingsDep,
) -> AdminStatsResponse:
    """
    Submission counts for the admin dashboard.

    `payment_pending` excludes papers whose payment window has passed; those
    are counted in `payment_overdue` instead.

    Returns:
        AdminStatsResponse with counts
    """
    counts = await service.dashboard_counts(admin, settings.plagiarism_issue_threshold)
    log.debug("admin stats computed", admin=admin.uid, total=counts["total_submissions"])
    return AdminStatsResponse(**counts)


@router.get("/users", response_model=list[UserResponse])
async def list_users(
    admin: AdminUser,
    user_repo: UserRepoDep,
    offset: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
) -> list[UserResponse]:
    """List user profiles, newest first."""
    users = await user_repo.list_all(offset=offset, limit=limit)
    return [UserResponse.model_validate(u) for u in users]
