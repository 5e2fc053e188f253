"""Health check router."""

from datetime import datetime, timezone

from fastapi import APIRouter

from portal import __version__
from portal.dependencies import PaperRepoDep, SettingsDep
from portal.schemas.health import HealthResponse, ServiceStatus
from portal.utils.logger import get_logger

router = APIRouter(tags=["Health"])
log = get_logger(__name__)


@router.get("/health", response_model=HealthResponse)
async def health_check(paper_repo: PaperRepoDep, settings: SettingsDep) -> HealthResponse:
    """
    Health check for the database and configured integrations.

    Checks:
    - Database connectivity and paper count
    - LLM provider API key
    - Firebase project configuration

    Returns:
        HealthResponse with status and service details
    """
    services = {}
    overall_status = "ok"

    try:
        papers_count = await paper_repo.count()
        services["database"] = ServiceStatus(
            status="healthy",
            message="Connected",
            details={"papers_count": papers_count},
        )
    except Exception as e:
        log.error("health check failed", service="database", error=str(e))
        services["database"] = ServiceStatus(status="unhealthy", message="Service unavailable")
        overall_status = "degraded"

    provider = settings.default_llm_model.split("/", 1)[0]
    if provider != "openai" or settings.openai_api_key:
        services["llm"] = ServiceStatus(
            status="healthy",
            message=f"LLM provider configured: {provider}",
            details={"default_model": settings.default_llm_model},
        )
    else:
        log.warning("health check failed", service="llm", reason="missing api key")
        services["llm"] = ServiceStatus(status="unhealthy", message="No API key configured")
        overall_status = "degraded"

    if settings.firebase_project_id:
        services["auth"] = ServiceStatus(
            status="healthy",
            message="Firebase project configured",
            details={"issuer": settings.firebase_issuer},
        )
    else:
        services["auth"] = ServiceStatus(status="unhealthy", message="Firebase project not set")
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=__version__,
        services=services,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
