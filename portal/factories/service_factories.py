"""Factory functions for business logic services."""

from datetime import timedelta
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession

from portal.config import get_settings
from portal.factories.client_factories import get_llm_client, get_payment_client
from portal.repositories.paper_repository import PaperRepository
from portal.services.advisory_service import AdvisoryService
from portal.services.paper_service import PaperService


@lru_cache(maxsize=1)
def get_advisory_service() -> AdvisoryService:
    """
    Create singleton advisory service.

    Returns:
        AdvisoryService instance
    """
    settings = get_settings()
    return AdvisoryService(
        llm_client=get_llm_client(),
        max_chars=settings.advisory_max_chars,
        timeout_seconds=float(settings.llm_call_timeout_seconds),
    )


def get_paper_service(db_session: AsyncSession) -> PaperService:
    """
    Create PaperService with dependencies.

    Note: Not cached because depends on request-scoped db session.

    Args:
        db_session: Database session

    Returns:
        PaperService instance
    """
    settings = get_settings()
    return PaperService(
        paper_repo=PaperRepository(db_session),
        payment_client=get_payment_client(),
        advisory_service=get_advisory_service(),
        max_upload_bytes=settings.max_upload_bytes,
        payment_window=timedelta(hours=settings.payment_window_hours),
    )
