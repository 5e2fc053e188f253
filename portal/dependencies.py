"""FastAPI dependency injection providers."""

from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from portal.config import Settings, get_settings
from portal.database import get_db
from portal.exceptions import ForbiddenError, MissingTokenError
from portal.factories.client_factories import get_auth_service
from portal.factories.service_factories import get_advisory_service, get_paper_service
from portal.repositories.paper_repository import PaperRepository
from portal.repositories.user_repository import UserRepository
from portal.services.advisory_service import AdvisoryService
from portal.services.auth_service import AuthenticatedUser
from portal.services.paper_service import PaperService
from portal.utils.logger import get_logger

log = get_logger(__name__)


# Type aliases for cleaner router signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Singleton service dependencies
AdvisoryServiceDep = Annotated[AdvisoryService, Depends(get_advisory_service)]


# Repository dependencies (request-scoped)
def get_paper_repository(db: DbSession) -> PaperRepository:
    """Get PaperRepository with database session."""
    return PaperRepository(db)


def get_user_repository(db: DbSession) -> UserRepository:
    """Get UserRepository with database session."""
    return UserRepository(db)


PaperRepoDep = Annotated[PaperRepository, Depends(get_paper_repository)]
UserRepoDep = Annotated[UserRepository, Depends(get_user_repository)]


# Service dependencies
def get_paper_service_dep(db: DbSession) -> PaperService:
    """Get PaperService with database session."""
    return get_paper_service(db)


PaperServiceDep = Annotated[PaperService, Depends(get_paper_service_dep)]


# ============================================================================
# Authentication Dependencies
# ============================================================================


async def get_current_user(
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
) -> AuthenticatedUser:
    """Verify the bearer token, raise 401 if missing or invalid."""
    if not authorization:
        raise MissingTokenError()

    return await get_auth_service().verify_token(authorization)


async def get_admin_user(
    user: Annotated[AuthenticatedUser, Depends(get_current_user)],
) -> AuthenticatedUser:
    """Require the `admin` claim, raise 403 otherwise."""
    if not user.admin:
        log.warning("admin access denied", uid=user.uid)
        raise ForbiddenError("Administrator access required")
    return user


CurrentUser = Annotated[AuthenticatedUser, Depends(get_current_user)]
AdminUser = Annotated[AuthenticatedUser, Depends(get_admin_user)]
