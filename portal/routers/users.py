"""Users router: profile creation, settings and uniqueness probes."""

from typing import Optional

from fastapi import APIRouter, Response, status

from portal.dependencies import CurrentUser, DbSession, UserRepoDep
from portal.exceptions import ConflictError, ForbiddenError, ResourceNotFoundError, ValidationError
from portal.schemas.users import (
    AvailabilityResponse,
    UserCreateRequest,
    UserResponse,
    UserUpdateRequest,
)
from portal.utils.logger import get_logger

router = APIRouter(prefix="/users", tags=["Users"])
log = get_logger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    """Strip whitespace; empty strings become None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    request: UserCreateRequest,
    current_user: CurrentUser,
    user_repo: UserRepoDep,
    db: DbSession,
    response: Response,
) -> UserResponse:
    """Create the caller's profile after signup. Returns the existing one if present."""
    if request.id != current_user.uid:
        raise ForbiddenError("You can only create your own profile")

    existing = await user_repo.get_by_id(request.id)
    if existing is not None:
        response.status_code = status.HTTP_200_OK
        return UserResponse.model_validate(existing)

    username = _clean(request.username)
    phone_number = _clean(request.phone_number)
    email = _clean(request.email) or current_user.email

    if username and await user_repo.is_username_taken(username):
        raise ConflictError("Username is already taken", details={"field": "username"})
    if phone_number and await user_repo.is_phone_taken(phone_number):
        raise ConflictError("Phone number is already in use", details={"field": "phone_number"})
    if email and await user_repo.get_by_email(email) is not None:
        raise ConflictError("Email is already registered", details={"field": "email"})

    user = await user_repo.create(
        request.id,
        email=email,
        display_name=_clean(request.display_name),
        username=username,
        photo_url=request.photo_url,
        phone_number=phone_number,
        institution=_clean(request.institution),
        researcher_id=_clean(request.researcher_id),
        role=request.role,
    )
    await db.commit()
    return UserResponse.model_validate(user)


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: CurrentUser, user_repo: UserRepoDep) -> UserResponse:
    """Get the caller's own profile."""
    user = await user_repo.get_by_id(current_user.uid)
    if user is None:
        raise ResourceNotFoundError("User", current_user.uid)
    return UserResponse.model_validate(user)


@router.get("/check-username", response_model=AvailabilityResponse)
async def check_username(
    user_repo: UserRepoDep,
    username: Optional[str] = None,
    exclude_id: Optional[str] = None,
) -> AvailabilityResponse:
    """Report whether a username is already in use."""
    username = _clean(username)
    if not username:
        raise ValidationError("Username is required")

    is_taken = await user_repo.is_username_taken(username, exclude_id=exclude_id)
    return AvailabilityResponse(
        is_taken=is_taken,
        message="Username is already taken" if is_taken else "Username is available",
    )


@router.get("/check-phone", response_model=AvailabilityResponse)
async def check_phone(
    user_repo: UserRepoDep,
    phone_number: Optional[str] = None,
    exclude_id: Optional[str] = None,
) -> AvailabilityResponse:
    """Report whether a phone number is already in use. A missing number is never taken."""
    phone_number = _clean(phone_number)
    if not phone_number:
        return AvailabilityResponse(is_taken=False)

    is_taken = await user_repo.is_phone_taken(phone_number, exclude_id=exclude_id)
    return AvailabilityResponse(
        is_taken=is_taken,
        message="Phone number is already in use" if is_taken else "Phone number is available",
    )


@router.get("/{user_id}", response_model=UserResponse)
async def get_profile(
    user_id: str,
    current_user: CurrentUser,
    user_repo: UserRepoDep,
) -> UserResponse:
    """Get a profile. Users read their own; admins read any."""
    if user_id != current_user.uid and not current_user.admin:
        raise ForbiddenError("You can only view your own profile")

    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)
    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_profile(
    user_id: str,
    request: UserUpdateRequest,
    current_user: CurrentUser,
    user_repo: UserRepoDep,
    db: DbSession,
) -> UserResponse:
    """Update the caller's profile settings. Sending an empty phone number clears it."""
    if user_id != current_user.uid:
        raise ForbiddenError("You can only update your own profile")

    user = await user_repo.get_by_id(user_id)
    if user is None:
        raise ResourceNotFoundError("User", user_id)

    provided = request.model_fields_set
    if not provided:
        raise ValidationError("No update data provided")

    changes = {name: getattr(request, name) for name in provided}

    if "username" in changes:
        username = _clean(changes["username"])
        if username is None:
            raise ValidationError("Username cannot be empty")
        if username != user.username and await user_repo.is_username_taken(
            username, exclude_id=user_id
        ):
            raise ConflictError("Username is already taken", details={"field": "username"})
        changes["username"] = username

    if "phone_number" in changes:
        phone_number = _clean(changes["phone_number"])
        if phone_number and await user_repo.is_phone_taken(phone_number, exclude_id=user_id):
            raise ConflictError("Phone number is already in use", details={"field": "phone_number"})
        changes["phone_number"] = phone_number

    for name in ("display_name", "institution", "researcher_id"):
        if name in changes:
            changes[name] = _clean(changes[name])

    user = await user_repo.update(user, **changes)
    await db.commit()
    log.info("profile updated", user_id=user_id, fields=sorted(changes))
    return UserResponse.model_validate(user)
