"""User profile schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["Author", "Reviewer", "Admin"]


class UserResponse(BaseModel):
    """Profile as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str | None = None
    display_name: str | None = None
    username: str | None = None
    photo_url: str | None = None
    phone_number: str | None = None
    institution: str | None = None
    researcher_id: str | None = None
    role: str | None = None
    is_admin: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreateRequest(BaseModel):
    """Profile written after identity-provider signup. `id` must be the caller's uid."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    email: str | None = None
    display_name: str | None = None
    username: str | None = Field(None, min_length=4, max_length=20)
    photo_url: str | None = None
    phone_number: str | None = None
    institution: str | None = None
    researcher_id: str | None = None
    role: Role | None = None


class UserUpdateRequest(BaseModel):
    """Profile settings update. Email, id and admin flag are not editable here."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    display_name: str | None = None
    username: str | None = Field(None, min_length=4, max_length=20)
    phone_number: str | None = None
    institution: str | None = None
    researcher_id: str | None = None
    role: Role | None = None


class AvailabilityResponse(BaseModel):
    """Uniqueness probe result."""

    is_taken: bool
    message: str | None = None
