"""User profile model keyed by the Firebase uid."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, String, Text, TIMESTAMP, func
from sqlalchemy.orm import Mapped, mapped_column
from portal.database import Base


class User(Base):
    """Portal profile for a Firebase-authenticated account."""

    __tablename__ = "users"

    # Firebase uid
    id: Mapped[str] = mapped_column(String(128), primary_key=True)

    # Profile information
    email: Mapped[str | None] = mapped_column(String(255), unique=True, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255))
    username: Mapped[str | None] = mapped_column(String(20), unique=True, index=True)
    photo_url: Mapped[str | None] = mapped_column(Text)
    phone_number: Mapped[str | None] = mapped_column(String(32), unique=True, index=True)
    institution: Mapped[str | None] = mapped_column(String(255))
    researcher_id: Mapped[str | None] = mapped_column(String(64))
    role: Mapped[str | None] = mapped_column(String(20))

    # Privilege flag, distinct from the role label
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<User(id='{self.id}', username='{self.username}')>"
