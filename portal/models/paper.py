"""Paper model for submitted manuscripts."""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import Float, Integer, LargeBinary, String, Text, TIMESTAMP, func
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import Mapped, deferred, mapped_column
from portal.database import Base
from portal.lifecycle import PaperStatus


class Paper(Base):
    """Manuscript metadata, uploaded file and review status."""

    __tablename__ = "papers"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Owner (identity provider uid)
    user_id: Mapped[str] = mapped_column(String(128), index=True)

    # Manuscript metadata
    title: Mapped[str] = mapped_column(Text)
    abstract: Mapped[str] = mapped_column(Text)
    authors: Mapped[list] = mapped_column(JSONB)
    keywords: Mapped[list] = mapped_column(JSONB, default=list)

    # Uploaded file, only loaded on download
    file_name: Mapped[str] = mapped_column(String(255))
    file_mime_type: Mapped[str] = mapped_column(String(100))
    file_size: Mapped[int] = mapped_column(Integer, default=0)
    file_data: Mapped[bytes] = deferred(mapped_column(LargeBinary))

    # Lifecycle
    status: Mapped[str] = mapped_column(
        String(30), default=PaperStatus.SUBMITTED.value, server_default="Submitted", index=True
    )
    payment_option: Mapped[str | None] = mapped_column(String(20))
    upload_date: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), index=True)
    submission_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True))
    payment_due_date: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True))
    paid_at: Mapped[datetime | None] = mapped_column(TIMESTAMP(timezone=True))

    # Advisory results (written by the advisory service or an admin)
    plagiarism_score: Mapped[float | None] = mapped_column(Float)
    plagiarism_sections: Mapped[list | None] = mapped_column(JSONB)
    acceptance_probability: Mapped[float | None] = mapped_column(Float)
    acceptance_reasoning: Mapped[str | None] = mapped_column(Text)
    admin_feedback: Mapped[str | None] = mapped_column(Text)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    def __repr__(self):
        return f"<Paper(id='{self.id}', status='{self.status}', title='{self.title[:50]}...')>"
