"""Create users and papers tables.

Revision ID: 001_users_and_papers
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_users_and_papers"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create users and papers tables."""

    op.create_table(
        "users",
        # Firebase uid
        sa.Column("id", sa.String(128), primary_key=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("display_name", sa.String(255), nullable=True),
        sa.Column("username", sa.String(20), nullable=True),
        sa.Column("photo_url", sa.Text, nullable=True),
        sa.Column("phone_number", sa.String(32), nullable=True),
        sa.Column("institution", sa.String(255), nullable=True),
        sa.Column("researcher_id", sa.String(64), nullable=True),
        sa.Column("role", sa.String(20), nullable=True),
        sa.Column("is_admin", sa.Boolean, server_default=sa.text("false"), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    # Uniqueness backs the username / phone / email availability checks
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_phone_number", "users", ["phone_number"], unique=True)

    op.create_table(
        "papers",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", sa.String(128), nullable=False),
        sa.Column("title", sa.Text, nullable=False),
        sa.Column("abstract", sa.Text, nullable=False),
        sa.Column("authors", postgresql.JSONB, nullable=False),
        sa.Column("keywords", postgresql.JSONB, nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_mime_type", sa.String(100), nullable=False),
        sa.Column("file_size", sa.Integer, nullable=False),
        sa.Column("file_data", sa.LargeBinary, nullable=False),
        sa.Column("status", sa.String(30), server_default="Submitted", nullable=False),
        sa.Column("payment_option", sa.String(20), nullable=True),
        sa.Column("upload_date", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("submission_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("payment_due_date", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("paid_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("plagiarism_score", sa.Float, nullable=True),
        sa.Column("plagiarism_sections", postgresql.JSONB, nullable=True),
        sa.Column("acceptance_probability", sa.Float, nullable=True),
        sa.Column("acceptance_reasoning", sa.Text, nullable=True),
        sa.Column("admin_feedback", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )

    op.create_index("ix_papers_user_id", "papers", ["user_id"])
    op.create_index("ix_papers_status", "papers", ["status"])
    op.create_index("ix_papers_upload_date", "papers", ["upload_date"])


def downgrade() -> None:
    """Drop papers and users tables."""

    op.drop_index("ix_papers_upload_date", table_name="papers")
    op.drop_index("ix_papers_status", table_name="papers")
    op.drop_index("ix_papers_user_id", table_name="papers")
    op.drop_table("papers")

    op.drop_index("ix_users_phone_number", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
