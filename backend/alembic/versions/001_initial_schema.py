"""Create users, notes, bookmarks, jobs and applications tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Initial SmartNotesX schema.
How:   PostgreSQL UUID primary keys, TIMESTAMP WITH TIME ZONE, JSON for the
       small nested job objects and tag/skill lists.

Rollback: downgrade() drops every table (destructive, all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, comment="Lowercased login email"),
        sa.Column("password_hash", sa.String(255), nullable=False, comment="One-way password hash (argon2)"),
        sa.Column("role", sa.String(20), nullable=False, server_default=sa.text("'student'")),
        sa.Column("branch", sa.String(50), nullable=True),
        sa.Column("semester", sa.Integer(), nullable=True),
        sa.Column("avatar", sa.String(500), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("subject", sa.String(100), nullable=False),
        sa.Column("semester", sa.Integer(), nullable=False),
        sa.Column("branch", sa.String(50), nullable=False),
        sa.Column("file_url", sa.String(500), nullable=False, comment="Public URL returned by the media store"),
        sa.Column("file_type", sa.String(150), nullable=False, comment="MIME type of the uploaded file"),
        sa.Column("file_size", sa.Integer(), nullable=True),
        sa.Column(
            "media_public_id",
            sa.String(255),
            nullable=False,
            comment="Opaque media-store identifier used for deletion",
        ),
        sa.Column("uploaded_by_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'approved'")),
        sa.Column("views", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("downloads", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("rating_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["uploaded_by_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_notes_uploaded_by_id", "notes", ["uploaded_by_id"])
    op.create_index("idx_notes_browse", "notes", ["semester", "branch", "subject"])
    # Default listing order is newest first
    op.create_index("idx_notes_created_at", "notes", [sa.text("created_at DESC")])

    op.create_table(
        "bookmarks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("note_id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["note_id"], ["notes.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "note_id", name="uq_bookmarks_user_note"),
    )
    op.create_index("ix_bookmarks_user_id", "bookmarks", ["user_id"])

    op.create_table(
        "jobs",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(100), nullable=False),
        sa.Column("company", sa.String(200), nullable=False),
        sa.Column("company_logo", sa.String(500), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("type", sa.String(20), nullable=False, comment="Job | Internship"),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("location_type", sa.String(20), nullable=False, comment="Remote | On-site | Hybrid"),
        sa.Column("salary", sa.JSON(), nullable=True),
        sa.Column("stipend", sa.JSON(), nullable=True),
        sa.Column("duration", sa.String(100), nullable=True),
        sa.Column("skills", sa.JSON(), nullable=False),
        sa.Column("eligibility", sa.JSON(), nullable=True),
        sa.Column("application_deadline", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("apply_link", sa.String(500), nullable=False),
        sa.Column("posted_by_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'active'")),
        sa.Column("views", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["posted_by_id"], ["users.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_jobs_posted_by_id", "jobs", ["posted_by_id"])
    op.create_index("idx_jobs_listing", "jobs", ["status", "application_deadline"])

    op.create_table(
        "applications",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("job_id", sa.Uuid(), nullable=False),
        sa.Column("applicant_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'applied'")),
        sa.Column("resume", sa.JSON(), nullable=True),
        sa.Column("cover_letter", sa.String(1000), nullable=True),
        sa.Column(
            "applied_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["job_id"], ["jobs.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["applicant_id"], ["users.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("job_id", "applicant_id", name="uq_applications_job_applicant"),
    )
    op.create_index("ix_applications_job_id", "applications", ["job_id"])
    op.create_index("ix_applications_applicant_id", "applications", ["applicant_id"])


def downgrade() -> None:
    """
    Drop every table in reverse dependency order.

    WARNING: destructive. Prefer a forward migration on a database with data.
    """
    op.drop_index("ix_applications_applicant_id", table_name="applications")
    op.drop_index("ix_applications_job_id", table_name="applications")
    op.drop_table("applications")

    op.drop_index("idx_jobs_listing", table_name="jobs")
    op.drop_index("ix_jobs_posted_by_id", table_name="jobs")
    op.drop_table("jobs")

    op.drop_index("ix_bookmarks_user_id", table_name="bookmarks")
    op.drop_table("bookmarks")

    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_index("idx_notes_browse", table_name="notes")
    op.drop_index("ix_notes_uploaded_by_id", table_name="notes")
    op.drop_table("notes")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
