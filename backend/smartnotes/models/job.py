"""
SmartNotesX Backend — Job & Application SQLAlchemy Models
===========================================================

What:  ORM models for the `jobs` and `applications` tables.
Who:   Used by JobService (postings, applications) and AdminService (user
       deletion removes the user's applications).

Table Design Rationale:
    - salary / stipend / eligibility: small nested objects stored as JSON;
      they are only ever read back whole, never filtered on
    - skills: JSON list of strings
    - application_deadline: required; public listing hides expired postings
    - applications: one row per (job, applicant), enforced by a unique
      constraint; `Job.applicants` derives the id list from them
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartnotes.constants import (
    DEFAULT_COMPANY_LOGO_URL,
    ApplicationStatus,
    JobStatus,
)
from smartnotes.database import Base, utcnow

if TYPE_CHECKING:
    from smartnotes.models.user import User


class Job(Base):
    """A job or internship posting created by an admin."""

    __tablename__ = "jobs"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    company: Mapped[str] = mapped_column(String(200), nullable=False)
    company_logo: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default=DEFAULT_COMPANY_LOGO_URL,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)

    type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Job | Internship",
    )
    location: Mapped[str] = mapped_column(String(200), nullable=False)
    location_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="On-site",
        comment="Remote | On-site | Hybrid",
    )

    # ── Compensation & Requirements ───────────────────────────────────────
    salary: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    stipend: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    duration: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    skills: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    eligibility: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)

    application_deadline: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
    )
    apply_link: Mapped[str] = mapped_column(String(500), nullable=False)

    posted_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=JobStatus.ACTIVE,
        server_default=text(f"'{JobStatus.ACTIVE}'"),
        comment="active | closed | draft",
    )
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    is_verified: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    # ── Relationships ─────────────────────────────────────────────────────
    posted_by: Mapped["User"] = relationship(lazy="selectin")

    applications: Mapped[List["Application"]] = relationship(
        back_populates="job",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_jobs_listing", "status", "application_deadline"),
    )

    @property
    def applicants(self) -> List[uuid.UUID]:
        return [application.applicant_id for application in self.applications]

    def __repr__(self) -> str:
        return f"<Job(id={self.id}, title='{self.title}', company='{self.company}')>"


class Application(Base):
    """A user's application to a job; at most one per (job, applicant)."""

    __tablename__ = "applications"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    job_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("jobs.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    applicant_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=ApplicationStatus.APPLIED,
        server_default=text(f"'{ApplicationStatus.APPLIED}'"),
        comment="applied | shortlisted | rejected | accepted",
    )

    # {"url": ..., "mediaPublicId": ...}
    resume: Mapped[Optional[Dict[str, Any]]] = mapped_column(JSON, nullable=True)
    cover_letter: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)

    applied_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    job: Mapped["Job"] = relationship(back_populates="applications", lazy="selectin")
    applicant: Mapped["User"] = relationship(lazy="selectin")

    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_applications_job_applicant"),
    )

    def __repr__(self) -> str:
        return f"<Application(job_id={self.job_id}, applicant_id={self.applicant_id}, status='{self.status}')>"
