"""
SmartNotesX Backend — Job & Application Schemas
=================================================

What:  Job posting payloads (create/update), application payloads, and their
       response representations.
How:   Nested objects (salary, stipend, eligibility) are small pydantic models
       dumped to plain dicts for the JSON columns. Deadlines sent without a
       timezone are read as UTC.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from smartnotes.database import as_utc
from smartnotes.models.job import Application, Job
from smartnotes.schemas.common import CamelModel, Pagination
from smartnotes.schemas.user import UserSummary

JobType = Literal["Job", "Internship"]
LocationType = Literal["Remote", "On-site", "Hybrid"]
JobStatusValue = Literal["active", "closed", "draft"]


# ── Nested Objects ────────────────────────────────────────────────────────
class Salary(CamelModel):
    min: Optional[float] = None
    max: Optional[float] = None
    currency: str = "INR"


class Stipend(CamelModel):
    amount: Optional[float] = None
    currency: str = "INR"
    # e.g. "per month"
    duration: Optional[str] = None


class Eligibility(CamelModel):
    branches: List[str] = Field(default_factory=list)
    min_cgpa: Optional[float] = Field(default=None, alias="minCGPA", ge=0, le=10)
    graduation_year: List[int] = Field(default_factory=list)


def _as_json(value: Optional[BaseModel]) -> Optional[Dict[str, Any]]:
    return value.model_dump(by_alias=True) if value is not None else None


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class JobCreate(CamelModel):
    title: str = Field(min_length=3, max_length=100)
    company: str = Field(min_length=1, max_length=200)
    company_logo: Optional[str] = Field(default=None, max_length=500)
    description: str = Field(min_length=20)
    type: JobType
    location: str = Field(min_length=1, max_length=200)
    location_type: LocationType = "On-site"
    salary: Optional[Salary] = None
    stipend: Optional[Stipend] = None
    duration: Optional[str] = Field(default=None, max_length=100)
    skills: List[str] = Field(default_factory=list)
    eligibility: Optional[Eligibility] = None
    application_deadline: datetime
    apply_link: str = Field(min_length=1, max_length=500)
    status: JobStatusValue = "active"
    is_verified: bool = False

    @field_validator("title", "company", "location", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("skills")
    @classmethod
    def strip_skills(cls, v: List[str]) -> List[str]:
        return [skill.strip() for skill in v if skill.strip()]

    @field_validator("application_deadline")
    @classmethod
    def deadline_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    def to_columns(self) -> Dict[str, Any]:
        """Column values for a new Job row; nested objects become JSON dicts."""
        values = self.model_dump(exclude={"salary", "stipend", "eligibility", "company_logo"})
        values["salary"] = _as_json(self.salary)
        values["stipend"] = _as_json(self.stipend)
        values["eligibility"] = _as_json(self.eligibility)
        if self.company_logo:
            values["company_logo"] = self.company_logo
        return values


class JobUpdate(CamelModel):
    """Partial job update; only keys present in the body are written."""

    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    company: Optional[str] = Field(default=None, min_length=1, max_length=200)
    company_logo: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = Field(default=None, min_length=20)
    type: Optional[JobType] = None
    location: Optional[str] = Field(default=None, min_length=1, max_length=200)
    location_type: Optional[LocationType] = None
    salary: Optional[Salary] = None
    stipend: Optional[Stipend] = None
    duration: Optional[str] = Field(default=None, max_length=100)
    skills: Optional[List[str]] = None
    eligibility: Optional[Eligibility] = None
    application_deadline: Optional[datetime] = None
    apply_link: Optional[str] = Field(default=None, min_length=1, max_length=500)
    status: Optional[JobStatusValue] = None
    is_verified: Optional[bool] = None

    @field_validator("application_deadline")
    @classmethod
    def deadline_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    def to_columns(self) -> Dict[str, Any]:
        """Changed column values; an explicit null only clears optional columns."""
        values = self.model_dump(exclude_unset=True)
        for key in ("salary", "stipend", "eligibility"):
            if key in values:
                values[key] = _as_json(getattr(self, key))
        return {
            key: value
            for key, value in values.items()
            if value is not None or key in _NULLABLE_JOB_COLUMNS
        }


_NULLABLE_JOB_COLUMNS = frozenset({"salary", "stipend", "eligibility", "duration"})


class ApplicationCreate(CamelModel):
    cover_letter: Optional[str] = Field(default=None, max_length=1000)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class JobOut(CamelModel):
    id: uuid.UUID
    title: str
    company: str
    company_logo: str
    description: str
    type: str
    location: str
    location_type: str
    salary: Optional[Dict[str, Any]] = None
    stipend: Optional[Dict[str, Any]] = None
    duration: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    eligibility: Optional[Dict[str, Any]] = None
    application_deadline: datetime
    apply_link: str
    posted_by: Optional[UserSummary] = None
    status: str
    applicants: List[uuid.UUID] = Field(default_factory=list)
    views: int
    is_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, job: Job) -> "JobOut":
        return cls(
            id=job.id,
            title=job.title,
            company=job.company,
            company_logo=job.company_logo,
            description=job.description,
            type=job.type,
            location=job.location,
            location_type=job.location_type,
            salary=job.salary,
            stipend=job.stipend,
            duration=job.duration,
            skills=list(job.skills or []),
            eligibility=job.eligibility,
            application_deadline=as_utc(job.application_deadline),
            apply_link=job.apply_link,
            posted_by=UserSummary.from_model(job.posted_by),
            status=job.status,
            applicants=job.applicants,
            views=job.views,
            is_verified=job.is_verified,
            created_at=as_utc(job.created_at),
            updated_at=as_utc(job.updated_at),
        )


class ApplicationOut(CamelModel):
    """
    A job application.

    `job` is joined for the applicant's own list; `applicant` (with semester)
    is joined for the admin's per-job list.
    """

    id: uuid.UUID
    job_id: uuid.UUID
    applicant_id: uuid.UUID
    job: Optional[JobOut] = None
    applicant: Optional[UserSummary] = None
    status: str
    resume: Optional[Dict[str, Any]] = None
    cover_letter: Optional[str] = None
    applied_at: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(
        cls,
        application: Application,
        with_job: bool = False,
        with_applicant: bool = False,
    ) -> "ApplicationOut":
        return cls(
            id=application.id,
            job_id=application.job_id,
            applicant_id=application.applicant_id,
            job=JobOut.from_model(application.job) if with_job and application.job else None,
            applicant=(
                UserSummary.from_model(application.applicant, with_semester=True)
                if with_applicant
                else None
            ),
            status=application.status,
            resume=application.resume,
            cover_letter=application.cover_letter,
            applied_at=as_utc(application.applied_at),
            created_at=as_utc(application.created_at),
            updated_at=as_utc(application.updated_at),
        )


class JobPage(BaseModel):
    jobs: List[JobOut]
    pagination: Pagination
