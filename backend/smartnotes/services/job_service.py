"""
SmartNotesX Backend — Job Service
===================================

What:  Job/internship postings and the applications made to them.
Who:   Called by the /api/jobs routes (public listing, applying) and the
       admin-only posting management routes.

Visibility:
    The public listing only shows postings whose status matches the
    requested one (default 'active') and whose application deadline has not
    passed. The admin listing has no such restriction.

Applications:
    One per (job, applicant). The up-front existence check gives the friendly
    message; the unique constraint catches the race between two concurrent
    applies and surfaces as the same DuplicateError.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import asc, desc, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from smartnotes.constants import JobStatus, UserRole
from smartnotes.database import as_utc, utcnow
from smartnotes.exceptions import (
    AuthorizationError,
    BusinessRuleError,
    DuplicateError,
    NotFoundError,
)
from smartnotes.models.job import Application, Job
from smartnotes.schemas.common import Pagination
from smartnotes.schemas.job import (
    ApplicationCreate,
    ApplicationOut,
    JobCreate,
    JobOut,
    JobPage,
    JobUpdate,
)

logger = logging.getLogger(__name__)

JOB_SORT_COLUMNS = {
    "createdAt": Job.created_at,
    "applicationDeadline": Job.application_deadline,
    "title": Job.title,
    "views": Job.views,
}


class JobService:
    async def _get(self, db: AsyncSession, job_id: uuid.UUID, refresh: bool = False) -> Job:
        query = select(Job).where(Job.id == job_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        job = (await db.execute(query)).scalar_one_or_none()
        if job is None:
            raise NotFoundError(resource="Job", resource_id=str(job_id))
        return job

    @staticmethod
    def _check_owner(job: Job, caller_id: uuid.UUID, caller_role: str, action: str) -> None:
        if job.posted_by_id != caller_id and caller_role != UserRole.ADMIN:
            raise AuthorizationError(
                message=f"Not authorized to {action} this job",
                context={"job_id": str(job.id), "caller_id": str(caller_id)},
            )

    async def _page(self, db: AsyncSession, conditions: list, order_by: list, page: int, limit: int) -> JobPage:
        count_query = select(func.count(Job.id))
        query = select(Job)
        if conditions:
            count_query = count_query.where(*conditions)
            query = query.where(*conditions)

        total = await db.scalar(count_query) or 0
        result = await db.execute(
            query.order_by(*order_by).offset((page - 1) * limit).limit(limit)
        )
        return JobPage(
            jobs=[JobOut.from_model(job) for job in result.scalars().all()],
            pagination=Pagination.build(total=total, page=page, limit=limit),
        )

    # ── Postings ──────────────────────────────────────────────────────────
    async def create(self, db: AsyncSession, data: JobCreate, poster_id: uuid.UUID) -> JobOut:
        job = Job(**data.to_columns(), posted_by_id=poster_id)
        db.add(job)
        await db.commit()
        logger.info("Job %s posted by %s", job.id, poster_id)
        return JobOut.from_model(await self._get(db, job.id, refresh=True))

    async def list_jobs(
        self,
        db: AsyncSession,
        type: Optional[str] = None,
        location: Optional[str] = None,
        location_type: Optional[str] = None,
        search: Optional[str] = None,
        status: str = JobStatus.ACTIVE,
        page: int = 1,
        limit: int = 12,
        sort_by: str = "createdAt",
        order: str = "desc",
    ) -> JobPage:
        """Public listing; expired postings never appear."""
        conditions = [
            Job.status == status,
            Job.application_deadline >= utcnow(),
        ]
        if type:
            conditions.append(Job.type == type)
        if location:
            conditions.append(Job.location.icontains(location, autoescape=True))
        if location_type:
            conditions.append(Job.location_type == location_type)
        if search:
            conditions.append(
                or_(
                    Job.title.icontains(search, autoescape=True),
                    Job.company.icontains(search, autoescape=True),
                    Job.description.icontains(search, autoescape=True),
                )
            )

        column = JOB_SORT_COLUMNS.get(sort_by, Job.created_at)
        direction = asc if order == "asc" else desc
        return await self._page(db, conditions, [direction(column), desc(Job.id)], page, limit)

    async def list_all(
        self,
        db: AsyncSession,
        status: Optional[str] = None,
        type: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> JobPage:
        """Admin listing: any status, expired postings included, newest first."""
        conditions = []
        if status:
            conditions.append(Job.status == status)
        if type:
            conditions.append(Job.type == type)
        return await self._page(db, conditions, [desc(Job.created_at), desc(Job.id)], page, limit)

    async def get_job(self, db: AsyncSession, job_id: uuid.UUID) -> JobOut:
        return JobOut.from_model(await self._get(db, job_id))

    async def update(
        self,
        db: AsyncSession,
        job_id: uuid.UUID,
        patch: JobUpdate,
        caller_id: uuid.UUID,
        caller_role: str,
    ) -> JobOut:
        job = await self._get(db, job_id)
        self._check_owner(job, caller_id, caller_role, "update")

        changes = patch.to_columns()
        for field, value in changes.items():
            setattr(job, field, value)
        await db.commit()

        logger.info("Job %s updated by %s: %s", job_id, caller_id, sorted(changes))
        return JobOut.from_model(job)

    async def delete(
        self,
        db: AsyncSession,
        job_id: uuid.UUID,
        caller_id: uuid.UUID,
        caller_role: str,
    ) -> None:
        job = await self._get(db, job_id)
        self._check_owner(job, caller_id, caller_role, "delete")

        # Applications are removed by the delete-orphan cascade in the same commit
        await db.delete(job)
        await db.commit()
        logger.info("Job %s deleted by %s", job_id, caller_id)

    # ── Applications ──────────────────────────────────────────────────────
    async def apply(
        self,
        db: AsyncSession,
        job_id: uuid.UUID,
        applicant_id: uuid.UUID,
        data: ApplicationCreate,
    ) -> ApplicationOut:
        """
        Apply to a job.

        Raises:
            NotFoundError: no such job
            BusinessRuleError: the deadline has passed
            DuplicateError: the caller already applied
        """
        job = await self._get(db, job_id)

        if as_utc(job.application_deadline) < utcnow():
            raise BusinessRuleError(
                message="Application deadline has passed",
                context={"job_id": str(job_id)},
            )

        if applicant_id in job.applicants:
            raise DuplicateError(
                message="You have already applied for this job",
                context={"job_id": str(job_id), "applicant_id": str(applicant_id)},
            )

        application = Application(
            job_id=job.id,
            applicant_id=applicant_id,
            cover_letter=data.cover_letter,
        )
        job.applications.append(application)
        job.views += 1
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise DuplicateError(
                message="You have already applied for this job",
                context={"job_id": str(job_id), "applicant_id": str(applicant_id)},
            )

        logger.info("User %s applied to job %s", applicant_id, job_id)
        return ApplicationOut.from_model(application)

    async def list_my_applications(self, db: AsyncSession, applicant_id: uuid.UUID) -> List[ApplicationOut]:
        result = await db.execute(
            select(Application)
            .where(Application.applicant_id == applicant_id)
            # The job's own applications are needed for its applicant list
            .options(
                selectinload(Application.job).selectinload(Job.applications),
                selectinload(Application.job).selectinload(Job.posted_by),
            )
            .order_by(desc(Application.created_at), desc(Application.id))
        )
        return [
            ApplicationOut.from_model(application, with_job=True)
            for application in result.scalars().all()
        ]

    async def list_applications_for_job(self, db: AsyncSession, job_id: uuid.UUID) -> List[ApplicationOut]:
        """Admin view of a job's applicants; 404 when the job does not exist."""
        await self._get(db, job_id)
        result = await db.execute(
            select(Application)
            .where(Application.job_id == job_id)
            .order_by(desc(Application.created_at), desc(Application.id))
        )
        return [
            ApplicationOut.from_model(application, with_applicant=True)
            for application in result.scalars().all()
        ]
