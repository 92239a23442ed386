"""
SmartNotesX Backend — Jobs Route Handlers
===========================================

    GET    /api/jobs                          public listing (active, not expired)
    GET    /api/jobs/user/my-applications     caller's applications
    GET    /api/jobs/{id}                     public detail
    POST   /api/jobs/{id}/apply               authenticated
    POST   /api/jobs                          admin
    PUT    /api/jobs/{id}                     admin (poster or admin)
    DELETE /api/jobs/{id}                     admin (poster or admin)
    GET    /api/jobs/{id}/applications        admin
"""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.database import get_db_session
from smartnotes.dependencies import get_current_user, get_services, require_admin
from smartnotes.models.user import User
from smartnotes.schemas.common import envelope
from smartnotes.schemas.job import ApplicationCreate, JobCreate, JobUpdate
from smartnotes.services import ServiceContainer

router = APIRouter(prefix="/api/jobs", tags=["Jobs"])

JobSortKey = Literal["createdAt", "applicationDeadline", "title", "views"]


@router.get("", summary="Browse open postings")
async def list_jobs(
    type: Optional[Literal["Job", "Internship"]] = Query(default=None),
    location: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    location_type: Optional[Literal["Remote", "On-site", "Hybrid"]] = Query(default=None, alias="locationType"),
    search: Optional[str] = Query(default=None, description="Matches title, company or description"),
    job_status: Literal["active", "closed", "draft"] = Query(default="active", alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    sort_by: JobSortKey = Query(default="createdAt", alias="sortBy"),
    order: Literal["asc", "desc"] = Query(default="desc"),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    result = await services.jobs.list_jobs(
        db,
        type=type,
        location=location,
        location_type=location_type,
        search=search,
        status=job_status,
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
    )
    return envelope(result)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Post a job (admin)")
async def create_job(
    body: JobCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    job = await services.jobs.create(db, body, admin.id)
    return envelope(job, message="Job posted successfully")


@router.get("/user/my-applications", summary="Caller's applications, newest first")
async def my_applications(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    return envelope(await services.jobs.list_my_applications(db, user.id))


@router.get("/{job_id}", summary="Job detail")
async def get_job(
    job_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    return envelope(await services.jobs.get_job(db, job_id))


@router.put("/{job_id}", summary="Update a posting (admin)")
async def update_job(
    job_id: uuid.UUID,
    body: JobUpdate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    job = await services.jobs.update(db, job_id, body, admin.id, admin.role)
    return envelope(job, message="Job updated successfully")


@router.delete("/{job_id}", summary="Delete a posting and its applications (admin)")
async def delete_job(
    job_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    await services.jobs.delete(db, job_id, admin.id, admin.role)
    return envelope(message="Job deleted successfully")


@router.post("/{job_id}/apply", status_code=status.HTTP_201_CREATED, summary="Apply to a job")
async def apply_for_job(
    job_id: uuid.UUID,
    body: Optional[ApplicationCreate] = Body(default=None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    application = await services.jobs.apply(db, job_id, user.id, body or ApplicationCreate())
    return envelope(application, message="Application submitted successfully")


@router.get("/{job_id}/applications", summary="Applications for a job (admin)")
async def job_applications(
    job_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    return envelope(await services.jobs.list_applications_for_job(db, job_id))
