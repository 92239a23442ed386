"""
SmartNotesX Backend — Admin Route Handlers
============================================

Every route here depends on `require_admin`; note listing/deletion reuse
NoteService with the admin role so ownership checks always pass.
"""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.database import get_db_session
from smartnotes.dependencies import get_services, require_admin
from smartnotes.models.user import User
from smartnotes.schemas.common import envelope
from smartnotes.services import ServiceContainer

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.get("/stats", summary="Dashboard statistics")
async def dashboard_stats(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    return envelope(await services.admin.stats(db))


@router.get("/users", summary="List users")
async def list_users(
    search: Optional[str] = Query(default=None, description="Matches name or email"),
    role: Optional[Literal["student", "admin"]] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    result = await services.admin.list_users(db, search=search, role=role, page=page, limit=limit)
    return envelope(result)


@router.patch("/users/{user_id}/toggle-status", summary="Activate or deactivate a student")
async def toggle_user_status(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    user = await services.admin.toggle_user_status(db, user_id)
    state = "activated" if user.is_active else "deactivated"
    return envelope(user, message=f"User {state} successfully")


@router.delete("/users/{user_id}", summary="Delete a student with their notes")
async def delete_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    await services.admin.delete_user(db, user_id)
    return envelope(message="User and associated notes deleted successfully")


@router.get("/notes", summary="All notes, any status")
async def list_all_notes(
    note_status: Optional[Literal["pending", "approved", "rejected"]] = Query(default=None, alias="status"),
    branch: Optional[str] = Query(default=None),
    semester: Optional[int] = Query(default=None, ge=1, le=8),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    result = await services.notes.list_all(
        db,
        status=note_status,
        branch=branch,
        semester=semester,
        page=page,
        limit=limit,
    )
    return envelope(result)


@router.delete("/notes/{note_id}", summary="Delete any note")
async def delete_note(
    note_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    await services.notes.delete(db, note_id, admin.id, admin.role)
    return envelope(message="Note deleted successfully")


@router.get("/jobs", summary="All postings, including closed and expired")
async def list_all_jobs(
    job_status: Optional[Literal["active", "closed", "draft"]] = Query(default=None, alias="status"),
    type: Optional[Literal["Job", "Internship"]] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    result = await services.jobs.list_all(db, status=job_status, type=type, page=page, limit=limit)
    return envelope(result)
