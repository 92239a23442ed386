"""
SmartNotesX Backend — Bookmark Route Handlers
===============================================

All routes require authentication and act on the caller's own bookmarks.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.database import get_db_session
from smartnotes.dependencies import get_current_user, get_services
from smartnotes.models.user import User
from smartnotes.schemas.common import envelope
from smartnotes.services import ServiceContainer

router = APIRouter(prefix="/api/bookmarks", tags=["Bookmarks"])


@router.get("", summary="Caller's bookmarked notes")
async def list_bookmarks(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    return envelope(await services.bookmarks.list_mine(db, user.id))


@router.get("/check/{note_id}", summary="Is this note bookmarked by the caller?")
async def check_bookmark(
    note_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    return envelope(await services.bookmarks.check(db, user.id, note_id))


@router.post("/{note_id}", status_code=status.HTTP_201_CREATED, summary="Bookmark a note")
async def add_bookmark(
    note_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    bookmark = await services.bookmarks.add(db, user.id, note_id)
    return envelope(bookmark, message="Bookmark added successfully")


@router.delete("/{note_id}", summary="Remove a bookmark")
async def remove_bookmark(
    note_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    await services.bookmarks.remove(db, user.id, note_id)
    return envelope(message="Bookmark removed successfully")
