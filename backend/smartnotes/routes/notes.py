"""
SmartNotesX Backend — Notes Route Handlers
============================================

What:  Browse, read, download-count, upload, update and delete notes.
How:   Thin handlers: query/form parameters are validated by FastAPI, the
       upload bytes by `validated_upload`, everything else by NoteService.

Route order matters: `/notes/user/my-notes` is declared before
`/notes/{note_id}` so "user" is never parsed as a note id.
"""

import uuid
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Form, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.database import get_db_session
from smartnotes.dependencies import UploadedFile, get_current_user, get_services, validated_upload
from smartnotes.models.user import User
from smartnotes.schemas.common import envelope
from smartnotes.schemas.note import NoteCreate, NoteUpdate
from smartnotes.services import ServiceContainer

router = APIRouter(prefix="/api/notes", tags=["Notes"])

NoteSortKey = Literal["createdAt", "views", "downloads", "title", "rating", "semester"]


@router.get("", summary="Browse approved notes")
async def list_notes(
    semester: Optional[int] = Query(default=None, ge=1, le=8),
    branch: Optional[str] = Query(default=None),
    subject: Optional[str] = Query(default=None, description="Case-insensitive substring"),
    search: Optional[str] = Query(default=None, description="Matches title, description or subject"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    sort_by: NoteSortKey = Query(default="createdAt", alias="sortBy"),
    order: Literal["asc", "desc"] = Query(default="desc"),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    result = await services.notes.list_notes(
        db,
        semester=semester,
        branch=branch,
        subject=subject,
        search=search,
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
    )
    return envelope(result)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Upload a note")
async def upload_note(
    title: str = Form(..., min_length=3, max_length=100),
    subject: str = Form(..., min_length=1, max_length=100),
    semester: int = Form(..., ge=1, le=8),
    branch: str = Form(..., min_length=1, max_length=50),
    description: Optional[str] = Form(default=None, max_length=500),
    tags: Optional[str] = Form(default=None, description="Comma-separated"),
    user: User = Depends(get_current_user),
    upload: Optional[UploadedFile] = Depends(validated_upload),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    meta = NoteCreate(
        title=title,
        subject=subject,
        semester=semester,
        branch=branch,
        description=description,
        tags=tags,
    )
    note = await services.notes.upload(
        db,
        meta,
        content=upload.content if upload else None,
        filename=upload.filename if upload else "",
        mime_type=upload.content_type if upload else "",
        owner_id=user.id,
    )
    return envelope(note, message="Note uploaded successfully")


@router.get("/user/my-notes", summary="Notes uploaded by the caller")
async def my_notes(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    return envelope(await services.notes.list_mine(db, user.id))


@router.get("/{note_id}", summary="Note detail (counts a view)")
async def get_note(
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    return envelope(await services.notes.get_note(db, note_id))


@router.post("/{note_id}/download", summary="Count a download and return the file URL")
async def download_note(
    note_id: uuid.UUID,
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    result = await services.notes.record_download(db, note_id)
    return envelope(result, message="Download count incremented")


@router.put("/{note_id}", summary="Update note metadata (owner or admin)")
async def update_note(
    note_id: uuid.UUID,
    body: NoteUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    note = await services.notes.update(db, note_id, body, user.id, user.role)
    return envelope(note, message="Note updated successfully")


@router.delete("/{note_id}", summary="Delete a note and its file (owner or admin)")
async def delete_note(
    note_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
):
    await services.notes.delete(db, note_id, user.id, user.role)
    return envelope(message="Note deleted successfully")
