"""
SmartNotesX Backend — Note Service (Business Logic)
=====================================================

What:  Upload, browse, read, update and delete study notes.
How:   Composes the MediaStore (file bytes) with database operations on the
       notes table. Each call receives its own AsyncSession.
Who:   Called by the /api/notes routes and, with the admin role, by the
       /api/admin/notes routes.

Upload Flow (POST /api/notes):
    ┌──────────┐    ┌──────────────┐    ┌──────────────┐    ┌────────────┐
    │  Route   │───▶│ Size / MIME  │───▶│ MediaStore   │───▶│ Note row   │
    │ (form)   │    │ (dependency) │    │ .upload()    │    │ + commit   │
    └──────────┘    └──────────────┘    └──────────────┘    └────────────┘

Delete Flow:
    The remote file is deleted first. If the media store fails, UploadError
    propagates and no row is touched. Otherwise the note and its bookmarks are
    removed in one commit. A crash between the two steps leaves a row whose
    file is gone; that window is accepted.

Authorization:
    update/delete require the caller to own the note or be an admin.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import asc, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.constants import NoteStatus, UserRole
from smartnotes.exceptions import AuthorizationError, NotFoundError, ValidationError
from smartnotes.models.note import Note
from smartnotes.schemas.common import Pagination
from smartnotes.schemas.note import DownloadOut, NoteCreate, NoteOut, NotePage, NoteUpdate
from smartnotes.services.media_store import MediaStore, resource_type_for

logger = logging.getLogger(__name__)

# Public sort keys → columns
NOTE_SORT_COLUMNS = {
    "createdAt": Note.created_at,
    "views": Note.views,
    "downloads": Note.downloads,
    "title": Note.title,
    "rating": Note.rating,
    "semester": Note.semester,
}


class NoteService:
    """
    Business logic layer for notes.

    Error Handling Strategy:
        Missing rows become NotFoundError, ownership failures
        AuthorizationError, media-store failures UploadError (raised by the
        store itself). Nothing is retried.
    """

    def __init__(self, media_store: MediaStore):
        self.media_store = media_store

    async def _get(self, db: AsyncSession, note_id: uuid.UUID, refresh: bool = False) -> Note:
        query = select(Note).where(Note.id == note_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        note = (await db.execute(query)).scalar_one_or_none()
        if note is None:
            raise NotFoundError(resource="Note", resource_id=str(note_id))
        return note

    @staticmethod
    def _check_owner(note: Note, caller_id: uuid.UUID, caller_role: str, action: str) -> None:
        if note.uploaded_by_id != caller_id and caller_role != UserRole.ADMIN:
            raise AuthorizationError(
                message=f"Not authorized to {action} this note",
                context={"note_id": str(note.id), "caller_id": str(caller_id)},
            )

    # ── Create ────────────────────────────────────────────────────────────
    async def upload(
        self,
        db: AsyncSession,
        meta: NoteCreate,
        content: Optional[bytes],
        filename: str,
        mime_type: str,
        owner_id: uuid.UUID,
    ) -> NoteOut:
        """
        Store the file, then persist the note.

        Steps:
            1. Reject a missing file payload (ValidationError)
            2. Send bytes to the media store ("image" or "raw" resource)
            3. Insert the Note row (status 'approved') and commit
            4. Re-read it with the owner joined

        Raises:
            ValidationError: no file
            UploadError: media store failed (nothing was written to the DB)
        """
        if not content:
            raise ValidationError(message="Please upload a file", field="file")

        stored = await self.media_store.upload(content, filename, mime_type)

        note = Note(
            title=meta.title,
            description=meta.description,
            subject=meta.subject,
            semester=meta.semester,
            branch=meta.branch,
            tags=meta.tags,
            file_url=stored.url,
            file_type=mime_type,
            file_size=len(content),
            media_public_id=stored.public_id,
            uploaded_by_id=owner_id,
            status=NoteStatus.APPROVED,
        )
        db.add(note)
        await db.commit()
        logger.info(
            "Note %s uploaded by %s (%s, %d bytes)",
            note.id,
            owner_id,
            stored.resource_type,
            len(content),
        )

        return NoteOut.from_model(await self._get(db, note.id, refresh=True))

    # ── Read ──────────────────────────────────────────────────────────────
    async def list_notes(
        self,
        db: AsyncSession,
        semester: Optional[int] = None,
        branch: Optional[str] = None,
        subject: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        limit: int = 12,
        sort_by: str = "createdAt",
        order: str = "desc",
    ) -> NotePage:
        """
        Public browse: approved notes only, filtered, sorted and paginated.

        Filters:
            semester  exact
            branch    case-insensitive equality
            subject   case-insensitive substring
            search    case-insensitive substring of title, description or subject
        """
        conditions = [Note.status == NoteStatus.APPROVED]
        if semester is not None:
            conditions.append(Note.semester == semester)
        if branch:
            conditions.append(func.lower(Note.branch) == branch.lower())
        if subject:
            conditions.append(Note.subject.icontains(subject, autoescape=True))
        if search:
            conditions.append(
                or_(
                    Note.title.icontains(search, autoescape=True),
                    Note.description.icontains(search, autoescape=True),
                    Note.subject.icontains(search, autoescape=True),
                )
            )

        column = NOTE_SORT_COLUMNS.get(sort_by, Note.created_at)
        direction = asc if order == "asc" else desc
        return await self._page(
            db,
            conditions,
            order_by=[direction(column), desc(Note.id)],
            page=page,
            limit=limit,
        )

    async def list_all(
        self,
        db: AsyncSession,
        status: Optional[str] = None,
        branch: Optional[str] = None,
        semester: Optional[int] = None,
        page: int = 1,
        limit: int = 20,
    ) -> NotePage:
        """Admin listing: every status, newest first."""
        conditions = []
        if status:
            conditions.append(Note.status == status)
        if branch:
            conditions.append(func.lower(Note.branch) == branch.lower())
        if semester is not None:
            conditions.append(Note.semester == semester)
        return await self._page(
            db,
            conditions,
            order_by=[desc(Note.created_at), desc(Note.id)],
            page=page,
            limit=limit,
        )

    async def _page(self, db: AsyncSession, conditions: list, order_by: list, page: int, limit: int) -> NotePage:
        count_query = select(func.count(Note.id))
        query = select(Note)
        if conditions:
            count_query = count_query.where(*conditions)
            query = query.where(*conditions)

        total = await db.scalar(count_query) or 0
        result = await db.execute(
            query.order_by(*order_by).offset((page - 1) * limit).limit(limit)
        )
        notes = result.scalars().all()
        return NotePage(
            notes=[NoteOut.from_model(note) for note in notes],
            pagination=Pagination.build(total=total, page=page, limit=limit),
        )

    async def get_note(self, db: AsyncSession, note_id: uuid.UUID) -> NoteOut:
        """Fetch a note and count the view. The increment is read-modify-write."""
        note = await self._get(db, note_id)
        note.views += 1
        await db.commit()
        return NoteOut.from_model(note)

    async def record_download(self, db: AsyncSession, note_id: uuid.UUID) -> DownloadOut:
        note = await self._get(db, note_id)
        note.downloads += 1
        await db.commit()
        return DownloadOut(file_url=note.file_url)

    async def list_mine(self, db: AsyncSession, owner_id: uuid.UUID) -> List[NoteOut]:
        result = await db.execute(
            select(Note)
            .where(Note.uploaded_by_id == owner_id)
            .order_by(desc(Note.created_at), desc(Note.id))
        )
        return [NoteOut.from_model(note) for note in result.scalars().all()]

    # ── Update / Delete ───────────────────────────────────────────────────
    async def update(
        self,
        db: AsyncSession,
        note_id: uuid.UUID,
        patch: NoteUpdate,
        caller_id: uuid.UUID,
        caller_role: str,
    ) -> NoteOut:
        note = await self._get(db, note_id)
        self._check_owner(note, caller_id, caller_role, "update")

        changes = patch.to_columns()
        for field, value in changes.items():
            setattr(note, field, value)
        await db.commit()

        logger.info("Note %s updated by %s: %s", note_id, caller_id, sorted(changes))
        return NoteOut.from_model(note)

    async def delete(
        self,
        db: AsyncSession,
        note_id: uuid.UUID,
        caller_id: uuid.UUID,
        caller_role: str,
    ) -> None:
        note = await self._get(db, note_id)
        self._check_owner(note, caller_id, caller_role, "delete")

        # Remote file first; an UploadError here leaves every row untouched
        await self.media_store.delete(note.media_public_id, resource_type_for(note.file_type))

        # Bookmarks go with the note (delete-orphan cascade)
        await db.delete(note)
        await db.commit()
        logger.info("Note %s deleted by %s", note_id, caller_id)
