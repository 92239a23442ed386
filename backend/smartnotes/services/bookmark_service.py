"""
SmartNotesX Backend — Bookmark Service
========================================

What:  Add/remove/list/check a user's saved notes.
How:   A single `bookmarks` row per (user, note). The profile's bookmark list
       and the note's `bookmarkedBy` list are both read from this table, so
       one insert or delete changes all three views in one commit.
"""

import logging
import uuid
from typing import List

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.exceptions import DuplicateError, NotFoundError
from smartnotes.models.bookmark import Bookmark
from smartnotes.models.note import Note
from smartnotes.schemas.note import BookmarkOut, BookmarkStatus, NoteOut

logger = logging.getLogger(__name__)


class BookmarkService:
    async def _find(self, db: AsyncSession, user_id: uuid.UUID, note_id: uuid.UUID):
        result = await db.execute(
            select(Bookmark).where(Bookmark.user_id == user_id, Bookmark.note_id == note_id)
        )
        return result.scalar_one_or_none()

    async def add(self, db: AsyncSession, user_id: uuid.UUID, note_id: uuid.UUID) -> BookmarkOut:
        note = await db.get(Note, note_id)
        if note is None:
            raise NotFoundError(resource="Note", resource_id=str(note_id))

        if user_id in note.bookmarked_by:
            raise DuplicateError(
                message="Note already bookmarked",
                context={"note_id": str(note_id), "user_id": str(user_id)},
            )

        bookmark = Bookmark(user_id=user_id, note_id=note_id)
        note.bookmarks.append(bookmark)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise DuplicateError(
                message="Note already bookmarked",
                context={"note_id": str(note_id), "user_id": str(user_id)},
            )

        logger.info("User %s bookmarked note %s", user_id, note_id)
        return BookmarkOut(
            id=bookmark.id,
            user=bookmark.user_id,
            note=bookmark.note_id,
            created_at=bookmark.created_at,
        )

    async def remove(self, db: AsyncSession, user_id: uuid.UUID, note_id: uuid.UUID) -> None:
        bookmark = await self._find(db, user_id, note_id)
        if bookmark is None:
            raise NotFoundError(resource="Bookmark", resource_id=str(note_id))

        await db.delete(bookmark)
        await db.commit()
        logger.info("User %s removed bookmark on note %s", user_id, note_id)

    async def list_mine(self, db: AsyncSession, user_id: uuid.UUID) -> List[NoteOut]:
        """Bookmarked notes, most recently bookmarked first."""
        result = await db.execute(
            select(Note)
            .join(Bookmark, Bookmark.note_id == Note.id)
            .where(Bookmark.user_id == user_id)
            .order_by(desc(Bookmark.created_at), desc(Bookmark.id))
        )
        return [NoteOut.from_model(note) for note in result.scalars().all()]

    async def check(self, db: AsyncSession, user_id: uuid.UUID, note_id: uuid.UUID) -> BookmarkStatus:
        return BookmarkStatus(is_bookmarked=await self._find(db, user_id, note_id) is not None)
