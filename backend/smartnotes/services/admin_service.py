"""
SmartNotesX Backend — Admin Service
=====================================

What:  Dashboard aggregates and user management for administrators.
How:   Aggregates are SQL GROUP BY queries; user deletion fans out to the
       media store for every owned file before touching any row.

User Deletion:
    1. Remote files of every note the user uploaded are deleted (any
       UploadError aborts here with the database untouched)
    2. In one commit: bookmarks on those notes, the user's own bookmarks,
       the user's applications, the notes, and the user row
    Files already deleted in step 1 stay deleted if step 2 later fails.
"""

import logging
import uuid
from typing import Optional

from sqlalchemy import delete, desc, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.constants import UserRole
from smartnotes.exceptions import BusinessRuleError, NotFoundError
from smartnotes.models.bookmark import Bookmark
from smartnotes.models.job import Application
from smartnotes.models.note import Note
from smartnotes.models.user import User
from smartnotes.schemas.admin import (
    BranchCount,
    Contributor,
    DashboardStats,
    Overview,
    SemesterCount,
    UserPage,
)
from smartnotes.schemas.common import Pagination
from smartnotes.schemas.note import NoteOut
from smartnotes.schemas.user import UserOut
from smartnotes.services.media_store import MediaStore, resource_type_for

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, media_store: MediaStore):
        self.media_store = media_store

    async def _get_user(self, db: AsyncSession, user_id: uuid.UUID) -> User:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="User", resource_id=str(user_id))
        return user

    async def stats(self, db: AsyncSession) -> DashboardStats:
        total_users = await db.scalar(
            select(func.count(User.id)).where(User.role == UserRole.STUDENT)
        )
        total_notes = await db.scalar(select(func.count(Note.id)))
        total_downloads = await db.scalar(select(func.coalesce(func.sum(Note.downloads), 0)))
        total_views = await db.scalar(select(func.coalesce(func.sum(Note.views), 0)))

        note_count = func.count(Note.id).label("note_count")

        by_branch = await db.execute(
            select(Note.branch, note_count)
            .group_by(Note.branch)
            .order_by(desc("note_count"), Note.branch)
        )
        by_semester = await db.execute(
            select(Note.semester, note_count)
            .group_by(Note.semester)
            .order_by(Note.semester)
        )

        # Left join: users with no notes still rank (with zero)
        contributors = await db.execute(
            select(User.id, User.name, User.email, User.branch, func.count(Note.id).label("notes_count"))
            .outerjoin(Note, Note.uploaded_by_id == User.id)
            .group_by(User.id, User.name, User.email, User.branch)
            .order_by(desc("notes_count"), User.name)
            .limit(5)
        )

        recent = await db.execute(
            select(Note).order_by(desc(Note.created_at), desc(Note.id)).limit(5)
        )

        return DashboardStats(
            overview=Overview(
                total_users=total_users or 0,
                total_notes=total_notes or 0,
                total_downloads=total_downloads or 0,
                total_views=total_views or 0,
            ),
            notes_by_branch=[BranchCount(branch=row.branch, count=row.note_count) for row in by_branch],
            notes_by_semester=[
                SemesterCount(semester=row.semester, count=row.note_count) for row in by_semester
            ],
            top_contributors=[
                Contributor(
                    id=row.id,
                    name=row.name,
                    email=row.email,
                    branch=row.branch,
                    notes_count=row.notes_count,
                )
                for row in contributors
            ],
            recent_notes=[NoteOut.from_model(note) for note in recent.scalars().all()],
        )

    async def list_users(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        role: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> UserPage:
        conditions = []
        if search:
            conditions.append(
                or_(
                    User.name.icontains(search, autoescape=True),
                    User.email.icontains(search, autoescape=True),
                )
            )
        if role:
            conditions.append(User.role == role)

        count_query = select(func.count(User.id))
        query = select(User)
        if conditions:
            count_query = count_query.where(*conditions)
            query = query.where(*conditions)

        total = await db.scalar(count_query) or 0
        result = await db.execute(
            query.order_by(desc(User.created_at), desc(User.id))
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return UserPage(
            users=[UserOut.from_model(user) for user in result.scalars().all()],
            pagination=Pagination.build(total=total, page=page, limit=limit),
        )

    async def toggle_user_status(self, db: AsyncSession, user_id: uuid.UUID) -> UserOut:
        user = await self._get_user(db, user_id)
        if user.role == UserRole.ADMIN:
            raise BusinessRuleError(
                message="Cannot deactivate admin users",
                context={"user_id": str(user_id)},
            )

        user.is_active = not user.is_active
        await db.commit()
        logger.info("User %s is_active=%s", user_id, user.is_active)
        return UserOut.from_model(user)

    async def delete_user(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        user = await self._get_user(db, user_id)
        if user.role == UserRole.ADMIN:
            raise BusinessRuleError(
                message="Cannot delete admin users",
                context={"user_id": str(user_id)},
            )

        result = await db.execute(
            select(Note.id, Note.media_public_id, Note.file_type).where(Note.uploaded_by_id == user_id)
        )
        owned = result.all()

        for note in owned:
            await self.media_store.delete(note.media_public_id, resource_type_for(note.file_type))

        note_ids = [note.id for note in owned]
        if note_ids:
            await db.execute(delete(Bookmark).where(Bookmark.note_id.in_(note_ids)))
        await db.execute(delete(Bookmark).where(Bookmark.user_id == user_id))
        await db.execute(delete(Application).where(Application.applicant_id == user_id))
        await db.execute(delete(Note).where(Note.uploaded_by_id == user_id))
        await db.delete(user)
        await db.commit()

        logger.info("User %s deleted with %d notes", user_id, len(note_ids))
