"""
SmartNotesX Backend — Note SQLAlchemy Model
=============================================

What:  ORM model representing the `notes` table.
Who:   Used by NoteService for CRUD, BookmarkService for joins, AdminService
       for aggregates, and by Alembic for schema management.

Table Design Rationale:
    - file_url / media_public_id: where the media store put the file and the
      identifier needed to delete it later
    - file_type: MIME type; decides the media-store resource type on delete
    - status: moderation state, notes are auto-approved on upload
    - views / downloads: plain read-modify-write counters
    - bookmarks: association rows; `bookmarked_by` derives the user id list

    Composite index on (semester, branch, subject) matches the browse filters.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
    Uuid,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartnotes.constants import NoteStatus
from smartnotes.database import Base, utcnow

if TYPE_CHECKING:
    from smartnotes.models.bookmark import Bookmark
    from smartnotes.models.user import User


class Note(Base):
    """
    A study note uploaded by a user.

    Lifecycle:
        1. Created after the media store accepts the file (status = 'approved')
        2. Counters change on view/download; owner or admin may patch metadata
        3. Deleted by owner or admin: remote file first, then bookmarks + row
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    subject: Mapped[str] = mapped_column(String(100), nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    branch: Mapped[str] = mapped_column(String(50), nullable=False)

    # ── Stored File ───────────────────────────────────────────────────────
    file_url: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        comment="Public URL returned by the media store",
    )
    file_type: Mapped[str] = mapped_column(
        String(150),
        nullable=False,
        comment="MIME type of the uploaded file",
    )
    file_size: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    media_public_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Opaque media-store identifier used for deletion",
    )

    uploaded_by_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=NoteStatus.APPROVED,
        server_default=text(f"'{NoteStatus.APPROVED}'"),
        comment="pending | approved | rejected",
    )

    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
    downloads: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))

    tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0, server_default=text("0"))
    rating_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))

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
    uploaded_by: Mapped["User"] = relationship(
        back_populates="uploaded_notes",
        lazy="selectin",
    )

    bookmarks: Mapped[List["Bookmark"]] = relationship(
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("idx_notes_browse", "semester", "branch", "subject"),
        Index("idx_notes_created_at", created_at.desc()),
    )

    @property
    def bookmarked_by(self) -> List[uuid.UUID]:
        """User ids that bookmarked this note (mirror of the bookmarks table)."""
        return [bookmark.user_id for bookmark in self.bookmarks]

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title='{self.title}', status='{self.status}')>"
