"""
SmartNotesX Backend — Bookmark SQLAlchemy Model
=================================================

What:  Association row linking a user to a note they saved.
How:   The unique constraint on (user_id, note_id) is the only guard against
       double bookmarks; User.bookmarked_notes and Note.bookmarked_by are both
       read from this table, so they always agree.
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from smartnotes.database import Base, utcnow


class Bookmark(Base):
    __tablename__ = "bookmarks"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    note_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "note_id", name="uq_bookmarks_user_note"),
    )

    def __repr__(self) -> str:
        return f"<Bookmark(user_id={self.user_id}, note_id={self.note_id})>"
