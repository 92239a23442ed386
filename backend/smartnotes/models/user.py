"""
SmartNotesX Backend — User SQLAlchemy Model
=============================================

What:  ORM model for the `users` table.
Who:   Used by AuthService for registration/login, by AdminService for user
       management, and as the owner/poster/applicant side of every relation.

Table Design Rationale:
    - email: unique index, stored lowercased and trimmed
    - password_hash: argon2 hash only; never serialized (schemas omit it)
    - uploaded_notes / bookmarked_notes: read through explicit loader options;
      lazy="raise" guards against implicit I/O under asyncio
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from smartnotes.constants import DEFAULT_AVATAR_URL, UserRole
from smartnotes.database import Base, utcnow

if TYPE_CHECKING:
    from smartnotes.models.note import Note


class User(Base):
    """A registered student or administrator."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Lowercased login email",
    )

    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="One-way password hash (argon2)",
    )

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.STUDENT,
        server_default=text(f"'{UserRole.STUDENT}'"),
        comment="student | admin",
    )

    branch: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    semester: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    avatar: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
        default=DEFAULT_AVATAR_URL,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

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
    uploaded_notes: Mapped[List["Note"]] = relationship(
        back_populates="uploaded_by",
        lazy="raise",
        passive_deletes=True,
        order_by="Note.created_at.desc()",
    )

    # Mirror of the bookmarks table from the user's side
    bookmarked_notes: Mapped[List["Note"]] = relationship(
        secondary="bookmarks",
        viewonly=True,
        lazy="raise",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
