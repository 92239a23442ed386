"""
SmartNotesX Backend — Note Schemas
====================================

What:  Note metadata accepted on upload/update and the note representation
       returned by list/detail/bookmark endpoints.
How:   Upload metadata arrives as multipart form fields and is validated by
       FastAPI `Form()` constraints in the route, then packed into
       `NoteCreate`. Updates arrive as JSON and are validated by `NoteUpdate`.

Tags:
    Clients send tags either as a comma-separated string ("dbms, sql") or as
    a list. Both become a list of trimmed, non-empty strings.
"""

import uuid
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator

from smartnotes.database import as_utc
from smartnotes.models.note import Note
from smartnotes.schemas.common import CamelModel, Pagination
from smartnotes.schemas.user import UserSummary


def parse_tags(value: Union[str, List[str], None]) -> List[str]:
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [tag.strip() for tag in items if tag and tag.strip()]


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(CamelModel):
    title: str = Field(min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    subject: str = Field(min_length=1, max_length=100)
    semester: int = Field(ge=1, le=8)
    branch: str = Field(min_length=1, max_length=50)
    tags: List[str] = Field(default_factory=list)

    @field_validator("title", "subject", "branch", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return parse_tags(v)


class NoteUpdate(CamelModel):
    """
    Partial note update.

    Only keys present in the request body are applied (`exclude_unset`), so
    an explicitly sent empty description clears it while an omitted one is
    left alone.
    """

    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    subject: Optional[str] = Field(default=None, min_length=1, max_length=100)
    semester: Optional[int] = Field(default=None, ge=1, le=8)
    branch: Optional[str] = Field(default=None, min_length=1, max_length=50)
    tags: Optional[List[str]] = None

    @field_validator("title", "subject", "branch", "description", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, v):
        return None if v is None else parse_tags(v)

    def to_columns(self) -> dict:
        """Changed column values; null is only accepted for the description."""
        # An explicit "" description clears the stored one rather than
        # keeping the previous value.
        values = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in values.items()
            if value is not None or key == "description"
        }


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteOut(CamelModel):
    """
    Full note representation.

    `uploaded_by` is the owner's summary (name, email, branch);
    `bookmarked_by` lists the ids of users that saved the note.
    """

    id: uuid.UUID
    title: str
    description: Optional[str] = None
    subject: str
    semester: int
    branch: str
    file_url: str
    file_type: str
    file_size: Optional[int] = None
    media_public_id: str
    uploaded_by: Optional[UserSummary] = None
    status: str
    views: int
    downloads: int
    bookmarked_by: List[uuid.UUID] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    rating: float
    rating_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, note: Note) -> "NoteOut":
        return cls(
            id=note.id,
            title=note.title,
            description=note.description,
            subject=note.subject,
            semester=note.semester,
            branch=note.branch,
            file_url=note.file_url,
            file_type=note.file_type,
            file_size=note.file_size,
            media_public_id=note.media_public_id,
            uploaded_by=UserSummary.from_model(note.uploaded_by),
            status=note.status,
            views=note.views,
            downloads=note.downloads,
            bookmarked_by=note.bookmarked_by,
            tags=list(note.tags or []),
            rating=note.rating,
            rating_count=note.rating_count,
            created_at=as_utc(note.created_at),
            updated_at=as_utc(note.updated_at),
        )


class DownloadOut(CamelModel):
    file_url: str


class BookmarkStatus(CamelModel):
    is_bookmarked: bool


class BookmarkOut(CamelModel):
    id: uuid.UUID
    user: uuid.UUID
    note: uuid.UUID
    created_at: datetime


class NotePage(BaseModel):
    """`data` of paginated note listings: {"notes": [...], "pagination": {...}}."""

    notes: List[NoteOut]
    pagination: Pagination
