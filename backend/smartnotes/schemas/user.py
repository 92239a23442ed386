"""
SmartNotesX Backend — User & Auth Schemas
===========================================

What:  Request bodies for register/login/profile update and the public user
       representations returned by the API.
Why:   `password_hash` exists only on the ORM model; no schema here declares
       it, so no response can ever carry it.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from smartnotes.database import as_utc
from smartnotes.models.user import User
from smartnotes.schemas.common import CamelModel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class RegisterRequest(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    branch: Optional[str] = Field(default=None, min_length=1, max_length=50)
    semester: Optional[int] = Field(default=None, ge=1, le=8)

    @field_validator("name", "branch", mode="before")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class ProfileUpdate(CamelModel):
    """Partial profile update; only fields present in the body are applied."""

    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    branch: Optional[str] = Field(default=None, max_length=50)
    semester: Optional[int] = Field(default=None, ge=1, le=8)
    avatar: Optional[str] = Field(default=None, max_length=500)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserSummary(CamelModel):
    """Owner/poster/applicant profile joined onto notes, jobs and applications."""

    id: uuid.UUID
    name: str
    email: str
    branch: Optional[str] = None
    semester: Optional[int] = None

    @classmethod
    def from_model(cls, user: Optional[User], with_semester: bool = False) -> Optional["UserSummary"]:
        if user is None:
            return None
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            branch=user.branch,
            semester=user.semester if with_semester else None,
        )


class UserOut(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    role: str
    branch: Optional[str] = None
    semester: Optional[int] = None
    avatar: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, user: User) -> "UserOut":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role,
            branch=user.branch,
            semester=user.semester,
            avatar=user.avatar,
            is_active=user.is_active,
            created_at=as_utc(user.created_at),
            updated_at=as_utc(user.updated_at),
        )


class ProfileOut(UserOut):
    """UserOut plus the id lists of owned and bookmarked notes."""

    uploaded_notes: List[uuid.UUID] = Field(default_factory=list)
    bookmarks: List[uuid.UUID] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user: User, uploaded_notes: List[uuid.UUID], bookmarks: List[uuid.UUID]) -> "ProfileOut":
        base = UserOut.from_model(user).model_dump()
        return cls(**base, uploaded_notes=uploaded_notes, bookmarks=bookmarks)


class AuthResult(CamelModel):
    token: str
    user: ProfileOut
