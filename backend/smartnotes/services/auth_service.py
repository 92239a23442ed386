"""
SmartNotesX Backend — Auth Service
====================================

What:  Registration, login, identity resolution and profile management.
How:   Passwords are argon2-hashed (passlib); tokens are HS256 JWTs
       (python-jose) whose subject is the user id.
Who:   Called by the /api/auth routes and by the `get_current_user`
       dependency on every authenticated request.

Failure semantics:
    - unknown email / wrong password  → AuthError (401), same message for both
    - deactivated account             → AuthorizationError (403)
    - email already registered        → DuplicateError (400), checked up front
      and again by the unique index
"""

import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.config import Settings
from smartnotes.constants import UserRole
from smartnotes.exceptions import AuthError, AuthorizationError, DuplicateError
from smartnotes.models.bookmark import Bookmark
from smartnotes.models.note import Note
from smartnotes.models.user import User
from smartnotes.schemas.user import (
    AuthResult,
    LoginRequest,
    ProfileOut,
    ProfileUpdate,
    RegisterRequest,
)
from smartnotes.security import create_access_token, decode_token, hash_password, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, settings: Settings):
        self.settings = settings

    async def _email_taken(self, db: AsyncSession, email: str) -> bool:
        result = await db.execute(select(User.id).where(User.email == email))
        return result.first() is not None

    async def profile(self, db: AsyncSession, user: User) -> ProfileOut:
        """Public profile plus the ids of the user's uploaded and bookmarked notes."""
        note_ids = await db.execute(
            select(Note.id)
            .where(Note.uploaded_by_id == user.id)
            .order_by(Note.created_at.desc())
        )
        bookmark_ids = await db.execute(
            select(Bookmark.note_id)
            .where(Bookmark.user_id == user.id)
            .order_by(Bookmark.created_at.desc())
        )
        return ProfileOut.from_user(
            user,
            uploaded_notes=list(note_ids.scalars().all()),
            bookmarks=list(bookmark_ids.scalars().all()),
        )

    async def register(self, db: AsyncSession, data: RegisterRequest) -> AuthResult:
        """
        Create a student account and sign it in.

        The role is always `student`; admins are provisioned out of band.
        """
        if await self._email_taken(db, data.email):
            raise DuplicateError(
                message="User already exists with this email",
                context={"email": data.email},
            )

        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=UserRole.STUDENT,
            branch=data.branch,
            semester=data.semester,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise DuplicateError(
                message="User already exists with this email",
                context={"email": data.email},
            )

        logger.info("Registered user %s", user.id)
        token = create_access_token(self.settings, user.id, user.role)
        return AuthResult(token=token, user=await self.profile(db, user))

    async def login(self, db: AsyncSession, data: LoginRequest) -> AuthResult:
        result = await db.execute(select(User).where(User.email == data.email))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(data.password, user.password_hash):
            raise AuthError(message="Invalid email or password")

        if not user.is_active:
            raise AuthorizationError(
                message="Your account has been deactivated",
                context={"user_id": str(user.id)},
            )

        logger.info("User %s logged in", user.id)
        token = create_access_token(self.settings, user.id, user.role)
        return AuthResult(token=token, user=await self.profile(db, user))

    async def resolve_identity(self, db: AsyncSession, token: str) -> User:
        """
        Turn a bearer token into the active User it names.

        Raises:
            AuthError: invalid/expired token or the user no longer exists
            AuthorizationError: the user is deactivated
        """
        claims = decode_token(self.settings, token)
        user_id: uuid.UUID = claims["sub"]

        user = await db.get(User, user_id)
        if user is None:
            raise AuthError(context={"reason": "unknown_user"})
        if not user.is_active:
            raise AuthorizationError(
                message="Your account has been deactivated",
                context={"user_id": str(user_id)},
            )
        return user

    async def update_profile(self, db: AsyncSession, user: User, patch: ProfileUpdate) -> ProfileOut:
        changes = patch.model_dump(exclude_unset=True)
        # name and avatar are required columns; an explicit null leaves them unchanged
        for field in ("name", "avatar"):
            if changes.get(field, "") is None:
                changes.pop(field)

        for field, value in changes.items():
            setattr(user, field, value)
        await db.commit()

        logger.info("Updated profile of user %s: %s", user.id, sorted(changes))
        return await self.profile(db, user)
