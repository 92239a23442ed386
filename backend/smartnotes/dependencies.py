"""
SmartNotesX Backend — FastAPI Dependencies
============================================

What:  Request-scoped building blocks shared by the routers.
    - get_services:      the ServiceContainer built in create_app()
    - get_current_user:  Bearer token → active User (AuthError / AuthorizationError)
    - require_admin:     get_current_user + admin role check
    - validated_upload:  reads the multipart `file` with MIME and size limits

Usage in a route:
    @router.post("/notes")
    async def upload(
        user: User = Depends(get_current_user),
        upload: Optional[UploadedFile] = Depends(validated_upload),
        ...
    ):
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, File, Request, UploadFile
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from smartnotes.config import Settings
from smartnotes.constants import ALLOWED_FILE_TYPES
from smartnotes.database import get_db_session
from smartnotes.exceptions import AuthError, AuthorizationError, ValidationError
from smartnotes.models.user import User
from smartnotes.services import ServiceContainer

# auto_error=False: a missing header must produce our 401 envelope, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
    services: ServiceContainer = Depends(get_services),
) -> User:
    if credentials is None or not credentials.credentials:
        raise AuthError(message="Not authorized, no token")
    return await services.auth.resolve_identity(db, credentials.credentials)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise AuthorizationError(
            message="Access denied. Admin privileges required.",
            context={"user_id": str(user.id)},
        )
    return user


# ── Uploads ───────────────────────────────────────────────────────────────
@dataclass
class UploadedFile:
    filename: str
    content_type: str
    content: bytes


async def validated_upload(
    settings: Settings = Depends(get_settings_dep),
    file: Optional[UploadFile] = File(default=None),
) -> Optional[UploadedFile]:
    """
    Read the uploaded file, enforcing the allowed MIME types and size limit.

    Returns None when no file part was sent; whether that is acceptable is
    the service's decision. At most max_file_size + 1 bytes are read so an
    oversized upload is detected without buffering all of it.

    Raises:
        ValidationError: disallowed MIME type or file too large
    """
    if file is None or not file.filename:
        return None

    content_type = (file.content_type or "").lower()
    if content_type not in ALLOWED_FILE_TYPES:
        raise ValidationError(
            message="Invalid file type. Only PDF, DOCX, DOC, JPG, and PNG are allowed.",
            field="file",
            context={"content_type": content_type},
        )

    content = await file.read(settings.max_file_size + 1)
    if len(content) > settings.max_file_size:
        max_mb = settings.max_file_size // (1024 * 1024)
        raise ValidationError(
            message=f"File size too large. Maximum size is {max_mb}MB.",
            field="file",
            context={"max_size": settings.max_file_size},
        )

    return UploadedFile(filename=file.filename, content_type=content_type, content=content)
