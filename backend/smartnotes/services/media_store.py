"""
SmartNotesX Backend — Media Store
===================================

What:  Where uploaded note files live. One abstract interface, two backends.
Why:   NoteService and AdminService only need "put these bytes somewhere
       public" and "delete what you put there"; the backend is chosen by
       configuration (MEDIA_BACKEND).
How:
    - CloudinaryMediaStore: cloudinary.uploader upload/destroy, run in the
      threadpool
    - LocalMediaStore: date-organized files under STORAGE_ROOT, served back
      by GET /api/files/{path}

Contract:
    upload() returns StoredMedia(url, public_id, resource_type) or raises
    UploadError. delete() returns None or raises UploadError. Neither retries.

Resource types:
    image/* MIME types are stored as "image", everything else (PDF, DOC,
    DOCX) as "raw". Deletion must use the same resource type as the upload,
    so it is re-derived from the MIME type stored on the note.
"""

import io
import logging
import os
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import aiofiles
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError
from starlette.concurrency import run_in_threadpool

from smartnotes.config import Settings
from smartnotes.constants import MIME_EXTENSIONS
from smartnotes.exceptions import UploadError

logger = logging.getLogger(__name__)


def resource_type_for(mime_type: str) -> str:
    return "image" if mime_type.startswith("image/") else "raw"


@dataclass(frozen=True)
class StoredMedia:
    url: str
    public_id: str
    resource_type: str


class MediaStore(ABC):
    """Abstract interface for storing note files."""

    @abstractmethod
    async def upload(self, content: bytes, filename: str, mime_type: str) -> StoredMedia:
        """
        Store `content` and return where it can be fetched.

        Raises:
            UploadError: the backend rejected or failed the upload
        """
        ...

    @abstractmethod
    async def delete(self, public_id: str, resource_type: str) -> None:
        """
        Remove a stored file. Deleting something already gone is not an error.

        Raises:
            UploadError: the backend could not be reached or refused
        """
        ...

    async def health_check(self) -> bool:
        return True

    async def aclose(self) -> None:
        """Release network clients or handles (application shutdown)."""
        return None


# ══════════════════════════════════════════════════════════════════════════
# Cloudinary
# ══════════════════════════════════════════════════════════════════════════


class CloudinaryMediaStore(MediaStore):
    """
    Cloudinary through its official SDK.

    The SDK is synchronous, so every call runs in Starlette's threadpool.
    Credentials are passed per call, never through the global
    cloudinary.config().
    """

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "study-hub-notes",
        timeout: float = 30.0,
    ):
        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "CloudinaryMediaStore":
        return cls(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            folder=settings.cloudinary_folder,
            timeout=settings.media_timeout_seconds,
        )

    def _options(self, **options) -> Dict[str, Any]:
        return dict(
            options,
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            timeout=self.timeout,
        )

    async def _call(self, action: str, func, *args, **options) -> dict:
        try:
            return await run_in_threadpool(func, *args, **self._options(**options))
        except CloudinaryError as e:
            logger.error("Cloudinary %s failed: %s", action, e)
            raise UploadError(
                message="File storage service rejected the request.",
                context={"action": action, "error": type(e).__name__},
            )

    async def upload(self, content: bytes, filename: str, mime_type: str) -> StoredMedia:
        resource_type = resource_type_for(mime_type)
        buffer = io.BytesIO(content)
        buffer.name = filename or "upload"

        body = await self._call(
            "upload",
            cloudinary.uploader.upload,
            buffer,
            folder=self.folder,
            resource_type=resource_type,
        )

        if "secure_url" not in body or "public_id" not in body:
            raise UploadError(
                message="File storage service returned an incomplete response.",
                context={"keys": sorted(body)},
            )

        logger.info(
            "Uploaded %s to Cloudinary as %s (%d bytes)",
            filename,
            body["public_id"],
            len(content),
        )
        return StoredMedia(
            url=body["secure_url"],
            public_id=body["public_id"],
            resource_type=body.get("resource_type", resource_type),
        )

    async def delete(self, public_id: str, resource_type: str) -> None:
        body = await self._call(
            "destroy",
            cloudinary.uploader.destroy,
            public_id,
            resource_type=resource_type,
        )
        result = body.get("result")
        if result not in ("ok", "not found"):
            raise UploadError(
                message="File storage service could not delete the file.",
                context={"public_id": public_id, "result": result},
            )
        logger.info("Deleted %s from Cloudinary (%s)", public_id, result)


# ══════════════════════════════════════════════════════════════════════════
# Local Disk
# ══════════════════════════════════════════════════════════════════════════


class LocalMediaStore(MediaStore):
    """
    Files on local disk, for development and tests.

    Directory Structure:
        storage/
        └── 2026/
            └── 10/
                └── 19/
                    ├── a1b2c3d4-....pdf
                    └── e5f6g7h8-....png

    The public_id is the path relative to the storage root; the URL points
    at GET /api/files/{public_id} on this server.
    """

    def __init__(self, storage_root: str, public_base_url: str):
        self.storage_root = Path(storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        self.public_base_url = public_base_url.rstrip("/")
        logger.info("LocalMediaStore initialized with storage_root=%s", self.storage_root)

    @classmethod
    def from_settings(cls, settings: Settings) -> "LocalMediaStore":
        return cls(settings.storage_root, settings.public_base_url)

    def _generate_storage_path(self, extension: str) -> Tuple[Path, str]:
        date_dir = datetime.now(timezone.utc).strftime("%Y/%m/%d")
        relative_path = f"{date_dir}/{uuid.uuid4()}{extension}"
        return self.storage_root / relative_path, relative_path

    def resolve(self, relative_path: str) -> Optional[Path]:
        """Absolute path for a stored file, or None if it escapes the root."""
        candidate = (self.storage_root / relative_path).resolve()
        if not candidate.is_relative_to(self.storage_root):
            return None
        return candidate

    async def upload(self, content: bytes, filename: str, mime_type: str) -> StoredMedia:
        extension = MIME_EXTENSIONS.get(mime_type) or Path(filename or "").suffix.lower()
        absolute_path, relative_path = self._generate_storage_path(extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, e)
            raise UploadError(
                message="Failed to save the uploaded file. Please try again.",
                context={"path": relative_path, "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", relative_path, len(content))
        return StoredMedia(
            url=f"{self.public_base_url}/api/files/{relative_path}",
            public_id=relative_path,
            resource_type=resource_type_for(mime_type),
        )

    async def delete(self, public_id: str, resource_type: str) -> None:
        path = self.resolve(public_id)
        if path is None:
            raise UploadError(
                message="Invalid stored file reference.",
                context={"public_id": public_id},
            )
        try:
            os.remove(path)
            logger.info("Deleted stored file: %s", public_id)
        except FileNotFoundError:
            logger.debug("Delete: file already gone: %s", public_id)
        except OSError as e:
            logger.error("Failed to delete %s: %s", public_id, e)
            raise UploadError(
                message="Failed to delete the stored file.",
                context={"public_id": public_id, "os_error": str(e)},
            )

    async def health_check(self) -> bool:
        return self.storage_root.is_dir()


def build_media_store(settings: Settings) -> MediaStore:
    if settings.media_backend == "local":
        return LocalMediaStore.from_settings(settings)
    return CloudinaryMediaStore.from_settings(settings)
