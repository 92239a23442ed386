"""
SmartNotesX Backend — Stored File Serving
===========================================

What:  `GET /api/files/{path}` streams files written by LocalMediaStore.
Why:   With MEDIA_BACKEND=local the note's fileUrl points here. With the
       Cloudinary backend files are served by Cloudinary and this route
       always answers 404.

Security:
    Paths are resolved against the storage root and anything escaping it
    (../) is rejected before touching the filesystem.
"""

import mimetypes

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from smartnotes.exceptions import NotFoundError, ValidationError
from smartnotes.services.media_store import LocalMediaStore

router = APIRouter(prefix="/api", tags=["Files"])


@router.get("/files/{file_path:path}", summary="Serve a locally stored note file")
async def serve_file(file_path: str, request: Request) -> FileResponse:
    store = request.app.state.media_store
    if not isinstance(store, LocalMediaStore):
        raise NotFoundError(resource="File", resource_id=file_path)

    full_path = store.resolve(file_path)
    if full_path is None:
        raise ValidationError(message="Invalid file path", field="path")
    if not full_path.is_file():
        raise NotFoundError(resource="File", resource_id=file_path)

    media_type, _ = mimetypes.guess_type(full_path.name)
    return FileResponse(
        path=str(full_path),
        media_type=media_type or "application/octet-stream",
        headers={"Cache-Control": "public, max-age=86400"},
    )
