# Services package init
"""
SmartNotesX Backend — Services Layer
======================================

What:  Business logic between routes (HTTP) and the database.
How:   Each service is built once in `create_app()` with its collaborators
       and receives an AsyncSession per call. Routes reach them through
       `app.state.services`.

Service Inventory:
    - MediaStore (abstract): where note files live (Cloudinary or local disk)
    - AuthService: register/login/token resolution/profile
    - NoteService: upload, browse, counters, owner-or-admin update/delete
    - JobService: postings and applications
    - BookmarkService: saved notes
    - AdminService: dashboard aggregates and user management
"""

from dataclasses import dataclass

from smartnotes.config import Settings
from smartnotes.services.admin_service import AdminService
from smartnotes.services.auth_service import AuthService
from smartnotes.services.bookmark_service import BookmarkService
from smartnotes.services.job_service import JobService
from smartnotes.services.media_store import MediaStore
from smartnotes.services.note_service import NoteService


@dataclass
class ServiceContainer:
    auth: AuthService
    notes: NoteService
    jobs: JobService
    bookmarks: BookmarkService
    admin: AdminService

    @classmethod
    def build(cls, settings: Settings, media_store: MediaStore) -> "ServiceContainer":
        return cls(
            auth=AuthService(settings),
            notes=NoteService(media_store),
            jobs=JobService(),
            bookmarks=BookmarkService(),
            admin=AdminService(media_store),
        )
