"""
SmartNotesX Backend — Application Package
===========================================

What:  Student note-sharing and job-board API.
Who:   Served by uvicorn (`uvicorn smartnotes.main:app`), imported by Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP, auth dependencies, envelope
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Notes, jobs, bookmarks, admin, auth
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database / Media Store (I/O)      │  ← Async SQLAlchemy, Cloudinary/local files
    └─────────────────────────────────────┘

    Services receive their collaborators (media store, settings) once at
    startup and an AsyncSession per call. Routes never touch the ORM directly.
"""

__version__ = "1.0.0"
