"""
SmartNotesX Backend — Database Session Management
===================================================

What:  Async SQLAlchemy engine/session factory wrapped in a `Database` handle,
       the declarative base, and the per-request session dependency.
How:   `create_app()` builds one `Database` from settings and stores it on
       `app.state.database`. `get_db_session` opens a session per request that
       commits on success and rolls back on error.

Connection Pooling Strategy:
    PostgreSQL (asyncpg): pool_size / max_overflow / pre_ping from settings,
    connections recycled hourly.
    SQLite (aiosqlite, tests): a single StaticPool connection so an in-memory
    database survives across sessions.
"""

from datetime import datetime, timezone
from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from smartnotes.config import Settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares one metadata object, which Alembic reads for autogenerate.
    """
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC.

    SQLite hands back naive datetimes; everything stored by this app is UTC,
    so a naive value is interpreted as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Database:
    """
    Persistence handle: owns the engine and the session factory.

    expire_on_commit=False keeps attributes readable after commit, which the
    services rely on when building responses.
    """

    def __init__(self, url: str, *, echo: bool = False, **pool_options):
        if url.startswith("sqlite"):
            self.engine: AsyncEngine = create_async_engine(
                url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        else:
            self.engine = create_async_engine(
                url,
                echo=echo,
                pool_recycle=3600,
                **pool_options,
            )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            echo=settings.log_level == "DEBUG",
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
        )

    async def create_all(self) -> None:
        """Create every table registered on Base (tests and local bootstrap)."""
        # Registers all models on Base.metadata
        import smartnotes.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def dispose(self) -> None:
        """Close every pooled connection (application shutdown)."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Creates a new session from the app's Database handle
        2. Yields it to the route handler
        3. On success: commits anything the services left pending
        4. On error: rolls back, then re-raises for the exception handlers
        5. Always: closes the session (returns connection to pool)

    Example usage in a route:
        @router.get("/notes")
        async def list_notes(db: AsyncSession = Depends(get_db_session)):
            ...
    """
    database: Database = request.app.state.database
    async with database.session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
