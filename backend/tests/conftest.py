"""
SmartNotesX Backend — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets a fresh application built by `create_app()` on an
       in-memory SQLite database (aiosqlite) with the local media store
       writing under pytest's tmp_path. Requests go through httpx's
       ASGITransport, so no server is started.

Fixture Hierarchy:
    settings        Settings for an isolated, rate-limit-free app
    app             create_app(settings) with all tables created
    client          httpx.AsyncClient bound to the app
    student / other_student / admin
                    (user, auth headers) pairs; the admin is written
                    straight to the database because registration only
                    creates students
    uploaded_note   a note uploaded by `student` through the API
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from smartnotes.config import Settings
from smartnotes.constants import UserRole
from smartnotes.exceptions import UploadError
from smartnotes.main import create_app
from smartnotes.models.user import User
from smartnotes.security import create_access_token, hash_password
from smartnotes.services.media_store import MediaStore, StoredMedia

PDF_BYTES = b"%PDF-1.4\n1 0 obj<<>>endobj\ntrailer<<>>\n%%EOF\n"
PDF_MIME = "application/pdf"


class FailingMediaStore(MediaStore):
    """Media store double whose every call fails like an unreachable backend."""

    def __init__(self):
        self.upload_calls = 0
        self.delete_calls = 0

    async def upload(self, content: bytes, filename: str, mime_type: str) -> StoredMedia:
        self.upload_calls += 1
        raise UploadError(message="File storage service is unreachable. Please try again.")

    async def delete(self, public_id: str, resource_type: str) -> None:
        self.delete_calls += 1
        raise UploadError(message="File storage service is unreachable. Please try again.")


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def future(days: int = 30) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def job_payload(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "title": "Backend Intern",
        "company": "Acme Labs",
        "description": "Build and maintain internal APIs with Python and PostgreSQL.",
        "type": "Internship",
        "location": "Bengaluru",
        "locationType": "Hybrid",
        "stipend": {"amount": 25000, "currency": "INR", "duration": "per month"},
        "skills": ["Python", "SQL"],
        "eligibility": {"branches": ["CSE", "IT"], "minCGPA": 7.5, "graduationYear": [2027]},
        "applicationDeadline": future(),
        "applyLink": "https://acme.example/careers/backend-intern",
    }
    payload.update(overrides)
    return payload


# ══════════════════════════════════════════════════════════════════════════
# Application Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite://",
        jwt_secret_key="test-secret-key",
        media_backend="local",
        storage_root=str(tmp_path / "storage"),
        public_base_url="http://testserver",
        rate_limit_enabled=False,
        log_level="WARNING",
        cors_origins="http://localhost:5173",
    )


@pytest_asyncio.fixture
async def app(settings):
    application = create_app(settings)
    await application.state.database.create_all()
    yield application
    await application.state.database.dispose()


@pytest_asyncio.fixture
async def client(app):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Usage:
        async def test_health(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# ══════════════════════════════════════════════════════════════════════════
# Users
# ══════════════════════════════════════════════════════════════════════════


async def register(client: AsyncClient, name: str, email: str, password: str = "secret123", **extra) -> Dict[str, Any]:
    response = await client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password, **extra},
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


@pytest_asyncio.fixture
async def student(client) -> Tuple[Dict[str, Any], Dict[str, str]]:
    data = await register(client, "Asha Verma", "asha@example.com", branch="CSE", semester=5)
    return data["user"], auth_headers(data["token"])


@pytest_asyncio.fixture
async def other_student(client) -> Tuple[Dict[str, Any], Dict[str, str]]:
    data = await register(client, "Ravi Kumar", "ravi@example.com", branch="IT", semester=3)
    return data["user"], auth_headers(data["token"])


@pytest_asyncio.fixture
async def admin(app) -> Tuple[User, Dict[str, str]]:
    async with app.state.database.session_factory() as session:
        user = User(
            name="Site Admin",
            email="admin@example.com",
            password_hash=hash_password("admin-pass"),
            role=UserRole.ADMIN,
        )
        session.add(user)
        await session.commit()

    token = create_access_token(app.state.settings, user.id, user.role)
    return user, auth_headers(token)


# ══════════════════════════════════════════════════════════════════════════
# Notes
# ══════════════════════════════════════════════════════════════════════════


async def upload_note(
    client: AsyncClient,
    headers: Dict[str, str],
    content: bytes = PDF_BYTES,
    mime_type: str = PDF_MIME,
    filename: str = "dbms-unit1.pdf",
    **fields: Any,
):
    form = {
        "title": "DBMS Unit 1",
        "subject": "Database Management Systems",
        "semester": "5",
        "branch": "CSE",
        "description": "Relational model and SQL basics",
        "tags": "dbms, sql",
    }
    form.update({key: str(value) for key, value in fields.items()})
    return await client.post(
        "/api/notes",
        data=form,
        files={"file": (filename, content, mime_type)},
        headers=headers,
    )


@pytest_asyncio.fixture
async def uploaded_note(client, student) -> Dict[str, Any]:
    _, headers = student
    response = await upload_note(client, headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]
