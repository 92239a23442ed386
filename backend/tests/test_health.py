"""
SmartNotesX Backend — Health, Middleware & Error Envelope Tests
=================================================================

What we test:
    ✅ Banner and /health report
    ✅ X-Request-ID generated or echoed
    ✅ Unknown routes answer with the error envelope
    ✅ Rate limiter answers 429 with Retry-After once the window is full
    ✅ Exception → status mapping
"""

import pytest
from httpx import ASGITransport, AsyncClient

from smartnotes.exceptions import (
    AuthError,
    BusinessRuleError,
    DuplicateError,
    NotFoundError,
    RateLimitExceededError,
    UploadError,
    ValidationError,
)
from smartnotes.main import create_app, status_code_for


class TestHealth:
    @pytest.mark.asyncio
    async def test_banner(self, client):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "SmartNotesX API is running"}

    @pytest.mark.asyncio
    async def test_health_reports_dependencies(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == "healthy"
        assert data["database"] == "connected"
        assert data["mediaStore"] == "available"
        assert data["version"] == "1.0.0"
        assert data["uptimeSeconds"] >= 0


class TestMiddleware:
    @pytest.mark.asyncio
    async def test_request_id_generated(self, client):
        response = await client.get("/")
        assert len(response.headers["x-request-id"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client):
        response = await client.get("/", headers={"X-Request-ID": "trace-abc"})
        assert response.headers["x-request-id"] == "trace-abc"

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        response = await client.get("/api/nothing-here")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Route not found"}

    @pytest.mark.asyncio
    async def test_rate_limit(self, settings):
        limited = settings.model_copy(
            update={"rate_limit_enabled": True, "rate_limit_requests": 10, "rate_limit_window": 60}
        )
        app = create_app(limited)
        await app.state.database.create_all()

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
            statuses = [(await c.get("/api/notes")).status_code for _ in range(10)]
            blocked = await c.get("/api/notes")
            # Health probes are never limited
            health = await c.get("/health")

        await app.state.database.dispose()
        assert statuses == [200] * 10
        assert blocked.status_code == 429
        assert blocked.json()["success"] is False
        assert int(blocked.headers["retry-after"]) > 0
        assert health.status_code == 200


class TestStatusMapping:
    @pytest.mark.parametrize(
        "exc, expected",
        [
            (ValidationError(), 400),
            (DuplicateError(), 400),
            (BusinessRuleError(), 400),
            (AuthError(), 401),
            (NotFoundError(resource="Note"), 404),
            (RateLimitExceededError(retry_after=5), 429),
            (UploadError(), 500),
        ],
    )
    def test_status_code_for(self, exc, expected):
        assert status_code_for(exc) == expected
