"""
SmartNotesX Backend — Auth Endpoint Tests
===========================================

What we test:
    ✅ Registration returns a token and a student profile without the hash
    ✅ Duplicate and invalid registrations are rejected with 400
    ✅ Login: success, wrong password, unknown email, deactivated account
    ✅ /me needs a valid bearer token
    ✅ Profile updates apply only the fields sent
"""

import pytest

from tests.conftest import auth_headers, register


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_returns_token_and_profile(self, client):
        response = await client.post(
            "/api/auth/register",
            json={
                "name": "  Meera Shah ",
                "email": "Meera@Example.COM",
                "password": "secret123",
                "branch": "ECE",
                "semester": 4,
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "User registered successfully"

        user = body["data"]["user"]
        assert body["data"]["token"]
        assert user["name"] == "Meera Shah"
        assert user["email"] == "meera@example.com"
        assert user["role"] == "student"
        assert user["isActive"] is True
        assert user["uploadedNotes"] == []
        assert user["bookmarks"] == []
        assert "password" not in user
        assert "passwordHash" not in user

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, client):
        await register(client, "First User", "dup@example.com")

        response = await client.post(
            "/api/auth/register",
            json={"name": "Second User", "email": "DUP@example.com", "password": "another1"},
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "User already exists with this email",
        }

    @pytest.mark.asyncio
    async def test_register_validation_errors_list_fields(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"name": "A", "email": "not-an-email", "password": "123"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        fields = {error["field"] for error in body["errors"]}
        assert {"name", "email", "password"} <= fields

    @pytest.mark.asyncio
    async def test_register_rejects_semester_out_of_range(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"name": "Nine", "email": "nine@example.com", "password": "secret123", "semester": 9},
        )
        assert response.status_code == 400


class TestLogin:
    @pytest.mark.asyncio
    async def test_login_success(self, client):
        await register(client, "Login User", "login@example.com", password="secret123")

        response = await client.post(
            "/api/auth/login",
            json={"email": "LOGIN@example.com", "password": "secret123"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["data"]["user"]["email"] == "login@example.com"

        me = await client.get("/api/auth/me", headers=auth_headers(body["data"]["token"]))
        assert me.status_code == 200

    @pytest.mark.asyncio
    async def test_login_wrong_password(self, client):
        await register(client, "Login User", "login@example.com", password="secret123")

        response = await client.post(
            "/api/auth/login",
            json={"email": "login@example.com", "password": "wrong-pass"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_unknown_email_same_message(self, client):
        response = await client.post(
            "/api/auth/login",
            json={"email": "nobody@example.com", "password": "whatever"},
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid email or password"

    @pytest.mark.asyncio
    async def test_login_deactivated_account(self, client, student, admin):
        user, _ = student
        _, admin_headers = admin
        toggled = await client.patch(
            f"/api/admin/users/{user['id']}/toggle-status",
            headers=admin_headers,
        )
        assert toggled.status_code == 200

        response = await client.post(
            "/api/auth/login",
            json={"email": "asha@example.com", "password": "secret123"},
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Your account has been deactivated"


class TestCurrentUser:
    @pytest.mark.asyncio
    async def test_me_without_token(self, client):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, no token"
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_me_with_invalid_token(self, client):
        response = await client.get("/api/auth/me", headers=auth_headers("garbage"))
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_me_returns_profile_with_note_ids(self, client, student, uploaded_note):
        user, headers = student

        response = await client.get("/api/auth/me", headers=headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == user["id"]
        assert data["uploadedNotes"] == [uploaded_note["id"]]

    @pytest.mark.asyncio
    async def test_deactivated_user_token_is_refused(self, client, student, admin):
        user, headers = student
        _, admin_headers = admin
        await client.patch(f"/api/admin/users/{user['id']}/toggle-status", headers=admin_headers)

        response = await client.get("/api/auth/me", headers=headers)

        assert response.status_code == 403


class TestProfileUpdate:
    @pytest.mark.asyncio
    async def test_partial_update(self, client, student):
        _, headers = student

        response = await client.put(
            "/api/auth/profile",
            json={"semester": 6, "avatar": "https://cdn.example/me.png"},
            headers=headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile updated successfully"
        data = body["data"]
        assert data["semester"] == 6
        assert data["avatar"] == "https://cdn.example/me.png"
        # Untouched fields keep their values
        assert data["name"] == "Asha Verma"
        assert data["branch"] == "CSE"

    @pytest.mark.asyncio
    async def test_update_rejects_invalid_semester(self, client, student):
        _, headers = student
        response = await client.put("/api/auth/profile", json={"semester": 0}, headers=headers)
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_requires_auth(self, client):
        response = await client.put("/api/auth/profile", json={"name": "Someone"})
        assert response.status_code == 401
