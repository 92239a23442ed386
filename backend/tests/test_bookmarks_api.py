"""
SmartNotesX Backend — Bookmark Endpoint Tests
===============================================

What we test:
    ✅ Add → visible in the list, the check endpoint, the profile and the
       note's bookmarkedBy
    ✅ Duplicate add, unknown note, removing a missing bookmark
    ✅ Remove → gone everywhere
"""

import pytest

from tests.conftest import upload_note


class TestBookmarks:
    @pytest.mark.asyncio
    async def test_add_bookmark_updates_every_view(self, client, student, other_student, uploaded_note):
        user, headers = other_student
        note_id = uploaded_note["id"]

        response = await client.post(f"/api/bookmarks/{note_id}", headers=headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Bookmark added successfully"
        assert body["data"]["user"] == user["id"]
        assert body["data"]["note"] == note_id

        listing = (await client.get("/api/bookmarks", headers=headers)).json()["data"]
        assert [note["id"] for note in listing] == [note_id]

        check = (await client.get(f"/api/bookmarks/check/{note_id}", headers=headers)).json()["data"]
        assert check == {"isBookmarked": True}

        profile = (await client.get("/api/auth/me", headers=headers)).json()["data"]
        assert profile["bookmarks"] == [note_id]

        note = (await client.get(f"/api/notes/{note_id}")).json()["data"]
        assert note["bookmarkedBy"] == [user["id"]]

    @pytest.mark.asyncio
    async def test_check_is_false_for_other_users(self, client, student, other_student, uploaded_note):
        _, headers = student
        _, other_headers = other_student
        await client.post(f"/api/bookmarks/{uploaded_note['id']}", headers=other_headers)

        check = await client.get(f"/api/bookmarks/check/{uploaded_note['id']}", headers=headers)

        assert check.json()["data"] == {"isBookmarked": False}

    @pytest.mark.asyncio
    async def test_duplicate_bookmark_rejected(self, client, student, uploaded_note):
        _, headers = student
        await client.post(f"/api/bookmarks/{uploaded_note['id']}", headers=headers)

        response = await client.post(f"/api/bookmarks/{uploaded_note['id']}", headers=headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Note already bookmarked"

    @pytest.mark.asyncio
    async def test_bookmark_unknown_note(self, client, student):
        _, headers = student
        response = await client.post(
            "/api/bookmarks/00000000-0000-0000-0000-000000000000",
            headers=headers,
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Note not found"

    @pytest.mark.asyncio
    async def test_remove_bookmark(self, client, student, uploaded_note):
        user, headers = student
        note_id = uploaded_note["id"]
        await client.post(f"/api/bookmarks/{note_id}", headers=headers)

        response = await client.delete(f"/api/bookmarks/{note_id}", headers=headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Bookmark removed successfully"
        assert (await client.get("/api/bookmarks", headers=headers)).json()["data"] == []
        note = (await client.get(f"/api/notes/{note_id}")).json()["data"]
        assert user["id"] not in note["bookmarkedBy"]

    @pytest.mark.asyncio
    async def test_remove_missing_bookmark(self, client, student, uploaded_note):
        _, headers = student
        response = await client.delete(f"/api/bookmarks/{uploaded_note['id']}", headers=headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Bookmark not found"

    @pytest.mark.asyncio
    async def test_list_is_most_recent_first(self, client, student):
        _, headers = student
        first = (await upload_note(client, headers, title="First note")).json()["data"]
        second = (await upload_note(client, headers, title="Second note")).json()["data"]
        await client.post(f"/api/bookmarks/{second['id']}", headers=headers)
        await client.post(f"/api/bookmarks/{first['id']}", headers=headers)

        listing = (await client.get("/api/bookmarks", headers=headers)).json()["data"]

        assert [note["title"] for note in listing] == ["First note", "Second note"]

    @pytest.mark.asyncio
    async def test_bookmarks_require_auth(self, client):
        response = await client.get("/api/bookmarks")
        assert response.status_code == 401
