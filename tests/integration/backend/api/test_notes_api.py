"""
Integration Tests for Notes API.

Tests the notes API endpoints with a real database.
"""

import pytest
from httpx import AsyncClient

NOTES = "/api/v1/notes"


async def _create(client: AsyncClient, headers: dict, **fields) -> dict:
    payload = {"title": "Untitled", "content": "Some content"}
    payload.update(fields)
    response = await client.post(NOTES, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestAuthentication:
    @pytest.mark.asyncio
    async def test_missing_token_is_rejected(self, client: AsyncClient, api):
        response = await client.get(NOTES)

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_garbage_token_is_rejected(self, client: AsyncClient, api):
        response = await client.get(NOTES, headers={"Authorization": "Bearer not-a-jwt"})

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")


class TestCreateNote:
    """Tests for POST /api/v1/notes."""

    @pytest.mark.asyncio
    async def test_create_note_success(self, client: AsyncClient, api, auth_headers):
        """Should create a note owned by the caller with defaults applied."""
        response = await client.post(
            NOTES,
            json={"title": "  Reading list  ", "content": "Books to read", "tags": ["books"]},
            headers=auth_headers,
        )

        data = api.assert_success(response, expected_status=201)["data"]
        assert data["title"] == "Reading list"
        assert data["author_id"] == "user-alice"
        assert data["category"] == "personal"
        assert data["color"] == "#ffffff"
        assert data["is_pinned"] is False
        assert data["read_count"] == 0
        assert data["excerpt"] == "Books to read"
        assert data["tags"] == ["books"]

    @pytest.mark.asyncio
    async def test_long_content_is_excerpted(self, client: AsyncClient, auth_headers):
        data = await _create(client, auth_headers, content="x" * 400)

        assert data["excerpt"] == "x" * 150 + "..."

    @pytest.mark.asyncio
    async def test_every_violation_is_reported(self, client: AsyncClient, api, auth_headers):
        """Should reject the request and name each invalid field."""
        response = await client.post(
            NOTES,
            json={"title": "", "content": "ok", "color": "red", "category": "misc"},
            headers=auth_headers,
        )

        data = api.assert_validation_error(response, field="title")
        fields = {v["field"] for v in data["error"]["details"]["validation_errors"]}
        assert {"title", "color", "category"} <= fields
        assert "title" in data["error"]["message"]
        assert "color" in data["error"]["message"]

    @pytest.mark.asyncio
    async def test_missing_content_fails(self, client: AsyncClient, api, auth_headers):
        response = await client.post(NOTES, json={"title": "No body"}, headers=auth_headers)

        api.assert_validation_error(response, field="content")


class TestGetNote:
    """Tests for GET /api/v1/notes/{id}."""

    @pytest.mark.asyncio
    async def test_each_fetch_counts_as_a_read(self, client: AsyncClient, api, auth_headers):
        note = await _create(client, auth_headers)

        await client.get(f"{NOTES}/{note['id']}", headers=auth_headers)
        response = await client.get(f"{NOTES}/{note['id']}", headers=auth_headers)

        data = api.assert_success(response)["data"]
        assert data["read_count"] == 2

    @pytest.mark.asyncio
    async def test_missing_note_is_not_found(self, client: AsyncClient, api, auth_headers):
        response = await client.get(f"{NOTES}/does-not-exist", headers=auth_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")

    @pytest.mark.asyncio
    async def test_other_users_note_is_not_found(
        self, client: AsyncClient, api, auth_headers, other_auth_headers
    ):
        note = await _create(client, auth_headers)

        for response in (
            await client.get(f"{NOTES}/{note['id']}", headers=other_auth_headers),
            await client.put(
                f"{NOTES}/{note['id']}", json={"title": "Stolen"}, headers=other_auth_headers
            ),
            await client.patch(f"{NOTES}/{note['id']}/pin", headers=other_auth_headers),
            await client.delete(f"{NOTES}/{note['id']}", headers=other_auth_headers),
        ):
            api.assert_error(response, 404, "RES_NOT_FOUND")

        response = await client.get(f"{NOTES}/{note['id']}", headers=auth_headers)
        assert response.json()["data"]["title"] == "Untitled"


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_partial_update(self, client: AsyncClient, api, auth_headers):
        note = await _create(client, auth_headers, tags=["a"])

        response = await client.put(
            f"{NOTES}/{note['id']}",
            json={"content": "Rewritten", "tags": ["b", "c"]},
            headers=auth_headers,
        )

        data = api.assert_success(response)["data"]
        assert data["title"] == "Untitled"
        assert data["content"] == "Rewritten"
        assert data["excerpt"] == "Rewritten"
        assert data["tags"] == ["b", "c"]

    @pytest.mark.asyncio
    async def test_toggle_pin_twice(self, client: AsyncClient, auth_headers):
        note = await _create(client, auth_headers)

        first = await client.patch(f"{NOTES}/{note['id']}/pin", headers=auth_headers)
        second = await client.patch(f"{NOTES}/{note['id']}/pin", headers=auth_headers)

        assert first.json()["data"]["is_pinned"] is True
        assert second.json()["data"]["is_pinned"] is False

    @pytest.mark.asyncio
    async def test_delete_then_not_found(self, client: AsyncClient, api, auth_headers):
        note = await _create(client, auth_headers)

        response = await client.delete(f"{NOTES}/{note['id']}", headers=auth_headers)

        data = api.assert_success(response)["data"]
        assert data == {"id": note["id"], "deleted": True}
        again = await client.get(f"{NOTES}/{note['id']}", headers=auth_headers)
        api.assert_error(again, 404)


class TestListNotes:
    """Tests for GET /api/v1/notes."""

    @pytest.mark.asyncio
    async def test_only_own_notes_are_listed(
        self, client: AsyncClient, api, auth_headers, other_auth_headers
    ):
        await _create(client, auth_headers, title="Mine")
        await _create(client, other_auth_headers, title="Theirs")

        data = api.assert_success(await client.get(NOTES, headers=auth_headers))

        assert [n["title"] for n in data["data"]] == ["Mine"]
        assert data["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_pinned_notes_come_first(self, client: AsyncClient, auth_headers):
        await _create(client, auth_headers, title="Pinned", is_pinned=True)
        await _create(client, auth_headers, title="Newest")

        response = await client.get(NOTES, headers=auth_headers)

        assert [n["title"] for n in response.json()["data"]] == ["Pinned", "Newest"]

    @pytest.mark.asyncio
    async def test_tags_match_any(self, client: AsyncClient, auth_headers):
        await _create(client, auth_headers, title="Work", tags=["work"])
        await _create(client, auth_headers, title="Home", tags=["homework"])
        await _create(client, auth_headers, title="Idea", tags=["idea"])

        response = await client.get(
            NOTES, params={"tags": "work, idea", "sort_order": "asc"}, headers=auth_headers
        )

        assert [n["title"] for n in response.json()["data"]] == ["Work", "Idea"]

    @pytest.mark.asyncio
    async def test_search_with_negation(self, client: AsyncClient, auth_headers):
        await _create(client, auth_headers, title="Python tips", content="decorators")
        await _create(client, auth_headers, title="Python jobs", content="recruiters")
        await _create(client, auth_headers, title="Cooking", content="pasta")

        response = await client.get(
            NOTES, params={"search": "python -recruiters"}, headers=auth_headers
        )

        assert [n["title"] for n in response.json()["data"]] == ["Python tips"]

    @pytest.mark.asyncio
    async def test_category_filter(self, client: AsyncClient, auth_headers):
        await _create(client, auth_headers, title="Standup", category="work")
        await _create(client, auth_headers, title="Diary", category="journal")

        response = await client.get(NOTES, params={"category": "work"}, headers=auth_headers)

        assert [n["title"] for n in response.json()["data"]] == ["Standup"]

    @pytest.mark.asyncio
    async def test_pagination(self, client: AsyncClient, api, auth_headers):
        for i in range(5):
            await _create(client, auth_headers, title=f"Note {i}")

        response = await client.get(
            NOTES,
            params={"page": 2, "limit": 2, "sort_by": "title", "sort_order": "asc"},
            headers=auth_headers,
        )

        data = api.assert_success(response)
        assert [n["title"] for n in data["data"]] == ["Note 2", "Note 3"]
        assert data["pagination"] == {
            "total": 5,
            "limit": 2,
            "page": 2,
            "total_pages": 3,
            "has_more": True,
        }

    @pytest.mark.asyncio
    async def test_unknown_sort_column_is_bad_request(self, client: AsyncClient, api, auth_headers):
        response = await client.get(NOTES, params={"sort_by": "nope"}, headers=auth_headers)

        api.assert_error(response, 400, "REQ_BAD_REQUEST")

    @pytest.mark.asyncio
    async def test_limit_above_maximum_is_rejected(self, client: AsyncClient, api, auth_headers):
        response = await client.get(NOTES, params={"limit": 101}, headers=auth_headers)

        api.assert_validation_error(response, field="limit")


class TestNoteSummary:
    @pytest.mark.asyncio
    async def test_summary_counts(self, client: AsyncClient, api, auth_headers):
        await _create(client, auth_headers, category="work", tags=["a", "b"], is_pinned=True)
        await _create(client, auth_headers, category="work", tags=["a"], is_public=True)
        await _create(client, auth_headers, category="ideas")

        response = await client.get(f"{NOTES}/stats/summary", headers=auth_headers)

        data = api.assert_success(response)["data"]
        assert data["total_notes"] == 3
        assert data["pinned_notes"] == 1
        assert data["public_notes"] == 1
        assert data["category_stats"][0] == {"key": "work", "count": 2}
        assert data["tag_stats"][0] == {"key": "a", "count": 2}
