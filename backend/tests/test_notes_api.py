"""
Notes API: Endpoint Tests
===========================

What:  Exercises every route through the real application stack
       (middleware, exception handlers, service, SQLAlchemy) against a
       temporary SQLite database.
How:   HTTPX AsyncClient over ASGITransport (see conftest.test_client).
"""

from datetime import datetime
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from notes_api.database import engine
from notes_api.exceptions import DatabaseError, StoreUnavailableError


async def count_notes(client) -> int:
    response = await client.get("/api/notes", params={"limit": 100})
    return response.json()["results"]


class TestHealth:

    @pytest.mark.asyncio
    async def test_healthchecker_is_static(self, test_client):
        response = await test_client.get("/api/healthchecker")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["message"]

    @pytest.mark.asyncio
    async def test_readiness_reports_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "connected"

    @pytest.mark.asyncio
    async def test_readiness_unhealthy_when_database_down(self, test_client):
        with patch(
            "notes_api.routes.health.ping_database",
            AsyncMock(side_effect=ConnectionRefusedError("refused")),
        ):
            response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_returns_generated_fields(self, test_client):
        response = await test_client.post(
            "/api/notes", json={"title": "t1", "content": "first"}
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "success"
        note = body["data"]["note"]
        assert note["id"]
        assert note["title"] == "t1"
        assert note["content"] == "first"
        assert note["category"] == ""
        assert note["published"] is False
        assert note["created_at"] == note["updated_at"]

    @pytest.mark.asyncio
    async def test_create_keeps_category_and_published(self, note_factory):
        note = await note_factory("t1", category="work", published=True)

        assert note["category"] == "work"
        assert note["published"] is True

    @pytest.mark.asyncio
    async def test_duplicate_title_conflicts(self, test_client, note_factory):
        await note_factory("same")

        response = await test_client.post(
            "/api/notes", json={"title": "same", "content": "again"}
        )

        assert response.status_code == 409
        assert response.json() == {
            "status": "fail",
            "message": "Note with that title already exists",
            "request_id": response.headers["X-Request-ID"],
        }
        assert await count_notes(test_client) == 1

    @pytest.mark.asyncio
    async def test_missing_content_is_rejected(self, test_client):
        response = await test_client.post("/api/notes", json={"title": "t1"})

        assert response.status_code == 422
        body = response.json()
        assert body["status"] == "fail"
        assert any(err["loc"][-1] == "content" for err in body["details"])

    @pytest.mark.asyncio
    async def test_malformed_json_is_rejected(self, test_client):
        response = await test_client.post(
            "/api/notes",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422
        assert response.json()["status"] == "fail"

    @pytest.mark.asyncio
    async def test_failed_commit_reports_error_and_stores_nothing(self, test_client):
        failure = OperationalError("COMMIT", {}, Exception("disk I/O error"))
        with patch.object(AsyncSession, "commit", AsyncMock(side_effect=failure)):
            response = await test_client.post(
                "/api/notes", json={"title": "t1", "content": "first"}
            )

        assert response.status_code == 500
        assert response.json()["status"] == "error"
        assert "disk" not in response.json()["message"]
        assert await count_notes(test_client) == 0


class TestGetNote:

    @pytest.mark.asyncio
    async def test_get_returns_submitted_fields(self, test_client, note_factory):
        created = await note_factory("t1", content="hello")

        response = await test_client.get(f"/api/notes/{created['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["note"] == created

    @pytest.mark.asyncio
    async def test_get_missing_id(self, test_client):
        missing = str(uuid4())

        response = await test_client.get(f"/api/notes/{missing}")

        assert response.status_code == 404
        body = response.json()
        assert body["status"] == "fail"
        assert body["message"] == f"Note with ID: {missing} not found"

    @pytest.mark.asyncio
    async def test_get_malformed_id_is_not_found(self, test_client):
        response = await test_client.get("/api/notes/not-a-uuid")

        assert response.status_code == 404
        assert "not-a-uuid" in response.json()["message"]


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, test_client, note_factory):
        created = await note_factory("old", content="keep me", category="misc", published=True)

        response = await test_client.patch(
            f"/api/notes/{created['id']}", json={"title": "new"}
        )

        assert response.status_code == 200
        updated = response.json()["data"]["note"]
        assert updated["title"] == "new"
        assert updated["content"] == "keep me"
        assert updated["category"] == "misc"
        assert updated["published"] is True
        assert updated["created_at"] == created["created_at"]
        assert datetime.fromisoformat(updated["updated_at"]) > datetime.fromisoformat(
            created["updated_at"]
        )

    @pytest.mark.asyncio
    async def test_update_all_fields(self, test_client, note_factory):
        created = await note_factory("old")

        response = await test_client.patch(
            f"/api/notes/{created['id']}",
            json={"title": "t2", "content": "c2", "category": "work", "published": True},
        )

        updated = response.json()["data"]["note"]
        assert (updated["title"], updated["content"], updated["category"], updated["published"]) == (
            "t2", "c2", "work", True,
        )

    @pytest.mark.asyncio
    async def test_update_missing_id(self, test_client, note_factory):
        await note_factory("t1")
        missing = str(uuid4())

        response = await test_client.patch(f"/api/notes/{missing}", json={"title": "x"})

        assert response.status_code == 404
        assert response.json()["message"] == f"Note with ID: {missing} not found"
        listing = (await test_client.get("/api/notes")).json()
        assert [n["title"] for n in listing["notes"]] == ["t1"]

    @pytest.mark.asyncio
    async def test_update_to_taken_title_conflicts(self, test_client, note_factory):
        await note_factory("taken")
        other = await note_factory("free")

        response = await test_client.patch(f"/api/notes/{other['id']}", json={"title": "taken"})

        assert response.status_code == 409
        assert response.json()["status"] == "fail"

    @pytest.mark.asyncio
    async def test_stored_nulls_fall_back_to_defaults(self, test_client, note_factory):
        created = await note_factory("old", category="misc", published=True)
        async with engine.begin() as conn:
            await conn.execute(text("UPDATE notes SET category = NULL, published = NULL"))

        response = await test_client.patch(f"/api/notes/{created['id']}", json={"title": "new"})

        assert response.status_code == 200
        updated = response.json()["data"]["note"]
        assert updated["title"] == "new"
        assert updated["category"] == ""
        assert updated["published"] is False


class TestListNotes:

    @pytest.mark.asyncio
    async def test_list_paging(self, test_client, note_factory):
        for title in ("first", "second", "third"):
            await note_factory(title)

        response = await test_client.get("/api/notes", params={"limit": 1, "page": 2})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["results"] == 1
        assert body["notes"][0]["title"] == "second"

    @pytest.mark.asyncio
    async def test_page_below_one_is_first_page(self, test_client, note_factory):
        await note_factory("a")
        await note_factory("b")

        first = (await test_client.get("/api/notes", params={"page": 1, "limit": 1})).json()
        zero = (await test_client.get("/api/notes", params={"page": 0, "limit": 1})).json()
        negative = (await test_client.get("/api/notes", params={"page": -3, "limit": 1})).json()

        assert zero["notes"] == first["notes"] == negative["notes"]

    @pytest.mark.asyncio
    async def test_non_integer_page_is_rejected(self, test_client):
        response = await test_client.get("/api/notes", params={"page": "two"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_huge_page_is_empty(self, test_client, note_factory):
        await note_factory("a")

        response = await test_client.get("/api/notes", params={"page": 10**19, "limit": 10})

        assert response.status_code == 200
        assert response.json() == {"status": "success", "results": 0, "notes": []}

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client):
        response = await test_client.get("/api/notes")

        assert response.json() == {"status": "success", "results": 0, "notes": []}


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_then_get_is_not_found(self, test_client, note_factory):
        created = await note_factory("t1")

        response = await test_client.delete(f"/api/notes/{created['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert (await test_client.get(f"/api/notes/{created['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_missing_id(self, test_client, note_factory):
        await note_factory("t1")
        missing = str(uuid4())

        response = await test_client.delete(f"/api/notes/{missing}")

        assert response.status_code == 404
        assert response.json()["message"] == f"Note with ID: {missing} not found"
        assert await count_notes(test_client) == 1


class TestEndToEnd:

    @pytest.mark.asyncio
    async def test_create_list_delete_scenario(self, test_client, note_factory):
        note_a = await note_factory("t1")
        await note_factory("t2")

        listing = (await test_client.get("/api/notes")).json()
        assert [n["title"] for n in listing["notes"]] == ["t2", "t1"]

        assert (await test_client.delete(f"/api/notes/{note_a['id']}")).status_code == 204

        listing = (await test_client.get("/api/notes")).json()
        assert listing["results"] == 1
        assert [n["title"] for n in listing["notes"]] == ["t2"]


class TestErrorEnvelope:

    @pytest.mark.asyncio
    async def test_database_error_hides_detail(self, test_client):
        failure = DatabaseError(context={"detail": "relation \"notes\" does not exist"})
        with patch(
            "notes_api.routes.notes.note_service.list_notes",
            AsyncMock(side_effect=failure),
        ):
            response = await test_client.get("/api/notes")

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == "error"
        assert "relation" not in body["message"]

    @pytest.mark.asyncio
    async def test_store_unavailable_sets_retry_after(self, test_client):
        with patch(
            "notes_api.routes.notes.note_service.get_note",
            AsyncMock(side_effect=StoreUnavailableError(retry_after=7)),
        ):
            response = await test_client.get(f"/api/notes/{uuid4()}")

        assert response.status_code == 503
        assert response.headers["Retry-After"] == "7"
        assert response.json()["status"] == "error"

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id(self, test_client):
        from notes_api.main import app

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        with patch(
            "notes_api.routes.notes.note_service.list_notes",
            AsyncMock(side_effect=RuntimeError("boom")),
        ):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get("/api/notes", headers={"X-Request-ID": "rid500"})

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "rid500"
        body = response.json()
        assert body["status"] == "error"
        assert body["request_id"] == "rid500"
        assert "boom" not in body["message"]


class TestMiddleware:

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get("/api/notes", headers={"X-Request-ID": "abc123"})

        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, test_client):
        response = await test_client.get("/api/notes")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_cors_preflight_allows_configured_origin(self, test_client):
        response = await test_client.options(
            "/api/notes",
            headers={
                "Origin": "http://localhost:3000",
                "Access-Control-Request-Method": "PATCH",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:3000"
        assert response.headers["access-control-allow-credentials"] == "true"

    @pytest.mark.asyncio
    async def test_cors_preflight_rejects_other_origin(self, test_client):
        response = await test_client.options(
            "/api/notes",
            headers={
                "Origin": "http://evil.example",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 400
        assert "access-control-allow-origin" not in response.headers
