"""
Posts API: HTTP Endpoint Tests
==============================

What:  End-to-end tests of the /posts routes through the ASGI app.
How:   HTTPX AsyncClient over ASGITransport; an in-memory SQLite database
       replaces the configured one via dependency override.

What we test:
    ✅ Status codes: 200 / 201 / 204 / 400 / 404
    ✅ Response shape (camelCase timestamps, error envelope, request ID)
    ✅ The create → get → update → delete → get walkthrough
"""

import logging
from datetime import datetime, timedelta

import pytest
from pydantic import TypeAdapter

from posts_api.middleware.request_id import REQUEST_ID_HEADER

HELLO = {"title": "Hello", "content": "World", "category": "Tech", "tags": ["intro"]}


async def create(client, **overrides):
    body = dict(HELLO)
    body.update(overrides)
    response = await client.post("/posts", json=body)
    assert response.status_code == 201, response.text
    return response.json()


class TestPostLifecycle:

    @pytest.mark.asyncio
    async def test_full_walkthrough(self, test_client):
        created = await create(test_client)
        post_id = created["id"]
        assert isinstance(post_id, int)
        assert {k: created[k] for k in HELLO} == HELLO
        assert "createdAt" in created and "updatedAt" in created

        fetched = await test_client.get(f"/posts/{post_id}")
        assert fetched.status_code == 200
        assert fetched.json()["title"] == "Hello"

        updated = await test_client.put(f"/posts/{post_id}", json={"content": "World v2"})
        assert updated.status_code == 200
        assert updated.json()["title"] == "Hello"
        assert updated.json()["content"] == "World v2"
        assert updated.json()["tags"] == ["intro"]

        deleted = await test_client.delete(f"/posts/{post_id}")
        assert deleted.status_code == 204
        assert deleted.content == b""

        gone = await test_client.get(f"/posts/{post_id}")
        assert gone.status_code == 404
        assert gone.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_patch_is_partial_update(self, test_client):
        created = await create(test_client)

        response = await test_client.patch(
            f"/posts/{created['id']}", json={"category": "News", "id": 999}
        )

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == created["id"]
        assert body["category"] == "News"
        assert body["content"] == "World"


class TestPostValidation:

    @pytest.mark.asyncio
    async def test_title_too_long(self, test_client):
        response = await test_client.post("/posts", json={**HELLO, "title": "x" * 121})

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Invalid input"
        assert list(body["errors"]) == ["title"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tag", ["abc", "a" * 21])
    async def test_tag_length_out_of_bounds(self, test_client, tag):
        response = await test_client.post("/posts", json={**HELLO, "tags": [tag]})

        assert response.status_code == 400
        assert "tags" in response.json()["errors"]

    @pytest.mark.asyncio
    async def test_missing_category(self, test_client):
        body = {k: v for k, v in HELLO.items() if k != "category"}

        response = await test_client.post("/posts", json=body)

        assert response.status_code == 400
        assert response.json()["errors"] == {"category": ["The category field is required."]}

    @pytest.mark.asyncio
    async def test_invalid_create_stores_nothing(self, test_client):
        await test_client.post("/posts", json={"title": "only"})

        listing = await test_client.get("/posts")
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_body_must_be_object(self, test_client):
        response = await test_client.post("/posts", json=["Hello"])

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_invalid_update_leaves_post_unchanged(self, test_client):
        created = await create(test_client)

        response = await test_client.put(f"/posts/{created['id']}", json={"tags": ["no"]})
        assert response.status_code == 400

        fetched = await test_client.get(f"/posts/{created['id']}")
        assert fetched.json()["tags"] == ["intro"]

    @pytest.mark.asyncio
    async def test_update_unknown_id_is_404_even_with_invalid_body(self, test_client):
        response = await test_client.put("/posts/12345", json={"title": "x" * 500})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, test_client):
        response = await test_client.delete("/posts/12345")
        assert response.status_code == 404


class TestPostSearch:

    @pytest.mark.asyncio
    async def test_search_title_or_content(self, test_client):
        a = await create(test_client, title="Tech today", content="news")
        b = await create(test_client, title="Garden", content="High-TECH greenhouse")
        await create(test_client, title="Garden", content="Tomatoes")

        response = await test_client.get("/posts", params={"search": "tech"})

        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [a["id"], b["id"]]

    @pytest.mark.asyncio
    async def test_list_all(self, test_client):
        ids = [(await create(test_client, title=f"Post {i}"))["id"] for i in range(4)]

        for params in ({}, {"search": ""}):
            response = await test_client.get("/posts", params=params)
            assert [p["id"] for p in response.json()] == ids


class TestAmbient:

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/posts", headers={REQUEST_ID_HEADER: "abc12345"})
        assert response.headers[REQUEST_ID_HEADER] == "abc12345"

    @pytest.mark.asyncio
    async def test_request_id_in_error_body(self, test_client):
        response = await test_client.get("/posts/999", headers={REQUEST_ID_HEADER: "trace-1"})
        assert response.json()["request_id"] == "trace-1"

    @pytest.mark.asyncio
    async def test_validation_context_logged(self, test_client, caplog):
        caplog.set_level(logging.WARNING, logger="posts_api.main")

        await test_client.post("/posts", json={**HELLO, "title": ""})

        assert "Context: {'fields': ['title']}" in caplog.text

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"


def parse_timestamp(value):
    return TypeAdapter(datetime).validate_python(value)


class TestTimestamps:

    @pytest.mark.asyncio
    async def test_created_at_stable_across_reads(self, test_client):
        created = await create(test_client)

        fetched = (await test_client.get(f"/posts/{created['id']}")).json()

        assert parse_timestamp(fetched["createdAt"]) == parse_timestamp(created["createdAt"])
        assert parse_timestamp(fetched["createdAt"]).utcoffset() == timedelta(0)

    @pytest.mark.asyncio
    async def test_update_moves_updated_at(self, test_client):
        created = await create(test_client)

        updated = (await test_client.put(f"/posts/{created['id']}", json={"title": "Hi"})).json()

        assert parse_timestamp(updated["createdAt"]) == parse_timestamp(created["createdAt"])
        assert parse_timestamp(updated["updatedAt"]) > parse_timestamp(created["updatedAt"])


class TestRequestBodies:

    @pytest.mark.asyncio
    async def test_update_unknown_id_with_list_body(self, test_client):
        response = await test_client.put("/posts/12345", json=["x"])
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_with_list_body(self, test_client):
        created = await create(test_client)

        response = await test_client.put(f"/posts/{created['id']}", json=["x"])

        assert response.status_code == 400
        assert list(response.json()["errors"]) == ["body"]

    @pytest.mark.asyncio
    async def test_update_without_body_changes_nothing(self, test_client):
        created = await create(test_client)

        response = await test_client.put(f"/posts/{created['id']}")

        assert response.status_code == 200
        assert {k: response.json()[k] for k in HELLO} == HELLO

    @pytest.mark.asyncio
    async def test_create_without_body(self, test_client):
        response = await test_client.post("/posts")

        assert response.status_code == 400
        assert set(response.json()["errors"]) == {"title", "content", "category"}

    @pytest.mark.asyncio
    async def test_whitespace_title_rejected(self, test_client):
        response = await test_client.post("/posts", json={**HELLO, "title": "   "})

        assert response.status_code == 400
        assert response.json()["errors"] == {"title": ["The title field is required."]}

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["get", "put", "delete"])
    async def test_id_beyond_64_bits_is_404(self, test_client, method):
        response = await test_client.request(method.upper(), "/posts/99999999999999999999")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
