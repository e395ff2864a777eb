"""Personal library, reading list and collection endpoints."""

import httpx
import pytest
from httpx import AsyncClient

from booktalks_buddy.server.core.config import BookSearchConfig
from booktalks_buddy.server.services.book_search import BookSearchClient
from booktalks_buddy.server.services.deps import get_book_search_client

LIBRARY = "/api/v1/books/library"
READING_LIST = "/api/v1/reading-list"
COLLECTIONS = "/api/v1/collections"

DUNE = {"google_books_id": "B1hSG45JCX4C", "title": "Dune", "author": "Frank Herbert", "categories": ["Fiction"]}
EMMA = {"google_books_id": "emma-1", "title": "Emma", "author": "Jane Austen"}


async def _add_book(client: AsyncClient, headers, payload=DUNE) -> dict:
    response = await client.post(LIBRARY, headers=headers, json=payload)
    assert response.status_code == 201
    return response.json()


class TestLibrary:
    @pytest.mark.asyncio
    async def test_add_and_list(self, client: AsyncClient, auth_headers):
        headers = auth_headers("reader-1")
        await _add_book(client, headers, DUNE)
        await _add_book(client, headers, EMMA)

        everything = await client.get(LIBRARY, headers=headers)
        searched = await client.get(LIBRARY, headers=headers, params={"search": "austen"})

        assert len(everything.json()) == 2
        assert [b["title"] for b in searched.json()] == ["Emma"]

    @pytest.mark.asyncio
    async def test_same_volume_twice_conflicts(self, client: AsyncClient, auth_headers):
        headers = auth_headers("reader-1")
        await _add_book(client, headers)

        response = await client.post(LIBRARY, headers=headers, json=DUNE)

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_other_users_books_are_not_found(self, client: AsyncClient, auth_headers):
        book = await _add_book(client, auth_headers("reader-1"))

        response = await client.get(f"{LIBRARY}/{book['id']}", headers=auth_headers("reader-2"))

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_page_size_is_checked(self, client: AsyncClient, auth_headers):
        response = await client.get(LIBRARY, headers=auth_headers("reader-1"), params={"limit": 500})

        assert response.status_code == 400
        assert response.json()["field"] == "limit"

    @pytest.mark.asyncio
    async def test_remove_cascades_to_reading_list(self, client: AsyncClient, auth_headers):
        headers = auth_headers("reader-1")
        book = await _add_book(client, headers)
        await client.put(READING_LIST, headers=headers, json={"book_id": book["id"]})

        removed = await client.delete(f"{LIBRARY}/{book['id']}", headers=headers)
        entries = await client.get(READING_LIST, headers=headers)

        assert removed.status_code == 204
        assert entries.json() == []


class TestReadingList:
    @pytest.mark.asyncio
    async def test_upsert_tracks_status_changes(self, client: AsyncClient, auth_headers):
        headers = auth_headers("reader-1")
        book = await _add_book(client, headers)

        first = await client.put(READING_LIST, headers=headers, json={"book_id": book["id"]})
        same = await client.put(READING_LIST, headers=headers, json={"book_id": book["id"], "rating": 4})
        changed = await client.put(READING_LIST, headers=headers, json={"book_id": book["id"], "status": "completed"})

        assert first.json()["status"] == "want_to_read"
        assert first.json()["book"]["title"] == "Dune"
        assert same.json()["id"] == first.json()["id"]
        assert same.json()["status_changed_at"] == first.json()["status_changed_at"]
        assert same.json()["rating"] == 4
        assert changed.json()["status"] == "completed"

    @pytest.mark.asyncio
    async def test_book_must_be_in_library(self, client: AsyncClient, auth_headers):
        response = await client.put(READING_LIST, headers=auth_headers("reader-1"), json={"book_id": "missing"})

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_public_view_hides_private_entries_and_reviews(self, client: AsyncClient, auth_headers):
        headers = auth_headers("reader-1")
        dune = await _add_book(client, headers, DUNE)
        emma = await _add_book(client, headers, EMMA)
        await client.put(
            READING_LIST,
            headers=headers,
            json={"book_id": dune["id"], "review_text": "Loved it", "review_is_public": False},
        )
        await client.put(READING_LIST, headers=headers, json={"book_id": emma["id"], "is_public": False})

        response = await client.get(f"{READING_LIST}/users/reader-1")

        entries = response.json()
        assert [e["book_id"] for e in entries] == [dune["id"]]
        assert entries[0]["review_text"] is None

    @pytest.mark.asyncio
    async def test_invalid_sort(self, client: AsyncClient, auth_headers):
        response = await client.get(READING_LIST, headers=auth_headers("reader-1"), params={"sort_by": "colour"})

        assert response.status_code == 400
        assert response.json()["field"] == "sort_by"


class TestCollections:
    @pytest.mark.asyncio
    async def test_collection_with_books(self, client: AsyncClient, auth_headers):
        headers = auth_headers("reader-1")
        book = await _add_book(client, headers)
        collection = (await client.post(COLLECTIONS, headers=headers, json={"name": "Desert planets"})).json()

        added = await client.post(
            f"{COLLECTIONS}/{collection['id']}/books", headers=headers, json={"book_id": book["id"], "notes": "Classic"}
        )
        again = await client.post(f"{COLLECTIONS}/{collection['id']}/books", headers=headers, json={"book_id": book["id"]})
        detail = await client.get(f"{COLLECTIONS}/{collection['id']}")
        books = await client.get(f"{COLLECTIONS}/{collection['id']}/books")

        assert collection["book_count"] == 0
        assert added.status_code == 201
        assert again.status_code == 409
        assert detail.json()["book_count"] == 1
        assert books.json()[0]["book"]["title"] == "Dune"

    @pytest.mark.asyncio
    async def test_private_collection_visible_to_owner_only(self, client: AsyncClient, auth_headers):
        headers = auth_headers("reader-1")
        private = (await client.post(COLLECTIONS, headers=headers, json={"name": "Secret", "is_public": False})).json()
        await client.post(COLLECTIONS, headers=headers, json={"name": "Shared"})

        as_owner = await client.get(f"{COLLECTIONS}/users/reader-1", headers=headers)
        as_visitor = await client.get(f"{COLLECTIONS}/users/reader-1", headers=auth_headers("reader-2"))
        direct = await client.get(f"{COLLECTIONS}/{private['id']}", headers=auth_headers("reader-2"))

        assert sorted(c["name"] for c in as_owner.json()) == ["Secret", "Shared"]
        assert [c["name"] for c in as_visitor.json()] == ["Shared"]
        assert direct.status_code == 404

    @pytest.mark.asyncio
    async def test_update_and_remove_book(self, client: AsyncClient, auth_headers):
        headers = auth_headers("reader-1")
        book = await _add_book(client, headers)
        collection = (await client.post(COLLECTIONS, headers=headers, json={"name": "Shelf"})).json()
        await client.post(f"{COLLECTIONS}/{collection['id']}/books", headers=headers, json={"book_id": book["id"]})

        renamed = await client.patch(f"{COLLECTIONS}/{collection['id']}", headers=headers, json={"name": "Top shelf"})
        removed = await client.delete(f"{COLLECTIONS}/{collection['id']}/books/{book['id']}", headers=headers)
        missing = await client.delete(f"{COLLECTIONS}/{collection['id']}/books/{book['id']}", headers=headers)

        assert renamed.json()["name"] == "Top shelf"
        assert removed.status_code == 204
        assert missing.status_code == 404


class TestBookSearchEndpoint:
    @pytest.mark.asyncio
    async def test_search_uses_configured_client(self, client: AsyncClient):
        from booktalks_buddy.server.main import app

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"totalItems": 1, "items": [{"id": "v1", "volumeInfo": {"title": "Dune"}}]})

        search_client = BookSearchClient(
            config=BookSearchConfig(api_url="https://mock.books/volumes"),
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        app.dependency_overrides[get_book_search_client] = lambda: search_client

        response = await client.get("/api/v1/books/search", params={"q": "dune"})

        assert response.status_code == 200
        assert response.json()["items"][0]["title"] == "Dune"

    @pytest.mark.asyncio
    async def test_blank_query(self, client: AsyncClient):
        from booktalks_buddy.server.main import app

        search_client = BookSearchClient(
            config=BookSearchConfig(api_url="https://mock.books/volumes"),
            client=httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={}))),
        )
        app.dependency_overrides[get_book_search_client] = lambda: search_client

        response = await client.get("/api/v1/books/search", params={"q": "  "})

        assert response.status_code == 400
        assert response.json()["field"] == "q"
