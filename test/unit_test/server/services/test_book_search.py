"""
Unit tests for the book metadata search client.

Requests are served by ``httpx.MockTransport`` so no network access happens.
"""

from typing import Callable, List
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from booktalks_buddy.core.errors import AppError, ErrorType, ValidationError
from booktalks_buddy.server.core.config import BookSearchConfig
from booktalks_buddy.server.services.book_search import BookSearchClient

API_URL = "https://mock.books/volumes"

DUNE_VOLUME = {
    "id": "B1hSG45JCX4C",
    "volumeInfo": {
        "title": "Dune",
        "authors": ["Frank Herbert"],
        "description": "Set on the desert planet Arrakis.",
        "imageLinks": {"thumbnail": "http://books.example/dune.jpg"},
        "pageCount": 896,
        "publishedDate": "2005",
        "categories": ["Fiction"],
        "language": "en",
    },
}


def _client(handler: Callable[[httpx.Request], httpx.Response], api_key=None) -> BookSearchClient:
    config = BookSearchConfig(api_url=API_URL, api_key=api_key)
    return BookSearchClient(config=config, client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


class TestBookSearch:
    """BookSearchClient.search"""

    @pytest.mark.asyncio
    async def test_search_normalizes_volumes(self):
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"totalItems": 1, "items": [DUNE_VOLUME]})

        client = _client(handler)
        page = await client.search("  dune  ", max_results=5)
        await client.aclose()

        assert page.total_items == 1
        result = page.items[0]
        assert result.google_books_id == "B1hSG45JCX4C"
        assert result.title == "Dune"
        assert result.authors == ["Frank Herbert"]
        assert result.thumbnail == "https://books.example/dune.jpg"
        assert result.page_count == 896
        assert seen[0].url.params["q"] == "dune"
        assert seen[0].url.params["maxResults"] == "5"
        assert "key" not in seen[0].url.params

    @pytest.mark.asyncio
    async def test_search_sends_api_key(self):
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"totalItems": 0})

        client = _client(handler, api_key="secret-key")
        page = await client.search("dune")

        assert page.items == []
        assert seen[0].url.params["key"] == "secret-key"

    @pytest.mark.asyncio
    async def test_missing_fields_get_defaults(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"totalItems": 1, "items": [{"id": "bare"}]})

        page = await _client(handler).search("anything")

        result = page.items[0]
        assert result.title == "Untitled"
        assert result.authors == []
        assert result.thumbnail is None

    @pytest.mark.asyncio
    async def test_small_thumbnail_used_as_fallback(self):
        volume = {"id": "v1", "volumeInfo": {"title": "Emma", "imageLinks": {"smallThumbnail": "https://img/emma"}}}

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"totalItems": 1, "items": [volume]})

        page = await _client(handler).search("emma")

        assert page.items[0].thumbnail == "https://img/emma"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   "])
    async def test_blank_query_is_rejected(self, query):
        client = _client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(ValidationError) as exc_info:
            await client.search(query)

        assert exc_info.value.field == "q"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("max_results", [0, 41])
    async def test_page_size_out_of_range_is_rejected(self, max_results):
        client = _client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(ValidationError) as exc_info:
            await client.search("dune", max_results=max_results)

        assert exc_info.value.field == "max_results"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_retried(self):
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            if calls["count"] == 1:
                return httpx.Response(503)
            return httpx.Response(200, json={"totalItems": 1, "items": [DUNE_VOLUME]})

        with patch("booktalks_buddy.core.errors.asyncio.sleep", new=AsyncMock()):
            page = await _client(handler).search("dune")

        assert calls["count"] == 2
        assert page.total_items == 1

    @pytest.mark.asyncio
    async def test_upstream_client_error_is_not_retried(self):
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            return httpx.Response(400)

        with pytest.raises(AppError) as exc_info:
            await _client(handler).search("dune")

        assert exc_info.value.error_type == ErrorType.validation
        assert calls["count"] == 1


class TestGetVolume:
    """BookSearchClient.get_volume"""

    @pytest.mark.asyncio
    async def test_returns_normalized_volume(self):
        seen: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=DUNE_VOLUME)

        result = await _client(handler).get_volume("B1hSG45JCX4C")

        assert result.title == "Dune"
        assert str(seen[0].url).startswith(f"{API_URL}/B1hSG45JCX4C")

    @pytest.mark.asyncio
    async def test_missing_volume_maps_to_not_found(self):
        with pytest.raises(AppError) as exc_info:
            await _client(lambda request: httpx.Response(404)).get_volume("missing")

        assert exc_info.value.error_type == ErrorType.not_found
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_upstream_error_maps_to_server(self):
        with pytest.raises(AppError) as exc_info:
            await _client(lambda request: httpx.Response(502)).get_volume("v1")

        assert exc_info.value.error_type == ErrorType.server

    @pytest.mark.asyncio
    async def test_transport_error_maps_to_network(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(AppError) as exc_info:
            await _client(handler).get_volume("v1")

        assert exc_info.value.error_type == ErrorType.network
