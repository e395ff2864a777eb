"""Book metadata search

Proxies the external volumes API (Google Books compatible) and normalizes
its payload into ``BookSearchResult`` items.

Typical usage:
    client = BookSearchClient()
    page = await client.search("dune", max_results=10)
    await client.aclose()

Pass a custom ``httpx.AsyncClient`` for custom transports, proxies or tests.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from booktalks_buddy.core.errors import AppError, ErrorType, ValidationError, classify_error, with_retry
from booktalks_buddy.core.models.io.books import BookSearchResponse, BookSearchResult
from booktalks_buddy.server.core.config import BookSearchConfig, settings

logger = logging.getLogger(__name__)

MIN_RESULTS = 1
MAX_RESULTS = 40


class _ImageLinksDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    thumbnail: Optional[str] = None
    smallThumbnail: Optional[str] = None


class _VolumeInfoDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    title: str = "Untitled"
    authors: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    imageLinks: Optional[_ImageLinksDTO] = None
    pageCount: Optional[int] = None
    publishedDate: Optional[str] = None
    categories: List[str] = Field(default_factory=list)


class _VolumeDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    volumeInfo: _VolumeInfoDTO = Field(default_factory=_VolumeInfoDTO)


class _VolumesPageDTO(BaseModel):
    model_config = ConfigDict(extra="ignore")

    totalItems: int = 0
    items: List[_VolumeDTO] = Field(default_factory=list)


def normalize_volume(volume: _VolumeDTO) -> BookSearchResult:
    info = volume.volumeInfo
    thumbnail = None
    if info.imageLinks is not None:
        thumbnail = info.imageLinks.thumbnail or info.imageLinks.smallThumbnail
    if thumbnail and thumbnail.startswith("http://"):
        thumbnail = "https://" + thumbnail[len("http://") :]
    return BookSearchResult(
        google_books_id=volume.id,
        title=info.title,
        authors=info.authors,
        description=info.description,
        thumbnail=thumbnail,
        page_count=info.pageCount,
        published_date=info.publishedDate,
        categories=info.categories,
    )


class BookSearchClient:
    """Async client for the book metadata API.

    Args:
        config: API location, key and timeout; defaults to the application settings
        client: Preconfigured HTTP client (optional)
    """

    def __init__(self, config: Optional[BookSearchConfig] = None, client: Optional[httpx.AsyncClient] = None) -> None:
        self.config = config or settings.book_search
        self._http = client or httpx.AsyncClient(timeout=self.config.timeout_seconds, follow_redirects=True)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _fetch(self, params: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._http.get(self.config.api_url, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            if e.response.status_code >= 500:
                raise AppError(f"Book search upstream error {e.response.status_code}", ErrorType.server) from e
            raise AppError(f"Book search rejected the request: {e.response.status_code}", ErrorType.validation) from e

    async def search(self, query: str, max_results: int = 20, start_index: int = 0) -> BookSearchResponse:
        """
        Search books by free text.

        Args:
            query: Search text; required
            max_results: Page size, 1..40
            start_index: Offset into the result set

        Returns:
            Normalized results and the upstream total.

        Raises:
            ValidationError: Blank query or page size out of range
            AppError: ``network``/``timeout`` when the API is unreachable
        """
        if not query or not query.strip():
            raise ValidationError("Search query is required", field="q")
        if not MIN_RESULTS <= max_results <= MAX_RESULTS:
            raise ValidationError(f"max_results must be between {MIN_RESULTS} and {MAX_RESULTS}", field="max_results")

        params: Dict[str, Any] = {"q": query.strip(), "maxResults": max_results, "startIndex": max(start_index, 0)}
        if self.config.api_key:
            params["key"] = self.config.api_key

        payload = await with_retry(lambda: self._fetch(params), "book_search", max_retries=2, base_delay=0.5)
        page = _VolumesPageDTO.model_validate(payload)
        logger.debug(f"Book search '{query}' returned {len(page.items)} of {page.totalItems}")
        return BookSearchResponse(items=[normalize_volume(v) for v in page.items], total_items=page.totalItems)

    async def get_volume(self, volume_id: str) -> BookSearchResult:
        url = f"{self.config.api_url.rstrip('/')}/{volume_id}"
        try:
            response = await self._http.get(url, params={"key": self.config.api_key} if self.config.api_key else None)
        except Exception as e:
            raise classify_error(e, {"operation": "book_lookup"}) from e
        if response.status_code == 404:
            raise AppError("Book not found", ErrorType.not_found)
        if response.status_code >= 400:
            raise AppError(f"Book lookup failed with {response.status_code}", ErrorType.server)
        return normalize_volume(_VolumeDTO.model_validate(response.json()))
