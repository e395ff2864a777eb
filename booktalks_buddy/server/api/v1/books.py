"""
API endpoints for book search and the personal library.

Search proxies the external volumes API; library books are the caller's own
copies of search results and back the reading list and collections.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from booktalks_buddy.core.models.io.books import BookSearchResponse, PersonalBookCreate, PersonalBookRead
from booktalks_buddy.server.services.deps import BookSearchDep, CurrentUserDep, PersonalBookServiceDep

router = APIRouter(tags=["books"])


@router.get(
    "/search",
    response_model=BookSearchResponse,
    summary="Search Books",
    description="Search the book metadata API by free text.",
    response_description="Normalized search results.",
    responses={
        400: {"description": "Blank query or page size out of range"},
        503: {"description": "Book search API unreachable"},
    },
)
async def search_books(
    client: BookSearchDep,
    q: str = Query(..., description="Title, author or ISBN"),
    max_results: int = Query(default=20, description="Page size, 1..40"),
    start_index: int = Query(default=0, ge=0),
) -> BookSearchResponse:
    """
    Search books.

    - **q**: Search text.
    - **max_results**: Number of results, 1..40.
    - **start_index**: Offset into the upstream result set.
    """
    return await client.search(q, max_results=max_results, start_index=start_index)


@router.post(
    "/library",
    response_model=PersonalBookRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Library Book",
    description="Add a book to the caller's personal library.",
    responses={409: {"description": "Book already in the library"}},
)
async def add_library_book(
    payload: PersonalBookCreate, user: CurrentUserDep, service: PersonalBookServiceDep
) -> PersonalBookRead:
    book = await service.add_book(user.id, payload)
    return PersonalBookRead.model_validate(book)


@router.get(
    "/library",
    response_model=List[PersonalBookRead],
    summary="List Library Books",
    description="The caller's library, newest first, optionally filtered by title or author.",
)
async def list_library_books(
    user: CurrentUserDep,
    service: PersonalBookServiceDep,
    search: Optional[str] = Query(default=None, max_length=100),
    limit: int = 50,
    offset: int = 0,
) -> List[PersonalBookRead]:
    books = await service.list_books(user.id, search=search, limit=limit, offset=offset)
    return [PersonalBookRead.model_validate(b) for b in books]


@router.get(
    "/library/{book_id}",
    response_model=PersonalBookRead,
    summary="Get Library Book",
    description="One book of the caller's library.",
    responses={404: {"description": "Book not found"}},
)
async def get_library_book(book_id: str, user: CurrentUserDep, service: PersonalBookServiceDep) -> PersonalBookRead:
    return PersonalBookRead.model_validate(await service.get_book(user.id, book_id))


@router.delete(
    "/library/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Library Book",
    description="Remove a book from the library, with its reading list entry and collection memberships.",
)
async def remove_library_book(book_id: str, user: CurrentUserDep, service: PersonalBookServiceDep) -> None:
    await service.remove_book(user.id, book_id)
