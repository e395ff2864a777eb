"""
API endpoints for reading lists.

Each entry tracks a library book's reading status, rating and review. Other
users see public entries only, and reviews only when they are shared.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from booktalks_buddy.core.models.domain import ReadingListStatus
from booktalks_buddy.core.models.io.books import ReadingListItemRead, ReadingListUpsert
from booktalks_buddy.server.services.deps import CurrentUserDep, OptionalUserDep, ReadingListServiceDep

router = APIRouter(tags=["reading-lists"])


@router.put(
    "",
    response_model=ReadingListItemRead,
    summary="Save Reading List Entry",
    description="Add a library book to the reading list, or update its status, rating or review.",
    responses={404: {"description": "Book not in the caller's library"}},
)
async def upsert_entry(
    payload: ReadingListUpsert, user: CurrentUserDep, service: ReadingListServiceDep
) -> ReadingListItemRead:
    """
    Save a reading list entry.

    - **status**: `want_to_read`, `currently_reading` or `completed`.
    - **rating**: Optional 1..5.
    - **review_text**: Optional review, at most 2000 characters.
    - **is_public** / **review_is_public**: Visibility to other users.
    """
    return await service.upsert(user.id, payload)


@router.get(
    "",
    response_model=List[ReadingListItemRead],
    summary="List My Reading List",
    description="The caller's reading list with filters and sorting.",
    responses={400: {"description": "Invalid sort or page parameters"}},
)
async def list_own(
    user: CurrentUserDep,
    service: ReadingListServiceDep,
    status_filter: Optional[ReadingListStatus] = Query(default=None, alias="status"),
    rating: Optional[int] = Query(default=None, ge=1, le=5),
    is_public: Optional[bool] = None,
    sort_by: str = Query(default="added_at", description="added_at, status_changed_at, title or rating"),
    sort_order: str = Query(default="desc", description="asc or desc"),
    limit: int = 50,
    offset: int = 0,
) -> List[ReadingListItemRead]:
    return await service.list_own(
        user.id,
        status=status_filter.value if status_filter else None,
        rating=rating,
        is_public=is_public,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )


@router.get(
    "/users/{owner_id}",
    response_model=List[ReadingListItemRead],
    summary="List User Reading List",
    description="Another user's public reading list entries.",
)
async def list_public(
    owner_id: str,
    user: OptionalUserDep,
    service: ReadingListServiceDep,
    status_filter: Optional[ReadingListStatus] = Query(default=None, alias="status"),
    sort_by: str = Query(default="added_at", description="added_at, status_changed_at, title or rating"),
    sort_order: str = "desc",
    limit: int = 50,
    offset: int = 0,
) -> List[ReadingListItemRead]:
    return await service.list_public(
        owner_id,
        user.id if user else None,
        status=status_filter.value if status_filter else None,
        sort_by=sort_by,
        sort_order=sort_order,
        limit=limit,
        offset=offset,
    )


@router.delete(
    "/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Reading List Entry",
    description="Remove an entry from the caller's reading list.",
)
async def remove_entry(item_id: str, user: CurrentUserDep, service: ReadingListServiceDep) -> None:
    await service.remove(user.id, item_id)
