"""
API endpoints for club book nominations.

Members nominate books and like nominations; a club lead selects the next
book from them.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import APIRouter, Query, status

from booktalks_buddy.core.models.domain import NominationStatus
from booktalks_buddy.core.models.io.nominations import NominationCreate, NominationRead
from booktalks_buddy.server.services.deps import CurrentUserDep, NominationServiceDep

router = APIRouter(tags=["nominations"])


@router.post(
    "/{club_id}/nominations",
    response_model=NominationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Nominate Book",
    description="Nominate a catalog book or a search result for the club's next read.",
    response_description="The created nomination.",
    responses={
        403: {"description": "Not a club member or not allowed to nominate"},
        409: {"description": "Book already nominated"},
    },
)
async def nominate(
    club_id: str, payload: NominationCreate, user: CurrentUserDep, service: NominationServiceDep
) -> NominationRead:
    """
    Nominate a book.

    - **book_id**: Catalog book, or
    - **google_books_id** and **title** (plus optional metadata) of a search result.
    """
    return await service.nominate(club_id, user.id, payload)


@router.get(
    "/{club_id}/nominations",
    response_model=List[NominationRead],
    summary="List Nominations",
    description="Nominations of a club ordered by likes, then newest first.",
)
async def list_nominations(
    club_id: str,
    user: CurrentUserDep,
    service: NominationServiceDep,
    status_filter: Optional[NominationStatus] = Query(default=NominationStatus.active, alias="status"),
) -> List[NominationRead]:
    return await service.list_nominations(club_id, user.id, status_filter.value if status_filter else None)


@router.post(
    "/{club_id}/nominations/{nomination_id}/like",
    summary="Like Nomination",
    description="Like a nomination. Liking twice has no further effect.",
    response_description="The nomination's like count.",
)
async def like_nomination(
    club_id: str, nomination_id: str, user: CurrentUserDep, service: NominationServiceDep
) -> Dict[str, int]:
    return await service.like(club_id, nomination_id, user.id)


@router.delete(
    "/{club_id}/nominations/{nomination_id}/like",
    summary="Unlike Nomination",
    description="Remove the caller's like.",
    response_description="The nomination's like count.",
)
async def unlike_nomination(
    club_id: str, nomination_id: str, user: CurrentUserDep, service: NominationServiceDep
) -> Dict[str, int]:
    return await service.unlike(club_id, nomination_id, user.id)


@router.post(
    "/{club_id}/nominations/{nomination_id}/select",
    response_model=NominationRead,
    summary="Select Nomination",
    description="Make the nominated book the club's current book and archive the other active nominations.",
    responses={403: {"description": "Not a club manager"}, 409: {"description": "Nomination is not active"}},
)
async def select_nomination(
    club_id: str, nomination_id: str, user: CurrentUserDep, service: NominationServiceDep
) -> NominationRead:
    nomination = await service.select_nomination(club_id, nomination_id, user.id)
    return NominationRead.model_validate(nomination)
