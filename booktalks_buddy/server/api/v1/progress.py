"""
API endpoints for member reading progress.

Progress is recorded per member for the club's current book (or an explicit
book). Private entries are only ever returned to their owner.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from booktalks_buddy.core.models.io.clubs import ClubRead
from booktalks_buddy.core.models.io.progress import ProgressRead, ProgressStats, ProgressUpdate, TrackingToggle
from booktalks_buddy.server.services.deps import CurrentUserDep, ProgressServiceDep

router = APIRouter(tags=["reading-progress"])


@router.put(
    "/{club_id}/progress",
    response_model=ProgressRead,
    summary="Record Progress",
    description="Create or update the caller's reading progress in a club.",
    response_description="The stored progress entry.",
    responses={
        400: {"description": "Tracking disabled or inconsistent progress values"},
        403: {"description": "Not a club member"},
    },
)
async def upsert_progress(
    club_id: str, payload: ProgressUpdate, user: CurrentUserDep, service: ProgressServiceDep
) -> ProgressRead:
    """
    Record reading progress.

    - **status**: `not_started`, `reading` or `finished`.
    - **progress_type**: `percentage`, `chapter` or `page` while reading.
    - **current_progress** / **total_progress**: Required for chapter and page tracking.
    - **progress_percentage**: Required for percentage tracking; computed otherwise.
    - **is_private**: Hide the entry from other members.
    """
    entry = await service.upsert_progress(club_id, user.id, payload)
    return ProgressRead.model_validate(entry)


@router.get(
    "/{club_id}/progress/me",
    response_model=Optional[ProgressRead],
    summary="Get My Progress",
    description="The caller's own progress entry, or null when none is recorded.",
)
async def get_own_progress(
    club_id: str, user: CurrentUserDep, service: ProgressServiceDep, book_id: Optional[str] = None
) -> Optional[ProgressRead]:
    entry = await service.get_own_progress(club_id, user.id, book_id)
    return ProgressRead.model_validate(entry) if entry else None


@router.delete(
    "/{club_id}/progress/me",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete My Progress",
    description="Remove the caller's progress entry.",
    responses={404: {"description": "No progress recorded"}},
)
async def delete_own_progress(
    club_id: str, user: CurrentUserDep, service: ProgressServiceDep, book_id: Optional[str] = None
) -> None:
    await service.delete_progress(club_id, user.id, book_id)


@router.get(
    "/{club_id}/progress",
    response_model=List[ProgressRead],
    summary="List Club Progress",
    description="Progress of the club's members. Other members' private entries are left out.",
)
async def list_club_progress(
    club_id: str, user: CurrentUserDep, service: ProgressServiceDep, book_id: Optional[str] = None
) -> List[ProgressRead]:
    entries = await service.list_club_progress(club_id, user.id, book_id)
    return [ProgressRead.model_validate(e) for e in entries]


@router.get(
    "/{club_id}/progress/stats",
    response_model=ProgressStats,
    summary="Get Progress Stats",
    description="Counts of members not started, reading and finished, plus the completion percentage.",
)
async def get_progress_stats(
    club_id: str, user: CurrentUserDep, service: ProgressServiceDep, book_id: Optional[str] = None
) -> ProgressStats:
    return await service.get_stats(club_id, book_id, requester_id=user.id)


@router.get(
    "/{club_id}/progress/members/{member_id}",
    response_model=Optional[ProgressRead],
    summary="Get Member Progress",
    description="Another member's progress; null when none is recorded or the entry is private.",
)
async def get_member_progress(
    club_id: str,
    member_id: str,
    user: CurrentUserDep,
    service: ProgressServiceDep,
    book_id: Optional[str] = Query(default=None),
) -> Optional[ProgressRead]:
    entry = await service.get_member_progress(club_id, user.id, member_id, book_id)
    return ProgressRead.model_validate(entry) if entry else None


@router.put(
    "/{club_id}/progress-tracking",
    response_model=ClubRead,
    summary="Toggle Progress Tracking",
    description="Turn reading progress tracking on or off for the club.",
)
async def toggle_tracking(
    club_id: str, payload: TrackingToggle, user: CurrentUserDep, service: ProgressServiceDep
) -> ClubRead:
    club = await service.toggle_tracking(club_id, user.id, payload.enabled)
    return ClubRead.model_validate(club)
