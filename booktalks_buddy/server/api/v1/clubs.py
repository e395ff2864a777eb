"""
API endpoints for book clubs and memberships.

Covers the club lifecycle, joining and leaving, the join request review
flow for private clubs, and club moderator assignment.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from booktalks_buddy.core.models.io.clubs import (
    ClubCreate,
    ClubRead,
    ClubUpdate,
    CurrentBookUpdate,
    JoinAnswersRead,
    JoinRequest,
    JoinResult,
    MemberRead,
    ModeratorAssign,
    ModeratorRead,
    PendingRequestRead,
)
from booktalks_buddy.server.services.deps import ClubServiceDep, CurrentUserDep, OptionalUserDep

router = APIRouter(tags=["clubs"])


@router.post(
    "",
    response_model=ClubRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Club",
    description="Create a book club. The caller becomes its lead.",
    response_description="The created club.",
    responses={
        201: {"description": "Club created successfully"},
        400: {"description": "Invalid club data"},
        403: {"description": "Club creation limit reached"},
    },
)
async def create_club(payload: ClubCreate, user: CurrentUserDep, service: ClubServiceDep) -> ClubRead:
    """
    Create a new book club.

    - **name**: Club name, 1..100 characters.
    - **description**: Optional description, at most 1000 characters.
    - **privacy**: `public` clubs are joined immediately; `private` ones need approval.
    - **store_id**: Optional hosting store.
    """
    club = await service.create_club(user.id, payload)
    return ClubRead.model_validate(club).model_copy(update={"member_count": 1})


@router.get(
    "",
    response_model=List[ClubRead],
    summary="List Public Clubs",
    description="List public clubs, newest first, optionally filtered by name.",
    response_description="A page of public clubs.",
)
async def list_clubs(
    service: ClubServiceDep,
    search: Optional[str] = Query(default=None, max_length=100, description="Substring of the club name"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> List[ClubRead]:
    clubs = await service.list_public_clubs(search=search, limit=limit, offset=offset)
    return [ClubRead.model_validate(c) for c in clubs]


@router.get(
    "/mine",
    response_model=List[ClubRead],
    summary="List My Clubs",
    description="List the clubs the caller belongs to. Pending join requests are not included.",
    response_description="The caller's clubs.",
)
async def list_my_clubs(user: CurrentUserDep, service: ClubServiceDep) -> List[ClubRead]:
    clubs = await service.list_user_clubs(user.id)
    return [ClubRead.model_validate(c) for c in clubs]


@router.get(
    "/{club_id}",
    response_model=ClubRead,
    summary="Get Club",
    description="Retrieve a club. Private clubs are only visible to their members and managers.",
    response_description="The club with its member count.",
    responses={404: {"description": "Club not found or not visible"}},
)
async def get_club(club_id: str, user: OptionalUserDep, service: ClubServiceDep) -> ClubRead:
    club = await service.get_visible_club(club_id, user.id if user else None)
    return ClubRead.model_validate(club).model_copy(update={"member_count": await service.member_count(club_id)})


@router.patch(
    "/{club_id}",
    response_model=ClubRead,
    summary="Update Club",
    description="Update club settings. Requires club management rights.",
    response_description="The updated club.",
    responses={403: {"description": "Not a club manager"}, 404: {"description": "Club not found"}},
)
async def update_club(club_id: str, payload: ClubUpdate, user: CurrentUserDep, service: ClubServiceDep) -> ClubRead:
    club = await service.update_club(club_id, user.id, payload)
    return ClubRead.model_validate(club)


@router.delete(
    "/{club_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Club",
    description="Soft delete a club. Requires club management rights.",
    responses={403: {"description": "Not a club manager"}, 404: {"description": "Club not found"}},
)
async def delete_club(club_id: str, user: CurrentUserDep, service: ClubServiceDep) -> None:
    await service.delete_club(club_id, user.id)


@router.put(
    "/{club_id}/current-book",
    response_model=ClubRead,
    summary="Set Current Book",
    description="Set the book the club is currently reading.",
    response_description="The updated club.",
)
async def set_current_book(
    club_id: str, payload: CurrentBookUpdate, user: CurrentUserDep, service: ClubServiceDep
) -> ClubRead:
    club = await service.set_current_book(club_id, user.id, payload.book_id)
    return ClubRead.model_validate(club)


# Membership


@router.post(
    "/{club_id}/join",
    response_model=JoinResult,
    status_code=status.HTTP_201_CREATED,
    summary="Join Club",
    description="Join a public club, or submit a join request (with answers) to a private one.",
    response_description="Whether the caller is now a member or awaiting approval.",
    responses={
        400: {"description": "Invalid or missing answers to required questions"},
        403: {"description": "Membership limit reached or premium club"},
        409: {"description": "Already a member or request already pending"},
    },
)
async def join_club(
    club_id: str, user: CurrentUserDep, service: ClubServiceDep, payload: Optional[JoinRequest] = None
) -> JoinResult:
    """
    Join a club.

    - **answers**: Answers to the club's join questions; each at most 500 characters.
      Required questions must be answered whenever the club has join questions enabled.
    """
    return await service.join_club(club_id, user.id, payload.answers if payload else None)


@router.delete(
    "/{club_id}/membership",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Leave Club",
    description="Leave a club, or withdraw a pending join request. The lead cannot leave.",
)
async def leave_club(club_id: str, user: CurrentUserDep, service: ClubServiceDep) -> None:
    await service.leave_club(club_id, user.id)


@router.get(
    "/{club_id}/members",
    response_model=List[MemberRead],
    summary="List Members",
    description="List the members of a club. Visible to members and managers.",
    response_description="Members, oldest first.",
)
async def list_members(club_id: str, user: CurrentUserDep, service: ClubServiceDep) -> List[MemberRead]:
    members = await service.list_members(club_id, user.id)
    return [MemberRead.model_validate(m) for m in members]


@router.delete(
    "/{club_id}/members/{member_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Member",
    description="Remove a member from the club. Requires club management rights.",
)
async def remove_member(club_id: str, member_id: str, user: CurrentUserDep, service: ClubServiceDep) -> None:
    await service.remove_member(club_id, user.id, member_id)


# Join requests


@router.get(
    "/{club_id}/join-requests",
    response_model=List[PendingRequestRead],
    summary="List Join Requests",
    description="Pending join requests of a club, newest first.",
    response_description="Pending requests.",
)
async def list_join_requests(club_id: str, user: CurrentUserDep, service: ClubServiceDep) -> List[PendingRequestRead]:
    return await service.list_pending_requests(club_id, user.id)


@router.get(
    "/{club_id}/join-requests/{user_id}/answers",
    response_model=JoinAnswersRead,
    summary="Get Join Answers",
    description="Answers a prospective member submitted with their join request.",
    response_description="The stored answers.",
)
async def get_join_answers(
    club_id: str, user_id: str, user: CurrentUserDep, service: ClubServiceDep
) -> JoinAnswersRead:
    return await service.get_join_answers(club_id, user.id, user_id)


@router.post(
    "/{club_id}/join-requests/{user_id}/approve",
    response_model=MemberRead,
    summary="Approve Join Request",
    description="Approve a pending join request; the requester becomes a member.",
    response_description="The new membership.",
)
async def approve_join_request(club_id: str, user_id: str, user: CurrentUserDep, service: ClubServiceDep) -> MemberRead:
    membership = await service.approve_request(club_id, user.id, user_id)
    return MemberRead.model_validate(membership)


@router.post(
    "/{club_id}/join-requests/{user_id}/reject",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Reject Join Request",
    description="Reject a pending join request.",
)
async def reject_join_request(club_id: str, user_id: str, user: CurrentUserDep, service: ClubServiceDep) -> None:
    await service.reject_request(club_id, user.id, user_id)


# Moderators


@router.get(
    "/{club_id}/moderators",
    response_model=List[ModeratorRead],
    summary="List Moderators",
    description="Moderators of a club.",
)
async def list_moderators(club_id: str, service: ClubServiceDep) -> List[ModeratorRead]:
    moderators = await service.list_moderators(club_id)
    return [ModeratorRead.model_validate(m) for m in moderators]


@router.post(
    "/{club_id}/moderators",
    response_model=ModeratorRead,
    status_code=status.HTTP_201_CREATED,
    summary="Assign Moderator",
    description="Promote a member to club moderator. Requires club management rights.",
    responses={409: {"description": "Already a moderator"}},
)
async def assign_moderator(
    club_id: str, payload: ModeratorAssign, user: CurrentUserDep, service: ClubServiceDep
) -> ModeratorRead:
    moderator = await service.assign_moderator(club_id, user.id, payload.user_id)
    return ModeratorRead.model_validate(moderator)


@router.delete(
    "/{club_id}/moderators/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Moderator",
    description="Demote a club moderator back to member.",
)
async def remove_moderator(club_id: str, user_id: str, user: CurrentUserDep, service: ClubServiceDep) -> None:
    await service.remove_moderator(club_id, user.id, user_id)
