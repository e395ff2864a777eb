"""
API endpoints for store events and RSVPs.

Store administrators create and edit events; any signed-in user can RSVP.
Capacity is enforced on ``going`` RSVPs only.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from booktalks_buddy.core.models.io.events import (
    EventCreate,
    EventRead,
    EventUpdate,
    ParticipantList,
    ParticipantRead,
    RSVPRequest,
)
from booktalks_buddy.server.services.deps import CurrentUserDep, EventServiceDep

router = APIRouter(tags=["events"])


@router.post(
    "",
    response_model=EventRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Event",
    description="Create a store event, optionally tied to one of the store's clubs.",
    response_description="The created event.",
    responses={
        400: {"description": "Invalid times or club of another store"},
        403: {"description": "Not a store administrator"},
        404: {"description": "Store or club not found"},
    },
)
async def create_event(payload: EventCreate, user: CurrentUserDep, service: EventServiceDep) -> EventRead:
    """
    Create an event.

    - **title**: 1..200 characters.
    - **start_time** / **end_time**: The end must come after the start.
    - **max_participants**: Optional capacity for `going` RSVPs.
    - **store_id**: Hosting store; the caller must administer it.
    - **club_id**: Optional club; its members are notified.
    """
    event = await service.create_event(user.id, payload)
    return EventRead.model_validate(event)


@router.get(
    "",
    response_model=List[EventRead],
    summary="List Events",
    description="List events by start time, optionally filtered by store, club and featured flag.",
)
async def list_events(
    service: EventServiceDep,
    store_id: Optional[str] = None,
    club_id: Optional[str] = None,
    featured: Optional[bool] = None,
    upcoming: bool = Query(default=True, description="Only events that have not started yet"),
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
) -> List[EventRead]:
    events = await service.list_events(store_id, club_id, featured, upcoming, limit, offset)
    return [EventRead.model_validate(e) for e in events]


@router.get(
    "/{event_id}",
    response_model=EventRead,
    summary="Get Event",
    description="Retrieve an event.",
    responses={404: {"description": "Event not found"}},
)
async def get_event(event_id: str, service: EventServiceDep) -> EventRead:
    return EventRead.model_validate(await service.get_event(event_id))


@router.patch(
    "/{event_id}",
    response_model=EventRead,
    summary="Update Event",
    description="Update an event and notify its participants.",
    responses={403: {"description": "Not the creator or a store administrator"}},
)
async def update_event(event_id: str, payload: EventUpdate, user: CurrentUserDep, service: EventServiceDep) -> EventRead:
    event = await service.update_event(event_id, user.id, payload)
    return EventRead.model_validate(event)


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel Event",
    description="Delete an event and notify its participants.",
)
async def delete_event(event_id: str, user: CurrentUserDep, service: EventServiceDep) -> None:
    await service.delete_event(event_id, user.id)


@router.put(
    "/{event_id}/rsvp",
    response_model=ParticipantRead,
    summary="RSVP",
    description="Create or change the caller's RSVP.",
    responses={409: {"description": "The event is full"}},
)
async def rsvp(event_id: str, payload: RSVPRequest, user: CurrentUserDep, service: EventServiceDep) -> ParticipantRead:
    """
    RSVP to an event.

    - **rsvp_status**: `going`, `maybe` or `not_going`. `going` fails with 409 at capacity.
    """
    participant = await service.rsvp(event_id, user.id, payload.rsvp_status)
    return ParticipantRead.model_validate(participant)


@router.delete(
    "/{event_id}/rsvp",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Cancel RSVP",
    description="Withdraw the caller's RSVP.",
    responses={404: {"description": "No RSVP to cancel"}},
)
async def cancel_rsvp(event_id: str, user: CurrentUserDep, service: EventServiceDep) -> None:
    await service.cancel_rsvp(event_id, user.id)


@router.get(
    "/{event_id}/participants",
    response_model=ParticipantList,
    summary="List Participants",
    description="Participants of an event with counts per RSVP status.",
)
async def list_participants(event_id: str, service: EventServiceDep) -> ParticipantList:
    return await service.list_participants(event_id)
