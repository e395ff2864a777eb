"""
Service for store events and RSVPs.

Events are hosted by a store and may be tied to one of its clubs. Store
owners and managers create them; members RSVP.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional

from sqlalchemy import delete, func
from sqlmodel import select

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.events import Event, EventParticipant
from booktalks_buddy.core.database.entities.stores import Store
from booktalks_buddy.core.errors import ConflictError, NotFoundError, ValidationError
from booktalks_buddy.core.models.domain import RSVPStatus
from booktalks_buddy.core.models.io.events import EventCreate, EventUpdate, ParticipantList, ParticipantRead
from booktalks_buddy.entitlements import can_manage_store_events

from .base import BaseService
from .notifications import NotificationService

logger = logging.getLogger(__name__)


class EventService(BaseService):
    """Event lifecycle and participation."""

    @property
    def notifications(self) -> NotificationService:
        return NotificationService(self.session)

    async def _event(self, event_id: str) -> Event:
        return await self.get_or_404(Event, event_id, "Event not found")

    async def _participant_ids(self, event_id: str, exclude: Optional[str] = None) -> List[str]:
        statement = select(EventParticipant.user_id).where(EventParticipant.event_id == event_id)
        if exclude:
            statement = statement.where(EventParticipant.user_id != exclude)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def _require_editor(self, event: Event, user_id: str) -> None:
        if event.created_by == user_id:
            return
        ents = await self.entitlements(user_id)
        self.require(can_manage_store_events(ents, event.store_id), "You cannot manage this event")

    async def create_event(self, user_id: str, payload: EventCreate) -> Event:
        """Create an event; a club event notifies every member of the club."""
        await self.get_or_404(Store, payload.store_id, "Store not found")
        ents = await self.entitlements(user_id)
        self.require(can_manage_store_events(ents, payload.store_id), "Only store administrators can create events")
        if payload.club_id:
            club = await self.get_club(payload.club_id)
            if club.store_id and club.store_id != payload.store_id:
                raise ValidationError("Club is hosted by another store", field="club_id")

        event = Event(**payload.model_dump(), created_by=user_id)
        self.session.add(event)
        await self.session.flush()

        if event.club_id:
            self.notifications.notify_many(
                await self.club_member_ids(event.club_id, exclude=user_id),
                type="event_created",
                title="New club event",
                message=f"{event.title} on {event.start_time:%Y-%m-%d %H:%M}",
                data={"event_id": event.id, "club_id": event.club_id},
                category="event",
            )
        await self.session.commit()
        await self.session.refresh(event)
        logger.info(f"Event {event.id} created by {user_id} in store {event.store_id}")
        return event

    async def get_event(self, event_id: str) -> Event:
        return await self._event(event_id)

    async def list_events(
        self,
        store_id: Optional[str] = None,
        club_id: Optional[str] = None,
        featured: Optional[bool] = None,
        upcoming: bool = True,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Event]:
        statement = select(Event)
        if store_id:
            statement = statement.where(Event.store_id == store_id)
        if club_id:
            statement = statement.where(Event.club_id == club_id)
        if featured is not None:
            statement = statement.where(Event.featured == featured)
        if upcoming:
            statement = statement.where(Event.start_time >= utc_now())
        statement = statement.order_by(Event.start_time).offset(offset).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def update_event(self, event_id: str, user_id: str, payload: EventUpdate) -> Event:
        event = await self._event(event_id)
        await self._require_editor(event, user_id)
        changes = payload.model_dump(exclude_unset=True)
        for key, value in changes.items():
            setattr(event, key, value)
        if event.end_time is not None and event.end_time <= event.start_time:
            raise ValidationError("end_time must be after start_time", field="end_time")

        self.notifications.notify_many(
            await self._participant_ids(event_id, exclude=user_id),
            type="event_updated",
            title="Event updated",
            message=f"{event.title} has been updated",
            data={"event_id": event_id},
            category="event",
        )
        await self.session.commit()
        await self.session.refresh(event)
        logger.info(f"Event {event_id} updated by {user_id}: {sorted(changes)}")
        return event

    async def delete_event(self, event_id: str, user_id: str) -> None:
        event = await self._event(event_id)
        await self._require_editor(event, user_id)
        self.notifications.notify_many(
            await self._participant_ids(event_id, exclude=user_id),
            type="event_cancelled",
            title="Event cancelled",
            message=f"{event.title} has been cancelled",
            data={"event_id": event_id},
            priority="high",
            category="event",
        )
        await self.session.execute(delete(EventParticipant).where(EventParticipant.event_id == event_id))
        await self.session.delete(event)
        await self.session.commit()
        logger.info(f"Event {event_id} cancelled by {user_id}")

    async def _going_count(self, event_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(EventParticipant)
            .where(EventParticipant.event_id == event_id)
            .where(EventParticipant.rsvp_status == RSVPStatus.going.value)
        )
        return int(result.scalar_one())

    async def rsvp(self, event_id: str, user_id: str, status: RSVPStatus) -> EventParticipant:
        """
        Create or change the caller's RSVP.

        Raises:
            ConflictError: ``going`` while the event already has ``max_participants`` going
        """
        event = await self._event(event_id)
        result = await self.session.execute(
            select(EventParticipant)
            .where(EventParticipant.event_id == event_id)
            .where(EventParticipant.user_id == user_id)
        )
        participant = result.scalars().first()

        already_going = participant is not None and participant.rsvp_status == RSVPStatus.going.value
        if status == RSVPStatus.going and not already_going and event.max_participants is not None:
            if await self._going_count(event_id) >= event.max_participants:
                raise ConflictError("This event is full")

        if participant is None:
            participant = EventParticipant(event_id=event_id, user_id=user_id, rsvp_status=status.value)
            self.session.add(participant)
        else:
            participant.rsvp_status = status.value
            participant.rsvp_at = utc_now()
        await self.session.commit()
        await self.session.refresh(participant)
        logger.info(f"User {user_id} RSVP {status.value} to event {event_id}")
        return participant

    async def cancel_rsvp(self, event_id: str, user_id: str) -> None:
        await self._event(event_id)
        result = await self.session.execute(
            select(EventParticipant)
            .where(EventParticipant.event_id == event_id)
            .where(EventParticipant.user_id == user_id)
        )
        participant = result.scalars().first()
        if participant is None:
            raise NotFoundError("RSVP not found")
        await self.session.delete(participant)
        await self.session.commit()
        logger.info(f"User {user_id} cancelled RSVP to event {event_id}")

    async def list_participants(self, event_id: str) -> ParticipantList:
        await self._event(event_id)
        result = await self.session.execute(
            select(EventParticipant)
            .where(EventParticipant.event_id == event_id)
            .order_by(EventParticipant.rsvp_at)
        )
        participants = list(result.scalars().all())
        counts = Counter(p.rsvp_status for p in participants)
        return ParticipantList(
            participants=[ParticipantRead.model_validate(p) for p in participants],
            counts={status.value: counts.get(status.value, 0) for status in RSVPStatus},
        )
