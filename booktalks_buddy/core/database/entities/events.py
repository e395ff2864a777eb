"""
Event entity models.

Events are created by store administrators, optionally scoped to one club.
RSVPs live in ``event_participants``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Event(Base, table=True):
    """Table: events"""

    __tablename__ = "events"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    start_time: datetime = Field(index=True)
    end_time: Optional[datetime] = Field(default=None)
    location: Optional[str] = Field(default=None, max_length=300)
    is_virtual: bool = Field(default=False)
    virtual_meeting_url: Optional[str] = Field(default=None, max_length=500)
    max_participants: Optional[int] = Field(default=None)
    featured: bool = Field(default=False)
    store_id: str = Field(foreign_key="stores.id", index=True, max_length=64)
    club_id: Optional[str] = Field(default=None, foreign_key="book_clubs.id", index=True, max_length=64)
    created_by: str = Field(foreign_key="users.id", max_length=64)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Event(id={self.id}, title={self.title}, start_time={self.start_time})"


class EventParticipant(Base, table=True):
    """Table: event_participants"""

    __tablename__ = "event_participants"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_event_participants_event_user"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    event_id: str = Field(foreign_key="events.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    rsvp_status: str = Field(default="going", max_length=16)

    rsvp_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"EventParticipant(event_id={self.event_id}, user_id={self.user_id}, status={self.rsvp_status})"
