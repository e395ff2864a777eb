"""Event and RSVP schemas."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from booktalks_buddy.core.models.domain import RSVPStatus


def naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    start_time: datetime
    end_time: Optional[datetime] = None
    location: Optional[str] = Field(default=None, max_length=300)
    is_virtual: bool = False
    virtual_meeting_url: Optional[str] = Field(default=None, max_length=500)
    max_participants: Optional[int] = Field(default=None, ge=1)
    featured: bool = False
    store_id: str = Field(..., description="Store hosting the event")
    club_id: Optional[str] = Field(default=None, description="Club whose members are invited")

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, value: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(value)

    @model_validator(mode="after")
    def check_times(self) -> "EventCreate":
        if self.end_time is not None and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = Field(default=None, max_length=300)
    is_virtual: Optional[bool] = None
    virtual_meeting_url: Optional[str] = Field(default=None, max_length=500)
    max_participants: Optional[int] = Field(default=None, ge=1)
    featured: Optional[bool] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_times(cls, value: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(value)


class EventRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    is_virtual: bool
    virtual_meeting_url: Optional[str] = None
    max_participants: Optional[int] = None
    featured: bool
    store_id: str
    club_id: Optional[str] = None
    created_by: str
    created_at: datetime
    updated_at: datetime


class RSVPRequest(BaseModel):
    rsvp_status: RSVPStatus = RSVPStatus.going


class ParticipantRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event_id: str
    user_id: str
    rsvp_status: RSVPStatus
    rsvp_at: datetime


class ParticipantList(BaseModel):
    participants: List[ParticipantRead]
    counts: Dict[str, int] = Field(description="Participants per RSVP status")
