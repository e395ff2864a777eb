"""Reading progress schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from booktalks_buddy.core.models.domain import ProgressStatus, ProgressType


class ProgressUpdate(BaseModel):
    """
    Progress the member reports for a club book.

    For ``reading`` with ``percentage`` the percentage is required; for
    ``chapter``/``page`` the current and total counts are.
    """

    status: ProgressStatus
    progress_type: Optional[ProgressType] = None
    current_progress: Optional[int] = Field(default=None, ge=0)
    total_progress: Optional[int] = Field(default=None, ge=1)
    progress_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = Field(default=None, max_length=500)
    is_private: bool = Field(default=False, description="Hide this entry from other members")
    book_id: Optional[str] = Field(default=None, description="Defaults to the club's current book")


class ProgressRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    club_id: str
    user_id: str
    book_id: Optional[str] = None
    status: ProgressStatus
    progress_type: Optional[ProgressType] = None
    current_progress: Optional[int] = None
    total_progress: Optional[int] = None
    progress_percentage: Optional[float] = None
    notes: Optional[str] = None
    is_private: bool
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    last_updated: datetime


class ProgressStats(BaseModel):
    total_members: int
    not_started_count: int
    reading_count: int
    finished_count: int
    completion_percentage: float


class TrackingToggle(BaseModel):
    enabled: bool
