"""Notification schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from booktalks_buddy.core.models.domain import NotificationPriority


class NotificationCreate(BaseModel):
    """Notification produced by another service for one user."""

    user_id: str
    type: str = Field(..., max_length=64, examples=["join_request_approved"])
    title: str = Field(..., max_length=200)
    message: str = Field(..., max_length=2000)
    data: Optional[Dict[str, Any]] = None
    priority: NotificationPriority = NotificationPriority.normal
    category: str = Field(default="general", max_length=64)
    expires_at: Optional[datetime] = None


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    type: str
    title: str
    message: str
    data: Optional[Dict[str, Any]] = None
    priority: NotificationPriority
    category: str
    is_read: bool
    read_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    created_at: datetime


class UnreadCount(BaseModel):
    count: int


class MarkAllReadResult(BaseModel):
    updated: int
