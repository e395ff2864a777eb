"""
Notification entity model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class Notification(Base, table=True):
    """In-app notification addressed to one user.

    Table: notifications
    """

    __tablename__ = "notifications"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    type: str = Field(max_length=64, index=True)
    title: str = Field(max_length=200)
    message: str = Field(max_length=2000)
    data: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    priority: str = Field(default="normal", max_length=16)
    category: str = Field(default="general", max_length=64)
    is_read: bool = Field(default=False, index=True)
    read_at: Optional[datetime] = Field(default=None)
    expires_at: Optional[datetime] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"Notification(id={self.id}, user_id={self.user_id}, type={self.type})"
