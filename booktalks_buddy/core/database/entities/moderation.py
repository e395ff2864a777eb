"""
Reporting and moderation entity models.

Reports are raised by users against content or other users; moderation
actions record what a moderator did about it.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Report(Base, table=True):
    """Table: reports"""

    __tablename__ = "reports"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    reporter_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    target_type: str = Field(max_length=32)
    target_id: Optional[str] = Field(default=None, max_length=64)
    target_user_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64)
    reason: str = Field(max_length=32)
    description: str = Field(max_length=2000)
    severity: str = Field(max_length=16)
    priority: int = Field(default=3, description="1 highest .. 5 lowest")
    club_id: Optional[str] = Field(default=None, foreign_key="book_clubs.id", index=True, max_length=64)
    store_id: Optional[str] = Field(default=None, foreign_key="stores.id", index=True, max_length=64)
    status: str = Field(default="pending", max_length=16, index=True)

    resolved_by: Optional[str] = Field(default=None, max_length=64)
    resolved_at: Optional[datetime] = Field(default=None)
    resolution_action: Optional[str] = Field(default=None, max_length=64)
    resolution_notes: Optional[str] = Field(default=None, max_length=2000)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Report(id={self.id}, reason={self.reason}, status={self.status})"


class ModerationAction(Base, table=True):
    """Table: moderation_actions"""

    __tablename__ = "moderation_actions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    action_type: str = Field(max_length=32)
    target_type: str = Field(max_length=32)
    target_id: str = Field(max_length=64)
    target_user_id: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64)
    moderator_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    moderator_role: str = Field(max_length=32)
    reason: str = Field(max_length=2000)
    severity: str = Field(max_length=16)
    duration_hours: Optional[int] = Field(default=None)
    expires_at: Optional[datetime] = Field(default=None)
    club_id: Optional[str] = Field(default=None, foreign_key="book_clubs.id", index=True, max_length=64)
    store_id: Optional[str] = Field(default=None, foreign_key="stores.id", max_length=64)
    related_report_id: Optional[str] = Field(default=None, foreign_key="reports.id", max_length=64)
    status: str = Field(default="active", max_length=16)

    revoked_by: Optional[str] = Field(default=None, max_length=64)
    revoked_at: Optional[datetime] = Field(default=None)
    revoked_reason: Optional[str] = Field(default=None, max_length=1000)

    created_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"ModerationAction(id={self.id}, action_type={self.action_type}, status={self.status})"
