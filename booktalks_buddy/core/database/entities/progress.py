"""
Reading progress entity model.

One row per member, club and book. Progress may be expressed as a percentage
or as a chapter/page position out of a total.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class MemberReadingProgress(Base, table=True):
    """Table: member_reading_progress"""

    __tablename__ = "member_reading_progress"
    __table_args__ = (
        UniqueConstraint("club_id", "user_id", "book_id", name="uq_member_reading_progress_club_user_book"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    club_id: str = Field(foreign_key="book_clubs.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    book_id: Optional[str] = Field(default=None, foreign_key="books.id", max_length=64)

    status: str = Field(default="not_started", max_length=16)
    progress_type: Optional[str] = Field(default=None, max_length=16)
    current_progress: Optional[int] = Field(default=None)
    total_progress: Optional[int] = Field(default=None)
    progress_percentage: Optional[float] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=500)
    is_private: bool = Field(default=False)

    started_at: Optional[datetime] = Field(default=None)
    finished_at: Optional[datetime] = Field(default=None)
    last_updated: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"MemberReadingProgress(club_id={self.club_id}, user_id={self.user_id}, status={self.status})"
