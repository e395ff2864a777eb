"""
Book nomination entity models.

Members nominate catalog books for their club's next read and like each
other's nominations.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class BookNomination(Base, table=True):
    """Table: book_nominations"""

    __tablename__ = "book_nominations"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    club_id: str = Field(foreign_key="book_clubs.id", index=True, max_length=64)
    book_id: str = Field(foreign_key="books.id", index=True, max_length=64)
    nominated_by: str = Field(foreign_key="users.id", max_length=64)
    status: str = Field(default="active", max_length=16)

    nominated_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"BookNomination(id={self.id}, club_id={self.club_id}, book_id={self.book_id})"


class NominationLike(Base, table=True):
    """Table: nomination_likes"""

    __tablename__ = "nomination_likes"
    __table_args__ = (
        UniqueConstraint("nomination_id", "user_id", name="uq_nomination_likes_nomination_user"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    nomination_id: str = Field(foreign_key="book_nominations.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", max_length=64)

    liked_at: datetime = Field(default_factory=utc_now)
