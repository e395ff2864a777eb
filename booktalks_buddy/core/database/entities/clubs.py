"""
Book club entity models.

This module contains the club itself, its membership rows (which double as
join requests while ``role == 'pending'``), club moderators and the optional
questions a club asks prospective members.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class BookClub(Base, table=True):
    """A reading group led by one user and optionally hosted by a store.

    Table: book_clubs
    """

    __tablename__ = "book_clubs"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=100, index=True)
    description: Optional[str] = Field(default=None, max_length=1000)
    privacy: str = Field(default="public", max_length=16, description="public or private")
    lead_user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    store_id: Optional[str] = Field(default=None, foreign_key="stores.id", index=True, max_length=64)
    current_book_id: Optional[str] = Field(default=None, foreign_key="books.id", max_length=64)

    join_questions_enabled: bool = Field(default=False)
    progress_tracking_enabled: bool = Field(default=False)
    is_premium: bool = Field(default=False)
    is_deleted: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    @property
    def requires_approval(self) -> bool:
        return self.privacy == "private"

    def __repr__(self) -> str:
        return f"BookClub(id={self.id}, name={self.name}, privacy={self.privacy})"


class ClubMember(Base, table=True):
    """Membership of a user in a club.

    ``join_answers`` keeps the answers submitted with the join request as
    ``{"answers": [{question_id, question_text, answer, is_required}], "submitted_at": iso}``.

    Table: club_members
    """

    __tablename__ = "club_members"
    __table_args__ = (
        UniqueConstraint("user_id", "club_id", name="uq_club_members_user_club"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    club_id: str = Field(foreign_key="book_clubs.id", index=True, max_length=64)
    role: str = Field(default="member", max_length=16, description="pending, member, moderator or lead")
    join_answers: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)

    joined_at: datetime = Field(default_factory=utc_now, index=True)

    def __repr__(self) -> str:
        return f"ClubMember(club_id={self.club_id}, user_id={self.user_id}, role={self.role})"


class ClubModerator(Base, table=True):
    """Moderator assignment within a club.

    Table: club_moderators
    """

    __tablename__ = "club_moderators"
    __table_args__ = (
        UniqueConstraint("club_id", "user_id", name="uq_club_moderators_club_user"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    club_id: str = Field(foreign_key="book_clubs.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    assigned_by: Optional[str] = Field(default=None, max_length=64)

    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"ClubModerator(club_id={self.club_id}, user_id={self.user_id})"


class ClubJoinQuestion(Base, table=True):
    """Question shown to prospective members of a club.

    Table: club_join_questions
    """

    __tablename__ = "club_join_questions"
    __table_args__ = (
        UniqueConstraint("club_id", "display_order", name="uq_club_join_questions_club_order"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    club_id: str = Field(foreign_key="book_clubs.id", index=True, max_length=64)
    question_text: str = Field(max_length=200)
    is_required: bool = Field(default=False)
    display_order: int = Field(description="Position 1..5 within the club")

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"ClubJoinQuestion(id={self.id}, club_id={self.club_id}, order={self.display_order})"
