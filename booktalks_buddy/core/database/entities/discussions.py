"""
Discussion entity models.

Topics belong to a club; posts belong to a topic and may reply to another
post through ``parent_post_id``, forming a thread.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class DiscussionTopic(Base, table=True):
    """Table: discussion_topics"""

    __tablename__ = "discussion_topics"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    club_id: str = Field(foreign_key="book_clubs.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    title: str = Field(max_length=200)
    content: Optional[str] = Field(default=None, max_length=5000)
    is_pinned: bool = Field(default=False)
    is_locked: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"DiscussionTopic(id={self.id}, club_id={self.club_id}, title={self.title})"


class DiscussionPost(Base, table=True):
    """Table: discussion_posts"""

    __tablename__ = "discussion_posts"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    topic_id: str = Field(foreign_key="discussion_topics.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    parent_post_id: Optional[str] = Field(default=None, foreign_key="discussion_posts.id", max_length=64)
    content: str = Field(max_length=5000)
    is_deleted: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"DiscussionPost(id={self.id}, topic_id={self.topic_id})"
