"""Discussion topic and post schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TopicCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, max_length=5000)


class TopicModerate(BaseModel):
    is_pinned: Optional[bool] = None
    is_locked: Optional[bool] = None


class TopicRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    club_id: str
    user_id: str
    title: str
    content: Optional[str] = None
    is_pinned: bool
    is_locked: bool
    created_at: datetime
    updated_at: datetime
    post_count: Optional[int] = None


class PostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)
    parent_post_id: Optional[str] = Field(default=None, description="Post being replied to")


class PostUpdate(BaseModel):
    content: str = Field(..., min_length=1, max_length=5000)


class PostRead(BaseModel):
    """A post with its replies nested underneath."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    topic_id: str
    user_id: str
    parent_post_id: Optional[str] = None
    content: str
    is_deleted: bool
    created_at: datetime
    updated_at: datetime
    replies: List["PostRead"] = Field(default_factory=list)
