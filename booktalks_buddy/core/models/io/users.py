"""User profile schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: Optional[str] = None
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime


class ProfileUpdate(BaseModel):
    """Profile fields are sanitized and validated by the profile service."""

    username: Optional[str] = Field(default=None, description="3..30 letters, digits, underscores or hyphens")
    display_name: Optional[str] = Field(default=None, description="At most 50 characters")
    bio: Optional[str] = Field(default=None, description="At most 500 characters")
    avatar_url: Optional[str] = None
