"""
User and platform entity models.

Users mirror the identity provider's accounts: the row is created the first
time a verified token is seen. ``platform_settings`` is a small key/value
table; ``platform_owner_id`` names the platform owner.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, utc_now


class User(Base, table=True):
    """Application profile for an authenticated account.

    Table: users
    """

    __tablename__ = "users"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(primary_key=True, max_length=64)
    email: Optional[str] = Field(default=None, max_length=254, index=True)
    username: Optional[str] = Field(default=None, max_length=30, unique=True, index=True)
    display_name: Optional[str] = Field(default=None, max_length=50)
    avatar_url: Optional[str] = Field(default=None)
    bio: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"User(id={self.id}, username={self.username})"


class PlatformSetting(Base, table=True):
    """Platform-wide key/value setting.

    Table: platform_settings
    """

    __tablename__ = "platform_settings"
    __table_args__ = ({"extend_existing": True},)

    key: str = Field(primary_key=True, max_length=100)
    value: str = Field(description="Setting value")
    updated_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"PlatformSetting(key={self.key})"
