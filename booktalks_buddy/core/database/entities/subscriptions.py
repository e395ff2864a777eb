"""
Subscription entity models.

A user holds zero or more subscription records; the newest active one that
has not ended decides the membership tier.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import Base, new_id, utc_now


class UserSubscription(Base, table=True):
    """Paid membership period for a user.

    ``tier`` holds the stored tier string: ``member``, ``privileged`` or
    ``privileged_plus``.

    Table: user_subscriptions
    """

    __tablename__ = "user_subscriptions"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    tier: str = Field(default="privileged", max_length=32)
    start_date: datetime = Field(default_factory=utc_now)
    end_date: datetime = Field(index=True)
    is_active: bool = Field(default=True, index=True)
    payment_reference: Optional[str] = Field(default=None, max_length=200)
    store_id: Optional[str] = Field(default=None, foreign_key="stores.id", max_length=64)
    created_by: Optional[str] = Field(default=None, max_length=64)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"UserSubscription(id={self.id}, user_id={self.user_id}, tier={self.tier}, active={self.is_active})"
