"""Subscription and entitlement schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from booktalks_buddy.subscriptions import MembershipTier

from .events import naive_utc


class SubscriptionCreate(BaseModel):
    """Paid membership recorded by a store administrator."""

    user_id: str
    tier: Literal["PRIVILEGED", "PRIVILEGED_PLUS"]
    end_date: datetime
    start_date: Optional[datetime] = None
    payment_reference: Optional[str] = Field(default=None, max_length=200)

    @field_validator("start_date", "end_date")
    @classmethod
    def normalize_dates(cls, value: Optional[datetime]) -> Optional[datetime]:
        return naive_utc(value)


class SubscriptionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    tier: str
    start_date: datetime
    end_date: datetime
    is_active: bool
    payment_reference: Optional[str] = None
    store_id: Optional[str] = None
    created_by: Optional[str] = None


class SubscriptionStatusRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    has_active_subscription: bool
    current_tier: MembershipTier
    subscription_expiry: Optional[datetime] = None
    is_valid: bool
    last_validated: datetime
    validation_source: str
    warnings: List[str] = Field(default_factory=list)


class EntitlementsRead(BaseModel):
    user_id: str
    entitlements: List[str]
    subscription: SubscriptionStatusRead
    highest_role_context: Optional[str] = None
