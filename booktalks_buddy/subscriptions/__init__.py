"""Membership tiers and fail-secure subscription validation."""

from .tiers import TIER_HIERARCHY, MembershipTier, is_premium, normalize_tier, tier_level, tier_satisfies
from .validation import (
    SubscriptionStatus,
    SubscriptionValidator,
    ValidationOptions,
    fail_secure_status,
    get_status_cache,
    status_from_subscription,
)

__all__ = [
    "TIER_HIERARCHY",
    "MembershipTier",
    "SubscriptionStatus",
    "SubscriptionValidator",
    "ValidationOptions",
    "fail_secure_status",
    "get_status_cache",
    "is_premium",
    "normalize_tier",
    "status_from_subscription",
    "tier_level",
    "tier_satisfies",
]
