"""Membership tiers and their ordering."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class MembershipTier(str, Enum):
    """Subscription level gating premium features."""

    MEMBER = "MEMBER"  # Free tier.
    PRIVILEGED = "PRIVILEGED"
    PRIVILEGED_PLUS = "PRIVILEGED_PLUS"


TIER_HIERARCHY: Dict[MembershipTier, int] = {
    MembershipTier.MEMBER: 1,
    MembershipTier.PRIVILEGED: 2,
    MembershipTier.PRIVILEGED_PLUS: 3,
}

# Stored subscription tier strings
STORED_TIERS: Dict[str, MembershipTier] = {
    "privileged_plus": MembershipTier.PRIVILEGED_PLUS,
    "privileged": MembershipTier.PRIVILEGED,
}


def normalize_tier(value: Optional[str]) -> MembershipTier:
    """Map a stored or API tier string to a ``MembershipTier``.

    Unknown and missing values map to ``MEMBER``.
    """
    if value is None:
        return MembershipTier.MEMBER
    if isinstance(value, MembershipTier):
        return value
    key = str(value).strip().lower()
    return STORED_TIERS.get(key, MembershipTier.MEMBER)


def tier_level(tier: MembershipTier | str | None) -> int:
    return TIER_HIERARCHY[normalize_tier(tier)]


def tier_satisfies(user_tier: MembershipTier | str | None, required_tier: MembershipTier | str) -> bool:
    """True when ``user_tier`` is at least ``required_tier``."""
    return tier_level(user_tier) >= tier_level(required_tier)


def is_premium(tier: MembershipTier | str | None) -> bool:
    return tier_level(tier) > TIER_HIERARCHY[MembershipTier.MEMBER]
