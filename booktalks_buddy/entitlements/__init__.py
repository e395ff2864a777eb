"""Named permission flags computed from tiers and roles."""

from .membership import EntitlementCalculator, get_entitlements_cache, tier_entitlements
from .permissions import (
    can_manage_club,
    can_manage_store,
    can_manage_store_events,
    can_manage_store_managers,
    can_manage_user_tiers,
    can_moderate_club,
    has_contextual_entitlement,
    has_entitlement,
    highest_role_context,
    is_platform_owner,
    is_store_admin,
)

__all__ = [
    "EntitlementCalculator",
    "can_manage_club",
    "can_manage_store",
    "can_manage_store_events",
    "can_manage_store_managers",
    "can_manage_user_tiers",
    "can_moderate_club",
    "get_entitlements_cache",
    "has_contextual_entitlement",
    "has_entitlement",
    "highest_role_context",
    "is_platform_owner",
    "is_store_admin",
    "tier_entitlements",
]
