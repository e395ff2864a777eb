"""
Permission checks over a computed entitlement list.

All functions are pure: they take the user's entitlements (as returned by
``EntitlementCalculator.get_entitlements``) and answer one question.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .constants import (
    CLUB_LEAD_PREFIX,
    CLUB_MODERATOR_PREFIX,
    STORE_MANAGER_PREFIX,
    STORE_OWNER_PREFIX,
)

# Context priority when several roles apply
ROLE_CONTEXT_PRIORITY = {"platform": 3, "store": 2, "club": 1}


def contextual(prefix: str, context_id: str) -> str:
    return f"{prefix}_{context_id}"


def has_entitlement(entitlements: Iterable[str], entitlement: str) -> bool:
    return entitlement in set(entitlements)


def has_contextual_entitlement(entitlements: Iterable[str], prefix: str, context_id: Optional[str]) -> bool:
    """True when the user holds ``{prefix}_{context_id}``. A missing context never matches."""
    if not context_id:
        return False
    return contextual(prefix, context_id) in set(entitlements)


def is_store_admin(entitlements: Iterable[str], store_id: Optional[str]) -> bool:
    ents = set(entitlements)
    return has_contextual_entitlement(ents, STORE_OWNER_PREFIX, store_id) or has_contextual_entitlement(
        ents, STORE_MANAGER_PREFIX, store_id
    )


def can_manage_club(entitlements: Iterable[str], club_id: str, store_id: Optional[str] = None) -> bool:
    """Club lead, an administrator of the hosting store, or a holder of CAN_MANAGE_ALL_CLUBS."""
    ents = set(entitlements)
    return (
        "CAN_MANAGE_ALL_CLUBS" in ents
        or has_contextual_entitlement(ents, CLUB_LEAD_PREFIX, club_id)
        or is_store_admin(ents, store_id)
    )


def can_moderate_club(entitlements: Iterable[str], club_id: str, store_id: Optional[str] = None) -> bool:
    ents = set(entitlements)
    return can_manage_club(ents, club_id, store_id) or has_contextual_entitlement(ents, CLUB_MODERATOR_PREFIX, club_id)


def can_manage_store(entitlements: Iterable[str], store_id: str) -> bool:
    """Store settings belong to the store's owners only."""
    ents = set(entitlements)
    return "CAN_MANAGE_STORE_SETTINGS" in ents and has_contextual_entitlement(ents, STORE_OWNER_PREFIX, store_id)


def can_manage_store_events(entitlements: Iterable[str], store_id: str) -> bool:
    return is_store_admin(entitlements, store_id)


def can_manage_store_managers(entitlements: Iterable[str], store_id: str) -> bool:
    ents = set(entitlements)
    return "CAN_MANAGE_STORE_MANAGERS" in ents and has_contextual_entitlement(ents, STORE_OWNER_PREFIX, store_id)


def can_manage_user_tiers(entitlements: Iterable[str], store_id: str) -> bool:
    ents = set(entitlements)
    return "CAN_MANAGE_USER_TIERS" in ents and is_store_admin(ents, store_id)


def is_platform_owner(entitlements: Iterable[str]) -> bool:
    return "CAN_MANAGE_PLATFORM_SETTINGS" in set(entitlements)


def highest_role_context(entitlements: Iterable[str]) -> Optional[str]:
    """Most senior context the user administers: ``platform``, ``store``, ``club`` or None."""
    ents = set(entitlements)
    contexts = []
    if is_platform_owner(ents):
        contexts.append("platform")
    if any(e.startswith(f"{STORE_OWNER_PREFIX}_") or e.startswith(f"{STORE_MANAGER_PREFIX}_") for e in ents):
        contexts.append("store")
    if any(e.startswith(f"{CLUB_LEAD_PREFIX}_") or e.startswith(f"{CLUB_MODERATOR_PREFIX}_") for e in ents):
        contexts.append("club")
    if not contexts:
        return None
    return max(contexts, key=lambda c: ROLE_CONTEXT_PRIORITY[c])
