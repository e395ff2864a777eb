"""Entitlement names and the sets granted by each tier and role."""

from typing import List

BASIC_ENTITLEMENTS: List[str] = [
    "CAN_VIEW_PUBLIC_CLUBS",
    "CAN_JOIN_PUBLIC_CLUBS",
    "CAN_PARTICIPATE_IN_DISCUSSIONS",
    "CAN_EDIT_OWN_PROFILE",
    "CAN_VIEW_STORE_EVENTS",
]

MEMBER_ENTITLEMENTS: List[str] = BASIC_ENTITLEMENTS + [
    "CAN_JOIN_LIMITED_CLUBS",
    "CAN_NOMINATE_BOOKS",
    "CAN_RSVP_EVENTS",
]

PRIVILEGED_ENTITLEMENTS: List[str] = [
    "CAN_ACCESS_PREMIUM_CONTENT",
    "CAN_JOIN_PREMIUM_CLUBS",
    "CAN_ACCESS_PREMIUM_EVENTS",
    "CAN_CREATE_LIMITED_CLUBS",
    "CAN_JOIN_UNLIMITED_CLUBS",
]

PRIVILEGED_PLUS_ENTITLEMENTS: List[str] = [
    "CAN_JOIN_EXCLUSIVE_CLUBS",
    "CAN_ACCESS_EXCLUSIVE_CONTENT",
    "CAN_CREATE_UNLIMITED_CLUBS",
]

CLUB_LEAD_ENTITLEMENTS: List[str] = [
    "CAN_MANAGE_CLUB_SETTINGS",
    "CAN_DELETE_OWN_CLUB",
    "CAN_SET_CLUB_CURRENT_BOOK",
    "CAN_MANAGE_CLUB_JOIN_REQUESTS",
    "CAN_REMOVE_CLUB_MEMBERS",
    "CAN_ASSIGN_CLUB_MODERATORS",
]

CLUB_MODERATOR_ENTITLEMENTS: List[str] = [
    "CAN_DELETE_CLUB_POSTS",
    "CAN_LOCK_CLUB_TOPICS",
    "CAN_ISSUE_MEMBER_WARNINGS",
]

STORE_MANAGER_ENTITLEMENTS: List[str] = [
    "CAN_MANAGE_USER_TIERS",
    "CAN_MANAGE_ALL_CLUBS",
    "CAN_MANAGE_STORE_EVENTS",
    "CAN_VIEW_STORE_ANALYTICS",
    "CAN_ASSIGN_CLUB_LEADS",
    "CAN_MODERATE_STORE_CONTENT",
]

STORE_OWNER_ENTITLEMENTS: List[str] = [
    "CAN_MANAGE_STORE_MANAGERS",
    "CAN_MANAGE_STORE_SETTINGS",
    "CAN_MANAGE_STORE_BILLING",
]

PLATFORM_OWNER_ENTITLEMENTS: List[str] = [
    "CAN_CREATE_STORES",
    "CAN_DELETE_STORES",
    "CAN_ASSIGN_STORE_OWNERS",
    "CAN_VIEW_ALL_STORES",
    "CAN_MANAGE_PLATFORM_SETTINGS",
    "CAN_VIEW_PLATFORM_ANALYTICS",
]

# Platform owner receives every set
ALL_ENTITLEMENTS: List[str] = sorted(
    set(
        MEMBER_ENTITLEMENTS
        + PRIVILEGED_ENTITLEMENTS
        + PRIVILEGED_PLUS_ENTITLEMENTS
        + CLUB_LEAD_ENTITLEMENTS
        + CLUB_MODERATOR_ENTITLEMENTS
        + STORE_MANAGER_ENTITLEMENTS
        + STORE_OWNER_ENTITLEMENTS
        + PLATFORM_OWNER_ENTITLEMENTS
    )
)

# Contextual prefixes, combined with an id as f"{prefix}_{id}"
CLUB_LEAD_PREFIX = "CLUB_LEAD"
CLUB_MODERATOR_PREFIX = "CLUB_MODERATOR"
STORE_OWNER_PREFIX = "STORE_OWNER"
STORE_MANAGER_PREFIX = "STORE_MANAGER"

PLATFORM_OWNER_SETTING_KEY = "platform_owner_id"
