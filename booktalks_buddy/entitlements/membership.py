"""
Entitlement calculation and club limits.

Entitlements are derived from four sources, in this order:

1. Platform ownership (``platform_settings.platform_owner_id``), which grants everything
2. The validated subscription tier
3. Store administrator rows (owner / manager)
4. Club leadership and club moderator rows

Calculation is fail-secure: any failure returns ``BASIC_ENTITLEMENTS``.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from booktalks_buddy.core.cache import TTLCache
from booktalks_buddy.core.database.entities.clubs import BookClub, ClubMember, ClubModerator
from booktalks_buddy.core.database.entities.stores import StoreAdministrator
from booktalks_buddy.core.database.entities.users import PlatformSetting
from booktalks_buddy.core.monitoring import log_access_decision
from booktalks_buddy.subscriptions import MembershipTier, SubscriptionValidator

from .constants import (
    ALL_ENTITLEMENTS,
    BASIC_ENTITLEMENTS,
    CLUB_LEAD_ENTITLEMENTS,
    CLUB_LEAD_PREFIX,
    CLUB_MODERATOR_ENTITLEMENTS,
    CLUB_MODERATOR_PREFIX,
    MEMBER_ENTITLEMENTS,
    PLATFORM_OWNER_SETTING_KEY,
    PRIVILEGED_ENTITLEMENTS,
    PRIVILEGED_PLUS_ENTITLEMENTS,
    STORE_MANAGER_ENTITLEMENTS,
    STORE_MANAGER_PREFIX,
    STORE_OWNER_ENTITLEMENTS,
    STORE_OWNER_PREFIX,
)
from .permissions import contextual, has_entitlement

logger = logging.getLogger(__name__)


def tier_entitlements(tier: MembershipTier) -> List[str]:
    if tier == MembershipTier.PRIVILEGED_PLUS:
        return PRIVILEGED_ENTITLEMENTS + PRIVILEGED_PLUS_ENTITLEMENTS
    if tier == MembershipTier.PRIVILEGED:
        return list(PRIVILEGED_ENTITLEMENTS)
    return []


class EntitlementCalculator:
    """Computes and caches a user's entitlements.

    Args:
        session: Async session for role lookups
        validator: Subscription validator deciding the tier
        cache: Shared per-user entitlement cache (optional)
        role_enforcement_enabled: Require a valid subscription for club lead entitlements
        club_create_limit: Clubs a limited creator may lead
        club_join_limit: Clubs a limited joiner may belong to
    """

    def __init__(
        self,
        session: AsyncSession,
        validator: SubscriptionValidator,
        cache: Optional[TTLCache[List[str]]] = None,
        role_enforcement_enabled: bool = False,
        club_create_limit: int = 3,
        club_join_limit: int = 5,
    ) -> None:
        self.session = session
        self.validator = validator
        self.cache = cache
        self.role_enforcement_enabled = role_enforcement_enabled
        self.club_create_limit = club_create_limit
        self.club_join_limit = club_join_limit

    async def _is_platform_owner(self, user_id: str) -> bool:
        setting = await self.session.get(PlatformSetting, PLATFORM_OWNER_SETTING_KEY)
        return setting is not None and setting.value == user_id

    async def calculate(self, user_id: str) -> List[str]:
        """Calculate the entitlements of ``user_id`` from the database."""
        entitlements: List[str] = list(MEMBER_ENTITLEMENTS)
        try:
            if await self._is_platform_owner(user_id):
                return sorted(set(ALL_ENTITLEMENTS))

            status = await self.validator.validate(user_id)
            entitlements.extend(tier_entitlements(status.current_tier))

            admins = await self.session.execute(
                select(StoreAdministrator).where(StoreAdministrator.user_id == user_id)
            )
            for admin in admins.scalars().all():
                if admin.role == "owner":
                    entitlements.append(contextual(STORE_OWNER_PREFIX, admin.store_id))
                    entitlements.extend(STORE_OWNER_ENTITLEMENTS)
                    entitlements.extend(STORE_MANAGER_ENTITLEMENTS)
                elif admin.role == "manager":
                    entitlements.append(contextual(STORE_MANAGER_PREFIX, admin.store_id))
                    entitlements.extend(STORE_MANAGER_ENTITLEMENTS)

            led_clubs = await self.session.execute(
                select(BookClub.id).where(BookClub.lead_user_id == user_id).where(BookClub.is_deleted == False)  # noqa: E712
            )
            led_club_ids = list(led_clubs.scalars().all())
            if led_club_ids:
                if self.role_enforcement_enabled and not status.is_valid:
                    logger.info(f"Club lead entitlements withheld for {user_id}: no valid subscription")
                else:
                    for club_id in led_club_ids:
                        entitlements.append(contextual(CLUB_LEAD_PREFIX, club_id))
                    entitlements.extend(CLUB_LEAD_ENTITLEMENTS)

            moderated = await self.session.execute(select(ClubModerator.club_id).where(ClubModerator.user_id == user_id))
            moderated_ids = list(moderated.scalars().all())
            for club_id in moderated_ids:
                entitlements.append(contextual(CLUB_MODERATOR_PREFIX, club_id))
            if moderated_ids:
                entitlements.extend(CLUB_MODERATOR_ENTITLEMENTS)

            return sorted(set(entitlements))
        except Exception as e:
            logger.error(f"Entitlement calculation failed for {user_id}, falling back to basic: {e}", exc_info=True)
            return list(BASIC_ENTITLEMENTS)

    async def get_entitlements(self, user_id: str, force_refresh: bool = False) -> List[str]:
        """Cached entitlements; ``force_refresh`` bypasses and repopulates the cache."""
        if self.cache is not None and not force_refresh:
            cached = await self.cache.get(user_id)
            if cached is not None:
                return cached
        entitlements = await self.calculate(user_id)
        if self.cache is not None:
            await self.cache.set(user_id, entitlements)
        return entitlements

    async def invalidate(self, *user_ids: str) -> None:
        """Drop cached entitlements and subscription status after a role or tier change."""
        for user_id in user_ids:
            if self.cache is not None:
                await self.cache.invalidate(user_id)
            if self.validator.cache is not None:
                await self.validator.cache.invalidate(user_id)

    async def count_led_clubs(self, user_id: str) -> int:
        result = await self.session.execute(
            select(func.count())
            .select_from(BookClub)
            .where(BookClub.lead_user_id == user_id)
            .where(BookClub.is_deleted == False)  # noqa: E712
        )
        return int(result.scalar_one())

    async def count_memberships(self, user_id: str) -> int:
        """Clubs the user belongs to; pending join requests are not counted."""
        result = await self.session.execute(
            select(func.count())
            .select_from(ClubMember)
            .where(ClubMember.user_id == user_id)
            .where(ClubMember.role != "pending")
        )
        return int(result.scalar_one())

    async def can_create_club(self, user_id: str, entitlements: Optional[List[str]] = None) -> bool:
        ents = entitlements if entitlements is not None else await self.get_entitlements(user_id)
        if has_entitlement(ents, "CAN_CREATE_UNLIMITED_CLUBS"):
            granted = True
        elif has_entitlement(ents, "CAN_CREATE_LIMITED_CLUBS"):
            granted = await self.count_led_clubs(user_id) < self.club_create_limit
        else:
            granted = False
        log_access_decision(user_id, "can_create_club", granted)
        return granted

    async def can_join_club(self, user_id: str, entitlements: Optional[List[str]] = None) -> bool:
        ents = entitlements if entitlements is not None else await self.get_entitlements(user_id)
        if has_entitlement(ents, "CAN_JOIN_UNLIMITED_CLUBS"):
            granted = True
        elif has_entitlement(ents, "CAN_JOIN_LIMITED_CLUBS"):
            granted = await self.count_memberships(user_id) < self.club_join_limit
        else:
            granted = False
        log_access_decision(user_id, "can_join_club", granted)
        return granted


_entitlements_cache: Optional[TTLCache[List[str]]] = None


def get_entitlements_cache(ttl_seconds: int = 300, max_size: int = 10000) -> TTLCache[List[str]]:
    """Process-wide entitlement cache, created on first use."""
    global _entitlements_cache
    if _entitlements_cache is None:
        _entitlements_cache = TTLCache(ttl=ttl_seconds, max_size=max_size)
    return _entitlements_cache
