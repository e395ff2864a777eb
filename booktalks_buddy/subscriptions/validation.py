"""
Subscription validation.

Resolves a user's current membership tier from their subscription records.
Validation is fail-secure: a missing user id, a database error or a timeout
all produce a ``MEMBER`` status that grants no premium access.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import List, Literal, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from booktalks_buddy.core.cache import TTLCache
from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.subscriptions import UserSubscription
from booktalks_buddy.core.monitoring import log_access_decision

from .tiers import MembershipTier, normalize_tier, tier_satisfies

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 5000
MAX_TIMEOUT_MS = 10000
MIN_CACHE_TTL_SECONDS = 60

ValidationSource = Literal["database", "cache", "fallback"]


@dataclass(frozen=True)
class ValidationOptions:
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    use_cache: bool = True
    fail_secure: bool = True

    def effective_timeout_seconds(self) -> float:
        return min(max(self.timeout_ms, 1), MAX_TIMEOUT_MS) / 1000


@dataclass(frozen=True)
class SubscriptionStatus:
    """Result of validating a user's subscription."""

    has_active_subscription: bool
    current_tier: MembershipTier
    subscription_expiry: Optional[datetime]
    is_valid: bool
    last_validated: datetime
    validation_source: ValidationSource
    warnings: List[str] = field(default_factory=list)


def fail_secure_status(reason: str) -> SubscriptionStatus:
    """Status used whenever validation cannot complete."""
    return SubscriptionStatus(
        has_active_subscription=False,
        current_tier=MembershipTier.MEMBER,
        subscription_expiry=None,
        is_valid=False,
        last_validated=utc_now(),
        validation_source="fallback",
        warnings=[f"Validation failed: {reason}"],
    )


def status_from_subscription(
    subscription: Optional[UserSubscription], now: Optional[datetime] = None
) -> SubscriptionStatus:
    """Build a status from the newest active subscription row (or its absence)."""
    now = now or utc_now()
    if subscription is None:
        return SubscriptionStatus(
            has_active_subscription=False,
            current_tier=MembershipTier.MEMBER,
            subscription_expiry=None,
            is_valid=False,
            last_validated=now,
            validation_source="database",
        )

    warnings: List[str] = []
    expired = subscription.end_date < now
    if expired:
        warnings.append("Subscription is marked active but has expired")

    has_active = bool(subscription.is_active) and not expired
    tier = normalize_tier(subscription.tier) if has_active else MembershipTier.MEMBER
    return SubscriptionStatus(
        has_active_subscription=has_active,
        current_tier=tier,
        subscription_expiry=subscription.end_date,
        is_valid=has_active and tier != MembershipTier.MEMBER,
        last_validated=now,
        validation_source="database",
        warnings=warnings,
    )


class SubscriptionValidator:
    """Validates subscriptions against the database with a timeout and a TTL cache.

    Args:
        session: Async session used for the lookup
        cache: Shared status cache
        default_options: Options used when a call passes none
    """

    def __init__(
        self,
        session: AsyncSession,
        cache: Optional[TTLCache[SubscriptionStatus]] = None,
        default_options: Optional[ValidationOptions] = None,
    ) -> None:
        self.session = session
        self.cache = cache
        self.default_options = default_options or ValidationOptions()

    async def _fetch_active_subscription(self, user_id: str) -> Optional[UserSubscription]:
        statement = (
            select(UserSubscription)
            .where(UserSubscription.user_id == user_id)
            .where(UserSubscription.is_active == True)  # noqa: E712
            .where(UserSubscription.end_date >= utc_now())
            .order_by(UserSubscription.end_date.desc())
            .limit(1)
        )
        result = await self.session.execute(statement)
        return result.scalars().first()

    async def validate(self, user_id: Optional[str], options: Optional[ValidationOptions] = None) -> SubscriptionStatus:
        """
        Validate the subscription of ``user_id``.

        Args:
            user_id: User to validate; None or blank yields the fail-secure status.
            options: Timeout, cache and fail-secure switches.

        Returns:
            The subscription status. Never raises while ``fail_secure`` is set.
        """
        opts = options or self.default_options
        if not user_id or not str(user_id).strip():
            logger.warning("Subscription validation called without a user id")
            return fail_secure_status("missing user id")

        if opts.use_cache and self.cache is not None:
            cached = await self.cache.get(user_id)
            if cached is not None:
                return replace(cached, validation_source="cache")

        try:
            subscription = await asyncio.wait_for(
                self._fetch_active_subscription(user_id), timeout=opts.effective_timeout_seconds()
            )
        except asyncio.TimeoutError:
            logger.warning(f"Subscription validation timed out for user {user_id}")
            if not opts.fail_secure:
                raise
            return fail_secure_status("timeout")
        except Exception as e:
            logger.error(f"Subscription validation failed for user {user_id}: {e}")
            if not opts.fail_secure:
                raise
            return fail_secure_status(str(e) or type(e).__name__)

        status = status_from_subscription(subscription)
        for warning in status.warnings:
            logger.warning(f"Subscription warning for user {user_id}: {warning}")
        if opts.use_cache and self.cache is not None:
            await self.cache.set(user_id, status)
        logger.debug(f"Validated subscription for {user_id}: tier={status.current_tier.value} valid={status.is_valid}")
        return status

    async def has_required_tier(self, user_id: Optional[str], required_tier: MembershipTier) -> bool:
        """Tier gate. A fallback status only ever satisfies ``MEMBER``."""
        status = await self.validate(user_id)
        granted = tier_satisfies(status.current_tier, required_tier)
        log_access_decision(user_id, f"tier>={required_tier.value}", granted, source=status.validation_source)
        return granted


_status_cache: Optional[TTLCache[SubscriptionStatus]] = None


def get_status_cache(ttl_seconds: int = 300, max_size: int = 10000) -> TTLCache[SubscriptionStatus]:
    """Process-wide subscription status cache, created on first use."""
    global _status_cache
    if _status_cache is None:
        _status_cache = TTLCache(ttl=max(ttl_seconds, MIN_CACHE_TTL_SECONDS), max_size=max_size)
    return _status_cache
