"""
Service for subscription records and the caller's own account.

Store administrators holding ``CAN_MANAGE_USER_TIERS`` record paid
memberships; every change drops the user's cached status and entitlements.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.stores import Store
from booktalks_buddy.core.database.entities.subscriptions import UserSubscription
from booktalks_buddy.core.database.entities.users import User
from booktalks_buddy.core.errors import ConflictError, NotFoundError, ValidationError
from booktalks_buddy.core.models.io.subscriptions import EntitlementsRead, SubscriptionCreate, SubscriptionStatusRead
from booktalks_buddy.core.models.io.users import ProfileUpdate
from booktalks_buddy.core.validation import validate_display_name, validate_optional_text, validate_username
from booktalks_buddy.entitlements import can_manage_user_tiers, highest_role_context

from .base import BaseService

logger = logging.getLogger(__name__)


class SubscriptionService(BaseService):
    """Paid membership records managed by store administrators."""

    async def _require_tier_manager(self, store_id: str, user_id: str) -> None:
        await self.get_or_404(Store, store_id, "Store not found")
        ents = await self.entitlements(user_id)
        self.require(can_manage_user_tiers(ents, store_id), "You cannot manage membership tiers in this store")

    async def record(self, store_id: str, user_id: str, payload: SubscriptionCreate) -> UserSubscription:
        await self._require_tier_manager(store_id, user_id)
        await self.get_or_404(User, payload.user_id, "User not found")
        start = payload.start_date or utc_now()
        if payload.end_date <= start:
            raise ValidationError("end_date must be after start_date", field="end_date")

        subscription = UserSubscription(
            user_id=payload.user_id,
            tier=payload.tier.lower(),
            start_date=start,
            end_date=payload.end_date,
            payment_reference=payload.payment_reference,
            store_id=store_id,
            created_by=user_id,
        )
        self.session.add(subscription)
        await self.session.commit()
        await self.session.refresh(subscription)
        await self.calculator.invalidate(payload.user_id)
        logger.info(
            f"Subscription {subscription.id} ({subscription.tier}) recorded for {payload.user_id} "
            f"until {subscription.end_date:%Y-%m-%d} by {user_id}"
        )
        return subscription

    async def list_for_user(self, store_id: str, user_id: str, subscriber_id: str) -> List[UserSubscription]:
        await self._require_tier_manager(store_id, user_id)
        result = await self.session.execute(
            select(UserSubscription)
            .where(UserSubscription.user_id == subscriber_id)
            .order_by(UserSubscription.end_date.desc())
        )
        return list(result.scalars().all())

    async def deactivate(self, store_id: str, subscription_id: str, user_id: str) -> UserSubscription:
        await self._require_tier_manager(store_id, user_id)
        subscription = await self.session.get(UserSubscription, subscription_id)
        if subscription is None or subscription.store_id != store_id:
            raise NotFoundError("Subscription not found")
        if not subscription.is_active:
            raise ConflictError("Subscription is already inactive")
        subscription.is_active = False
        await self.session.commit()
        await self.session.refresh(subscription)
        await self.calculator.invalidate(subscription.user_id)
        logger.info(f"Subscription {subscription_id} deactivated by {user_id}")
        return subscription


class AccountService(BaseService):
    """The signed-in user's profile and computed entitlements."""

    async def get_profile(self, user_id: str) -> User:
        return await self.get_or_404(User, user_id, "User not found")

    async def update_profile(self, user_id: str, payload: ProfileUpdate) -> User:
        user = await self.get_profile(user_id)
        changes = payload.model_dump(exclude_unset=True)
        if "username" in changes:
            user.username = self.checked(validate_username(payload.username), "username")
        if "display_name" in changes:
            user.display_name = self.checked(validate_display_name(payload.display_name), "display_name") or None
        if "bio" in changes:
            user.bio = self.checked(validate_optional_text(payload.bio, 500, "Bio"), "bio") or None
        if "avatar_url" in changes:
            user.avatar_url = payload.avatar_url
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("Username is already taken") from e
        await self.session.refresh(user)
        logger.info(f"Profile of {user_id} updated: {sorted(changes)}")
        return user

    async def get_entitlements(self, user_id: str) -> EntitlementsRead:
        ents = await self.entitlements(user_id)
        status = await self.calculator.validator.validate(user_id)
        return EntitlementsRead(
            user_id=user_id,
            entitlements=ents,
            subscription=SubscriptionStatusRead.model_validate(status),
            highest_role_context=highest_role_context(ents),
        )
