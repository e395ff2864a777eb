"""
Service for store administration.

The platform owner opens stores and names their owners; owners add and
remove managers and curate the landing page carousel.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from booktalks_buddy.core.database.entities.stores import CarouselItem, Store, StoreAdministrator
from booktalks_buddy.core.database.entities.users import User
from booktalks_buddy.core.errors import ConflictError, NotFoundError, ValidationError
from booktalks_buddy.core.models.domain import StoreRole
from booktalks_buddy.core.models.io.store import (
    CarouselItemCreate,
    CarouselItemUpdate,
    CarouselPosition,
    StoreAdminCreate,
    StoreCreate,
)
from booktalks_buddy.entitlements import can_manage_store, can_manage_store_managers, is_platform_owner

from .base import BaseService

logger = logging.getLogger(__name__)

MAX_CAROUSEL_POSITION = 12


class StoreService(BaseService):
    """Stores, their administrators and carousel."""

    async def _store(self, store_id: str) -> Store:
        return await self.get_or_404(Store, store_id, "Store not found")

    async def create_store(self, user_id: str, payload: StoreCreate) -> Store:
        ents = await self.entitlements(user_id)
        self.require(is_platform_owner(ents), "Only the platform owner can create stores")
        await self.get_or_404(User, payload.owner_id, "Owner not found")

        store = Store(name=payload.name.strip(), description=payload.description, location=payload.location)
        self.session.add(store)
        await self.session.flush()
        self.session.add(
            StoreAdministrator(store_id=store.id, user_id=payload.owner_id, role=StoreRole.owner.value, assigned_by=user_id)
        )
        await self.session.commit()
        await self.session.refresh(store)
        await self.calculator.invalidate(payload.owner_id)
        logger.info(f"Store {store.id} created by {user_id} with owner {payload.owner_id}")
        return store

    async def get_store(self, store_id: str) -> Store:
        return await self._store(store_id)

    async def list_stores(self) -> List[Store]:
        result = await self.session.execute(select(Store).order_by(Store.name))
        return list(result.scalars().all())

    # Administrators

    async def list_admins(self, store_id: str, user_id: str) -> List[StoreAdministrator]:
        await self._store(store_id)
        ents = await self.entitlements(user_id)
        self.require(
            is_platform_owner(ents) or can_manage_store_managers(ents, store_id), "Only store owners can view administrators"
        )
        result = await self.session.execute(
            select(StoreAdministrator).where(StoreAdministrator.store_id == store_id).order_by(StoreAdministrator.created_at)
        )
        return list(result.scalars().all())

    async def add_admin(self, store_id: str, user_id: str, payload: StoreAdminCreate) -> StoreAdministrator:
        """
        Add an administrator.

        Owners may add managers. Only the platform owner may add owners.
        """
        await self._store(store_id)
        await self.get_or_404(User, payload.user_id, "User not found")
        ents = await self.entitlements(user_id)
        if payload.role == StoreRole.owner:
            self.require(is_platform_owner(ents), "Only the platform owner can assign store owners")
        else:
            self.require(
                is_platform_owner(ents) or can_manage_store_managers(ents, store_id),
                "Only store owners can add managers",
            )

        admin = StoreAdministrator(store_id=store_id, user_id=payload.user_id, role=payload.role.value, assigned_by=user_id)
        self.session.add(admin)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("User is already an administrator of this store") from e
        await self.session.refresh(admin)
        await self.calculator.invalidate(payload.user_id)
        logger.info(f"User {payload.user_id} added as store {payload.role.value} of {store_id} by {user_id}")
        return admin

    async def remove_admin(self, store_id: str, admin_user_id: str, user_id: str) -> None:
        result = await self.session.execute(
            select(StoreAdministrator)
            .where(StoreAdministrator.store_id == store_id)
            .where(StoreAdministrator.user_id == admin_user_id)
        )
        admin = result.scalars().first()
        if admin is None:
            raise NotFoundError("Store administrator not found")

        ents = await self.entitlements(user_id)
        if admin.role == StoreRole.owner.value:
            self.require(is_platform_owner(ents), "Only the platform owner can remove store owners")
        else:
            self.require(
                is_platform_owner(ents) or can_manage_store_managers(ents, store_id),
                "Only store owners can remove managers",
            )
        await self.session.delete(admin)
        await self.session.commit()
        await self.calculator.invalidate(admin_user_id)
        logger.info(f"User {admin_user_id} removed from store {store_id} by {user_id}")

    # Carousel

    async def _require_store_manager(self, store_id: str, user_id: str) -> None:
        ents = await self.entitlements(user_id)
        self.require(can_manage_store(ents, store_id), "Only store owners can manage the carousel")

    async def _item(self, store_id: str, item_id: str) -> CarouselItem:
        item = await self.session.get(CarouselItem, item_id)
        if item is None or item.store_id != store_id:
            raise NotFoundError("Carousel item not found")
        return item

    async def _position_taken(self, store_id: str, position: int, exclude: Optional[str] = None) -> bool:
        statement = select(CarouselItem.id).where(CarouselItem.store_id == store_id).where(CarouselItem.position == position)
        if exclude:
            statement = statement.where(CarouselItem.id != exclude)
        result = await self.session.execute(statement)
        return result.scalars().first() is not None

    async def list_carousel(self, store_id: str, user_id: Optional[str] = None) -> List[CarouselItem]:
        """Active items for everyone; store managers also see inactive ones."""
        await self._store(store_id)
        include_inactive = False
        if user_id:
            include_inactive = can_manage_store(await self.entitlements(user_id), store_id)
        statement = select(CarouselItem).where(CarouselItem.store_id == store_id)
        if not include_inactive:
            statement = statement.where(CarouselItem.is_active == True)  # noqa: E712
        result = await self.session.execute(statement.order_by(CarouselItem.position))
        return list(result.scalars().all())

    async def create_carousel_item(self, store_id: str, user_id: str, payload: CarouselItemCreate) -> CarouselItem:
        await self._store(store_id)
        await self._require_store_manager(store_id, user_id)
        if await self._position_taken(store_id, payload.position):
            raise ConflictError(f"Position {payload.position} is already taken")

        item = CarouselItem(store_id=store_id, created_by=user_id, **payload.model_dump())
        item.book_title = item.book_title.strip()
        item.book_author = item.book_author.strip()
        self.session.add(item)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError(f"Position {payload.position} is already taken") from e
        await self.session.refresh(item)
        logger.info(f"Carousel item {item.id} added to store {store_id} at position {item.position}")
        return item

    async def update_carousel_item(
        self, store_id: str, item_id: str, user_id: str, payload: CarouselItemUpdate
    ) -> CarouselItem:
        await self._require_store_manager(store_id, user_id)
        item = await self._item(store_id, item_id)
        changes = payload.model_dump(exclude_unset=True)
        position = changes.get("position")
        if position is not None and await self._position_taken(store_id, position, exclude=item_id):
            raise ConflictError(f"Position {position} is already taken")
        for key, value in changes.items():
            setattr(item, key, value)
        await self.session.commit()
        await self.session.refresh(item)
        logger.info(f"Carousel item {item_id} updated: {sorted(changes)}")
        return item

    async def delete_carousel_item(self, store_id: str, item_id: str, user_id: str) -> None:
        await self._require_store_manager(store_id, user_id)
        item = await self._item(store_id, item_id)
        await self.session.delete(item)
        await self.session.commit()
        logger.info(f"Carousel item {item_id} removed from store {store_id}")

    async def reorder_carousel(self, store_id: str, user_id: str, positions: List[CarouselPosition]) -> List[CarouselItem]:
        """
        Apply new positions atomically.

        Raises:
            ValidationError: Duplicate positions in the request
            ConflictError: A target position is held by an item not being moved
        """
        await self._require_store_manager(store_id, user_id)
        if len({p.position for p in positions}) != len(positions):
            raise ValidationError("Positions must be unique", field="items")
        if len({p.id for p in positions}) != len(positions):
            raise ValidationError("Each item may appear only once", field="items")

        items = {p.id: await self._item(store_id, p.id) for p in positions}
        moving = set(items)
        result = await self.session.execute(select(CarouselItem).where(CarouselItem.store_id == store_id))
        held = {item.position for item in result.scalars().all() if item.id not in moving}
        clash = sorted(held & {p.position for p in positions})
        if clash:
            raise ConflictError(f"Positions {clash} are held by other items")

        # Park moved items above the last slot first; (store_id, position) is unique
        for offset, item in enumerate(items.values(), start=1):
            item.position = MAX_CAROUSEL_POSITION + offset
        await self.session.flush()
        for p in positions:
            items[p.id].position = p.position
        await self.session.commit()
        logger.info(f"Carousel of store {store_id} reordered by {user_id}")
        return await self.list_carousel(store_id, user_id)
