"""
API endpoints for stores, their administrators, the featured-book carousel
and in-store subscription records.
"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, status

from booktalks_buddy.core.models.io.store import (
    CarouselItemCreate,
    CarouselItemRead,
    CarouselItemUpdate,
    CarouselReorder,
    StoreAdminCreate,
    StoreAdminRead,
    StoreCreate,
    StoreRead,
)
from booktalks_buddy.core.models.io.subscriptions import SubscriptionCreate, SubscriptionRead
from booktalks_buddy.server.services.deps import (
    CurrentUserDep,
    OptionalUserDep,
    StoreServiceDep,
    SubscriptionServiceDep,
)

router = APIRouter(tags=["store"])


@router.post(
    "",
    response_model=StoreRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Store",
    description="Create a store and make the given user its owner. Platform owner only.",
    responses={403: {"description": "Caller is not the platform owner"}},
)
async def create_store(payload: StoreCreate, user: CurrentUserDep, service: StoreServiceDep) -> StoreRead:
    return StoreRead.model_validate(await service.create_store(user.id, payload))


@router.get("", response_model=List[StoreRead], summary="List Stores")
async def list_stores(service: StoreServiceDep) -> List[StoreRead]:
    return [StoreRead.model_validate(s) for s in await service.list_stores()]


@router.get(
    "/{store_id}",
    response_model=StoreRead,
    summary="Get Store",
    responses={404: {"description": "Store not found"}},
)
async def get_store(store_id: str, service: StoreServiceDep) -> StoreRead:
    return StoreRead.model_validate(await service.get_store(store_id))


@router.get(
    "/{store_id}/admins",
    response_model=List[StoreAdminRead],
    summary="List Store Administrators",
    description="Owners and managers of a store. Visible to its administrators.",
)
async def list_admins(store_id: str, user: CurrentUserDep, service: StoreServiceDep) -> List[StoreAdminRead]:
    return [StoreAdminRead.model_validate(a) for a in await service.list_admins(store_id, user.id)]


@router.post(
    "/{store_id}/admins",
    response_model=StoreAdminRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Store Administrator",
    description="Store owners add managers; only the platform owner adds owners.",
    responses={409: {"description": "User is already an administrator"}},
)
async def add_admin(
    store_id: str, payload: StoreAdminCreate, user: CurrentUserDep, service: StoreServiceDep
) -> StoreAdminRead:
    return StoreAdminRead.model_validate(await service.add_admin(store_id, user.id, payload))


@router.delete(
    "/{store_id}/admins/{admin_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove Store Administrator",
)
async def remove_admin(store_id: str, admin_user_id: str, user: CurrentUserDep, service: StoreServiceDep) -> None:
    await service.remove_admin(store_id, admin_user_id, user.id)


@router.get(
    "/{store_id}/carousel",
    response_model=List[CarouselItemRead],
    summary="List Carousel",
    description="Featured books by position. Inactive items are only shown to store owners.",
)
async def list_carousel(store_id: str, user: OptionalUserDep, service: StoreServiceDep) -> List[CarouselItemRead]:
    items = await service.list_carousel(store_id, user.id if user else None)
    return [CarouselItemRead.model_validate(i) for i in items]


@router.post(
    "/{store_id}/carousel",
    response_model=CarouselItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Add Carousel Item",
    description="Feature a book at a free carousel position (1..12).",
    responses={409: {"description": "Position already taken"}},
)
async def create_carousel_item(
    store_id: str, payload: CarouselItemCreate, user: CurrentUserDep, service: StoreServiceDep
) -> CarouselItemRead:
    return CarouselItemRead.model_validate(await service.create_carousel_item(store_id, user.id, payload))


@router.put(
    "/{store_id}/carousel/reorder",
    response_model=List[CarouselItemRead],
    summary="Reorder Carousel",
    description="Move several items at once. Target positions must be distinct and free.",
    responses={400: {"description": "Duplicate ids or positions"}, 409: {"description": "Position taken"}},
)
async def reorder_carousel(
    store_id: str, payload: CarouselReorder, user: CurrentUserDep, service: StoreServiceDep
) -> List[CarouselItemRead]:
    items = await service.reorder_carousel(store_id, user.id, payload.items)
    return [CarouselItemRead.model_validate(i) for i in items]


@router.patch(
    "/{store_id}/carousel/{item_id}",
    response_model=CarouselItemRead,
    summary="Update Carousel Item",
    responses={409: {"description": "Position already taken"}},
)
async def update_carousel_item(
    store_id: str, item_id: str, payload: CarouselItemUpdate, user: CurrentUserDep, service: StoreServiceDep
) -> CarouselItemRead:
    return CarouselItemRead.model_validate(await service.update_carousel_item(store_id, item_id, user.id, payload))


@router.delete(
    "/{store_id}/carousel/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Carousel Item",
)
async def delete_carousel_item(store_id: str, item_id: str, user: CurrentUserDep, service: StoreServiceDep) -> None:
    await service.delete_carousel_item(store_id, item_id, user.id)


@router.post(
    "/{store_id}/subscriptions",
    response_model=SubscriptionRead,
    status_code=status.HTTP_201_CREATED,
    summary="Record Subscription",
    description="Record an in-store membership purchase for a user.",
    responses={403: {"description": "Caller cannot manage user tiers"}},
)
async def record_subscription(
    store_id: str, payload: SubscriptionCreate, user: CurrentUserDep, service: SubscriptionServiceDep
) -> SubscriptionRead:
    """
    Record a subscription.

    - **user_id**: The subscriber.
    - **tier**: `PRIVILEGED` or `PRIVILEGED_PLUS`.
    - **start_date** / **end_date**: The end must come after the start; start defaults to now.
    """
    return SubscriptionRead.model_validate(await service.record(store_id, user.id, payload))


@router.get(
    "/{store_id}/subscriptions/users/{subscriber_id}",
    response_model=List[SubscriptionRead],
    summary="List User Subscriptions",
)
async def list_subscriptions(
    store_id: str, subscriber_id: str, user: CurrentUserDep, service: SubscriptionServiceDep
) -> List[SubscriptionRead]:
    subscriptions = await service.list_for_user(store_id, user.id, subscriber_id)
    return [SubscriptionRead.model_validate(s) for s in subscriptions]


@router.post(
    "/{store_id}/subscriptions/{subscription_id}/deactivate",
    response_model=SubscriptionRead,
    summary="Deactivate Subscription",
    responses={409: {"description": "Subscription already inactive"}},
)
async def deactivate_subscription(
    store_id: str, subscription_id: str, user: CurrentUserDep, service: SubscriptionServiceDep
) -> SubscriptionRead:
    return SubscriptionRead.model_validate(await service.deactivate(store_id, subscription_id, user.id))
