"""
Unit tests for in-store subscription records.
"""

from datetime import timedelta

import pytest

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from booktalks_buddy.core.models.io.subscriptions import SubscriptionCreate
from booktalks_buddy.server.services.subscriptions import SubscriptionService


@pytest.fixture
def service(session, calculator):
    return SubscriptionService(session, calculator)


@pytest.fixture
async def store(seed):
    await seed.user("manager-1")
    await seed.user("reader-1")
    store = await seed.store()
    await seed.store_admin(store.id, "manager-1", role="manager")
    return store


def _purchase(days: int = 30, **fields) -> SubscriptionCreate:
    return SubscriptionCreate(user_id="reader-1", tier="PRIVILEGED", end_date=utc_now() + timedelta(days=days), **fields)


class TestSubscriptionService:
    @pytest.mark.asyncio
    async def test_record_upgrades_entitlements(self, service, store, calculator):
        assert "CAN_CREATE_LIMITED_CLUBS" not in await calculator.get_entitlements("reader-1")

        subscription = await service.record(store.id, "manager-1", _purchase(payment_reference="till-42"))

        assert subscription.tier == "privileged"
        assert subscription.store_id == store.id
        assert subscription.created_by == "manager-1"
        assert "CAN_CREATE_LIMITED_CLUBS" in await calculator.get_entitlements("reader-1")

    @pytest.mark.asyncio
    async def test_regular_user_cannot_record(self, service, store):
        with pytest.raises(PermissionDeniedError):
            await service.record(store.id, "reader-1", _purchase())

    @pytest.mark.asyncio
    async def test_unknown_subscriber(self, service, store):
        with pytest.raises(NotFoundError):
            await service.record(store.id, "manager-1", _purchase().model_copy(update={"user_id": "ghost"}))

    @pytest.mark.asyncio
    async def test_end_must_follow_start(self, service, store):
        with pytest.raises(ValidationError) as exc_info:
            await service.record(store.id, "manager-1", _purchase(days=-1))

        assert exc_info.value.field == "end_date"

    @pytest.mark.asyncio
    async def test_list_newest_end_first(self, service, store):
        short = await service.record(store.id, "manager-1", _purchase(days=10))
        long = await service.record(store.id, "manager-1", _purchase(days=365))

        listed = await service.list_for_user(store.id, "manager-1", "reader-1")

        assert [s.id for s in listed] == [long.id, short.id]

    @pytest.mark.asyncio
    async def test_deactivate_once(self, service, store, calculator):
        subscription = await service.record(store.id, "manager-1", _purchase())

        deactivated = await service.deactivate(store.id, subscription.id, "manager-1")

        assert deactivated.is_active is False
        assert "CAN_CREATE_LIMITED_CLUBS" not in await calculator.get_entitlements("reader-1")
        with pytest.raises(ConflictError):
            await service.deactivate(store.id, subscription.id, "manager-1")

    @pytest.mark.asyncio
    async def test_deactivate_from_another_store(self, service, store, seed):
        subscription = await service.record(store.id, "manager-1", _purchase())
        other = await seed.store(name="Other Books")
        await seed.store_admin(other.id, "manager-1", role="manager")

        with pytest.raises(NotFoundError):
            await service.deactivate(other.id, subscription.id, "manager-1")
