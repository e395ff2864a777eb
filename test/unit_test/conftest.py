"""Database fixtures shared by the unit tests.

Every test gets its own in-memory SQLite database with the full schema, and
the process-wide entitlement and subscription caches are reset around it.
"""

from __future__ import annotations

import uuid
from datetime import timedelta
from typing import AsyncGenerator, Optional

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlmodel.pool import StaticPool

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.clubs import BookClub, ClubMember, ClubModerator
from booktalks_buddy.core.database.entities.stores import Store, StoreAdministrator
from booktalks_buddy.core.database.entities.subscriptions import UserSubscription
from booktalks_buddy.core.database.entities.users import PlatformSetting, User
from booktalks_buddy.core.database.utils import create_all, create_sessionmaker
from booktalks_buddy.entitlements import EntitlementCalculator, membership
from booktalks_buddy.entitlements.constants import PLATFORM_OWNER_SETTING_KEY
from booktalks_buddy.subscriptions import SubscriptionValidator, validation

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def _reset_shared_caches(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(membership, "_entitlements_cache", None)
    monkeypatch.setattr(validation, "_status_cache", None)


@pytest_asyncio.fixture(name="engine")
async def engine_fixture() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture(name="session")
async def session_fixture(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async_session_maker = create_sessionmaker(engine)
    async with async_session_maker() as session:
        yield session


@pytest.fixture(name="calculator")
def calculator_fixture(session: AsyncSession) -> EntitlementCalculator:
    """Calculator without caches so every call reads the database."""
    return EntitlementCalculator(session, SubscriptionValidator(session))


class Seeder:
    """Inserts rows directly, bypassing the services."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def _save(self, row):
        self.session.add(row)
        await self.session.commit()
        await self.session.refresh(row)
        return row

    async def user(self, user_id: Optional[str] = None, **fields) -> User:
        return await self._save(User(id=user_id or str(uuid.uuid4()), **fields))

    async def platform_owner(self, user_id: str) -> PlatformSetting:
        return await self._save(PlatformSetting(key=PLATFORM_OWNER_SETTING_KEY, value=user_id))

    async def subscription(
        self, user_id: str, tier: str = "privileged", days: int = 30, is_active: bool = True
    ) -> UserSubscription:
        now = utc_now()
        return await self._save(
            UserSubscription(
                user_id=user_id,
                tier=tier,
                start_date=now - timedelta(days=1),
                end_date=now + timedelta(days=days),
                is_active=is_active,
            )
        )

    async def store(self, name: str = "Corner Books") -> Store:
        return await self._save(Store(name=name))

    async def store_admin(self, store_id: str, user_id: str, role: str = "owner") -> StoreAdministrator:
        return await self._save(StoreAdministrator(store_id=store_id, user_id=user_id, role=role))

    async def club(self, lead_user_id: str, name: str = "Sci-Fi Saturdays", **fields) -> BookClub:
        club = await self._save(BookClub(name=name, lead_user_id=lead_user_id, **fields))
        await self._save(ClubMember(user_id=lead_user_id, club_id=club.id, role="lead"))
        return club

    async def member(self, club_id: str, user_id: str, role: str = "member") -> ClubMember:
        return await self._save(ClubMember(user_id=user_id, club_id=club_id, role=role))

    async def moderator(self, club_id: str, user_id: str) -> ClubModerator:
        return await self._save(ClubModerator(club_id=club_id, user_id=user_id))


@pytest.fixture(name="seed")
def seed_fixture(session: AsyncSession) -> Seeder:
    return Seeder(session)
