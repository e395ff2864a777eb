"""Unit tests for the generic async repository and query builder."""

import pytest
from sqlmodel import select

from booktalks_buddy.core.database.entities.stores import Store
from booktalks_buddy.core.database.repositories import AsyncBaseRepository, QueryBuilder


@pytest.fixture
def stores(session) -> AsyncBaseRepository[Store]:
    return AsyncBaseRepository(session, Store)


class TestAsyncBaseRepository:
    async def test_create_and_get(self, stores):
        store = await stores.create(Store(name="Corner Books", location="Taipei"))

        fetched = await stores.get_by_id(store.id)

        assert fetched is not None
        assert fetched.name == "Corner Books"
        assert await stores.get_by_id("missing") is None

    async def test_get_one_matches_all_filters(self, stores):
        await stores.create(Store(name="Corner Books", location="Taipei"))
        await stores.create(Store(name="Corner Books", location="Tainan"))

        found = await stores.get_one(name="Corner Books", location="Tainan")

        assert found is not None
        assert found.location == "Tainan"
        assert await stores.get_one(name="Nowhere") is None

    async def test_update_applies_changes(self, stores):
        store = await stores.create(Store(name="Corner Books"))

        updated = await stores.update(store, {"description": "Open late"})

        assert updated.description == "Open late"

    async def test_delete(self, stores):
        store = await stores.create(Store(name="Corner Books"))

        assert await stores.delete(store.id) is True
        assert await stores.delete(store.id) is False
        assert await stores.count() == 0

    async def test_list_with_filters_order_and_pagination(self, stores):
        for name in ("Alpha Books", "Beta Books", "Gamma Books"):
            await stores.create(Store(name=name, location="Taipei"))
        await stores.create(Store(name="Delta Books", location="Tainan"))

        page = await stores.list(limit=2, offset=1, filters={"location": "Taipei"}, order_by=Store.name)

        assert [s.name for s in page] == ["Beta Books", "Gamma Books"]
        assert await stores.count({"location": ["Taipei", "Tainan"]}) == 4
        assert await stores.count({"location": None}) == 4


class TestQueryBuilder:
    def test_unknown_field_is_rejected(self):
        with pytest.raises(ValueError):
            QueryBuilder.apply_filters(select(Store), Store, {"nope": 1})

    def test_pagination_without_values_leaves_statement_alone(self):
        statement = select(Store)

        assert QueryBuilder.apply_pagination(statement) is statement
