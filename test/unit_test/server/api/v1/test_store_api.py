"""Store creation, administrators and the featured-book carousel."""

import pytest
from httpx import AsyncClient

STORES = "/api/v1/stores"


@pytest.fixture
async def store(seed):
    await seed.user("owner-1")
    store = await seed.store()
    await seed.store_admin(store.id, "owner-1", role="owner")
    return store


async def _feature(client: AsyncClient, headers, store_id: str, position: int, title: str, **fields):
    return await client.post(
        f"{STORES}/{store_id}/carousel",
        headers=headers,
        json={"position": position, "book_title": title, "book_author": "Someone", **fields},
    )


class TestStores:
    @pytest.mark.asyncio
    async def test_platform_owner_creates_store(self, client: AsyncClient, auth_headers, seed):
        await seed.user("platform-owner")
        await seed.platform_owner("platform-owner")
        await seed.user("owner-1")

        response = await client.post(
            STORES, headers=auth_headers("platform-owner"), json={"name": " Corner Books ", "owner_id": "owner-1"}
        )
        admins = await client.get(f"{STORES}/{response.json()['id']}/admins", headers=auth_headers("owner-1"))

        assert response.status_code == 201
        assert response.json()["name"] == "Corner Books"
        assert [(a["user_id"], a["role"]) for a in admins.json()] == [("owner-1", "owner")]

    @pytest.mark.asyncio
    async def test_regular_user_cannot_create_store(self, client: AsyncClient, auth_headers, seed):
        await seed.user("owner-1")

        response = await client.post(STORES, headers=auth_headers("reader-1"), json={"name": "Mine", "owner_id": "owner-1"})

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_owner_adds_manager_but_not_owner(self, client: AsyncClient, auth_headers, seed, store):
        await seed.user("manager-1")
        headers = auth_headers("owner-1")

        manager = await client.post(f"{STORES}/{store.id}/admins", headers=headers, json={"user_id": "manager-1"})
        owner = await client.post(
            f"{STORES}/{store.id}/admins", headers=headers, json={"user_id": "manager-1", "role": "owner"}
        )

        assert manager.status_code == 201
        assert manager.json()["role"] == "manager"
        assert owner.status_code == 403

    @pytest.mark.asyncio
    async def test_unknown_store(self, client: AsyncClient):
        response = await client.get(f"{STORES}/missing")

        assert response.status_code == 404


class TestCarousel:
    @pytest.mark.asyncio
    async def test_owner_features_books(self, client: AsyncClient, auth_headers, store):
        headers = auth_headers("owner-1")
        await _feature(client, headers, store.id, 2, "Emma")
        await _feature(client, headers, store.id, 1, "Dune")

        response = await client.get(f"{STORES}/{store.id}/carousel")

        assert [item["book_title"] for item in response.json()] == ["Dune", "Emma"]

    @pytest.mark.asyncio
    async def test_inactive_items_hidden_from_public(self, client: AsyncClient, auth_headers, store):
        headers = auth_headers("owner-1")
        await _feature(client, headers, store.id, 1, "Dune")
        await _feature(client, headers, store.id, 2, "Draft pick", is_active=False)

        public = await client.get(f"{STORES}/{store.id}/carousel")
        owner = await client.get(f"{STORES}/{store.id}/carousel", headers=headers)

        assert len(public.json()) == 1
        assert len(owner.json()) == 2

    @pytest.mark.asyncio
    async def test_position_conflict(self, client: AsyncClient, auth_headers, store):
        headers = auth_headers("owner-1")
        await _feature(client, headers, store.id, 1, "Dune")

        response = await _feature(client, headers, store.id, 1, "Emma")

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_position_range(self, client: AsyncClient, auth_headers, store):
        response = await _feature(client, auth_headers("owner-1"), store.id, 13, "Dune")

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_non_admin_cannot_feature(self, client: AsyncClient, auth_headers, store):
        response = await _feature(client, auth_headers("reader-1"), store.id, 1, "Dune")

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_reorder_swaps_items(self, client: AsyncClient, auth_headers, store):
        headers = auth_headers("owner-1")
        dune = (await _feature(client, headers, store.id, 1, "Dune")).json()
        emma = (await _feature(client, headers, store.id, 2, "Emma")).json()

        response = await client.put(
            f"{STORES}/{store.id}/carousel/reorder",
            headers=headers,
            json={"items": [{"id": dune["id"], "position": 2}, {"id": emma["id"], "position": 1}]},
        )

        assert response.status_code == 200
        assert [(item["book_title"], item["position"]) for item in response.json()] == [("Emma", 1), ("Dune", 2)]

    @pytest.mark.asyncio
    async def test_reorder_into_held_position(self, client: AsyncClient, auth_headers, store):
        headers = auth_headers("owner-1")
        dune = (await _feature(client, headers, store.id, 1, "Dune")).json()
        await _feature(client, headers, store.id, 2, "Emma")

        response = await client.put(
            f"{STORES}/{store.id}/carousel/reorder",
            headers=headers,
            json={"items": [{"id": dune["id"], "position": 2}]},
        )

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_reorder_rejects_duplicate_positions(self, client: AsyncClient, auth_headers, store):
        headers = auth_headers("owner-1")
        dune = (await _feature(client, headers, store.id, 1, "Dune")).json()
        emma = (await _feature(client, headers, store.id, 2, "Emma")).json()

        response = await client.put(
            f"{STORES}/{store.id}/carousel/reorder",
            headers=headers,
            json={"items": [{"id": dune["id"], "position": 3}, {"id": emma["id"], "position": 3}]},
        )

        assert response.status_code == 400
