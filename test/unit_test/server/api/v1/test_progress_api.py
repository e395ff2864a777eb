import pytest


@pytest.fixture
async def club(seed):
    await seed.user("lead-1")
    await seed.user("reader-1")
    await seed.user("reader-2")
    club = await seed.club("lead-1", progress_tracking_enabled=True)
    await seed.member(club.id, "reader-1")
    await seed.member(club.id, "reader-2")
    return club


class TestProgressApi:
    @pytest.mark.asyncio
    async def test_record_and_read_back(self, client, auth_headers, club):
        response = await client.put(
            f"/api/v1/clubs/{club.id}/progress",
            json={"status": "reading", "progress_type": "percentage", "progress_percentage": 40},
            headers=auth_headers("reader-1"),
        )

        assert response.status_code == 200
        assert response.json()["progress_percentage"] == 40.0
        mine = await client.get(f"/api/v1/clubs/{club.id}/progress/me", headers=auth_headers("reader-1"))
        assert mine.json()["status"] == "reading"

    @pytest.mark.asyncio
    async def test_nothing_recorded_reads_as_null(self, client, auth_headers, club):
        response = await client.get(f"/api/v1/clubs/{club.id}/progress/me", headers=auth_headers("reader-1"))

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_private_entries_are_hidden_from_others(self, client, auth_headers, club):
        await client.put(
            f"/api/v1/clubs/{club.id}/progress",
            json={"status": "finished", "is_private": True},
            headers=auth_headers("reader-2"),
        )
        await client.put(
            f"/api/v1/clubs/{club.id}/progress",
            json={"status": "reading", "progress_type": "percentage", "progress_percentage": 10},
            headers=auth_headers("reader-1"),
        )

        listed = await client.get(f"/api/v1/clubs/{club.id}/progress", headers=auth_headers("reader-1"))
        member = await client.get(
            f"/api/v1/clubs/{club.id}/progress/members/reader-2", headers=auth_headers("reader-1")
        )
        stats = await client.get(f"/api/v1/clubs/{club.id}/progress/stats", headers=auth_headers("reader-1"))

        assert [e["user_id"] for e in listed.json()] == ["reader-1"]
        assert member.json() is None
        assert stats.json()["finished_count"] == 1
        assert stats.json()["reading_count"] == 1
        assert stats.json()["not_started_count"] == 1

    @pytest.mark.asyncio
    async def test_tracking_disabled(self, client, auth_headers, club):
        toggled = await client.put(
            f"/api/v1/clubs/{club.id}/progress-tracking", json={"enabled": False}, headers=auth_headers("lead-1")
        )
        response = await client.put(
            f"/api/v1/clubs/{club.id}/progress", json={"status": "finished"}, headers=auth_headers("reader-1")
        )

        assert toggled.json()["progress_tracking_enabled"] is False
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_delete_own_progress(self, client, auth_headers, club):
        await client.put(
            f"/api/v1/clubs/{club.id}/progress", json={"status": "finished"}, headers=auth_headers("reader-1")
        )

        deleted = await client.delete(f"/api/v1/clubs/{club.id}/progress/me", headers=auth_headers("reader-1"))
        missing = await client.delete(f"/api/v1/clubs/{club.id}/progress/me", headers=auth_headers("reader-1"))

        assert deleted.status_code == 204
        assert missing.status_code == 404
