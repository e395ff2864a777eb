import pytest


@pytest.fixture
async def club(seed):
    await seed.user("lead-1")
    await seed.user("reader-1")
    club = await seed.club("lead-1")
    await seed.member(club.id, "reader-1")
    return club


class TestDiscussionsApi:
    @pytest.mark.asyncio
    async def test_topic_thread_round(self, client, auth_headers, club):
        topic = await client.post(
            f"/api/v1/clubs/{club.id}/topics", json={"title": "Ending?"}, headers=auth_headers("reader-1")
        )
        assert topic.status_code == 201
        topic_id = topic.json()["id"]

        root = await client.post(
            f"/api/v1/topics/{topic_id}/posts", json={"content": "Did not see it coming"}, headers=auth_headers("reader-1")
        )
        reply = await client.post(
            f"/api/v1/topics/{topic_id}/posts",
            json={"content": "Me neither", "parent_post_id": root.json()["id"]},
            headers=auth_headers("lead-1"),
        )
        assert reply.status_code == 201

        thread = await client.get(f"/api/v1/topics/{topic_id}/posts", headers=auth_headers("lead-1"))
        body = thread.json()
        assert len(body) == 1
        assert body[0]["replies"][0]["content"] == "Me neither"

        topics = await client.get(f"/api/v1/clubs/{club.id}/topics", headers=auth_headers("reader-1"))
        assert topics.json()[0]["post_count"] == 2

    @pytest.mark.asyncio
    async def test_outsider_is_forbidden(self, client, auth_headers, club):
        response = await client.get(f"/api/v1/clubs/{club.id}/topics", headers=auth_headers("outsider"))

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_locked_topic(self, client, auth_headers, club):
        topic = await client.post(
            f"/api/v1/clubs/{club.id}/topics", json={"title": "Spoilers"}, headers=auth_headers("reader-1")
        )
        topic_id = topic.json()["id"]

        denied = await client.patch(
            f"/api/v1/topics/{topic_id}/moderation", json={"is_locked": True}, headers=auth_headers("reader-1")
        )
        locked = await client.patch(
            f"/api/v1/topics/{topic_id}/moderation", json={"is_locked": True}, headers=auth_headers("lead-1")
        )
        post = await client.post(
            f"/api/v1/topics/{topic_id}/posts", json={"content": "Hello?"}, headers=auth_headers("reader-1")
        )

        assert denied.status_code == 403
        assert locked.json()["is_locked"] is True
        assert post.status_code == 403

    @pytest.mark.asyncio
    async def test_edit_and_delete_post(self, client, auth_headers, club):
        topic = await client.post(
            f"/api/v1/clubs/{club.id}/topics", json={"title": "Welcome"}, headers=auth_headers("lead-1")
        )
        post = await client.post(
            f"/api/v1/topics/{topic.json()['id']}/posts", json={"content": "Hi"}, headers=auth_headers("reader-1")
        )
        post_id = post.json()["id"]

        not_mine = await client.patch(f"/api/v1/posts/{post_id}", json={"content": "x"}, headers=auth_headers("lead-1"))
        edited = await client.patch(
            f"/api/v1/posts/{post_id}", json={"content": "Hi all"}, headers=auth_headers("reader-1")
        )
        deleted = await client.delete(f"/api/v1/posts/{post_id}", headers=auth_headers("lead-1"))

        assert not_mine.status_code == 403
        assert edited.json()["content"] == "Hi all"
        assert deleted.json()["is_deleted"] is True


class TestNominationsApi:
    @pytest.mark.asyncio
    async def test_nominate_like_and_select(self, client, auth_headers, club):
        nominated = await client.post(
            f"/api/v1/clubs/{club.id}/nominations",
            json={"google_books_id": "vol-9", "title": "Piranesi", "author": "Susanna Clarke"},
            headers=auth_headers("reader-1"),
        )
        assert nominated.status_code == 201
        nomination_id = nominated.json()["id"]

        liked = await client.post(
            f"/api/v1/clubs/{club.id}/nominations/{nomination_id}/like", headers=auth_headers("lead-1")
        )
        assert liked.json() == {"like_count": 1}

        listed = await client.get(f"/api/v1/clubs/{club.id}/nominations", headers=auth_headers("lead-1"))
        assert listed.json()[0]["user_has_liked"] is True
        assert listed.json()[0]["book"]["title"] == "Piranesi"

        denied = await client.post(
            f"/api/v1/clubs/{club.id}/nominations/{nomination_id}/select", headers=auth_headers("reader-1")
        )
        selected = await client.post(
            f"/api/v1/clubs/{club.id}/nominations/{nomination_id}/select", headers=auth_headers("lead-1")
        )
        assert denied.status_code == 403
        assert selected.json()["status"] == "selected"

        remaining = await client.get(f"/api/v1/clubs/{club.id}/nominations", headers=auth_headers("lead-1"))
        assert remaining.json() == []

    @pytest.mark.asyncio
    async def test_missing_reference_is_rejected(self, client, auth_headers, club):
        response = await client.post(
            f"/api/v1/clubs/{club.id}/nominations", json={"title": "No id"}, headers=auth_headers("reader-1")
        )

        assert response.status_code == 422
