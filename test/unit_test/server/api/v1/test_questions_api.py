"""Join question management endpoints."""

import pytest
from httpx import AsyncClient

CLUBS = "/api/v1/clubs"


@pytest.fixture
async def club(seed):
    await seed.user("lead-1")
    return await seed.club("lead-1", join_questions_enabled=True)


async def _add(client: AsyncClient, headers, club_id: str, order: int, text: str = None, required: bool = False):
    return await client.post(
        f"{CLUBS}/{club_id}/questions",
        headers=headers,
        json={"question_text": text or f"Question {order}?", "is_required": required, "display_order": order},
    )


class TestQuestionEndpoints:
    @pytest.mark.asyncio
    async def test_malformed_club_id(self, client: AsyncClient):
        response = await client.get(f"{CLUBS}/not-a-uuid/questions")

        assert response.status_code == 400
        assert response.json()["field"] == "club_id"

    @pytest.mark.asyncio
    async def test_lead_creates_and_lists_in_order(self, client: AsyncClient, auth_headers, club):
        headers = auth_headers("lead-1")
        await _add(client, headers, club.id, 2, "Favourite genre?")
        created = await _add(client, headers, club.id, 1, "Why do you want to join?", required=True)

        response = await client.get(f"{CLUBS}/{club.id}/questions")

        assert created.status_code == 201
        assert created.json()["is_required"] is True
        assert [q["question_text"] for q in response.json()] == ["Why do you want to join?", "Favourite genre?"]

    @pytest.mark.asyncio
    async def test_non_manager_cannot_create(self, client: AsyncClient, auth_headers, club):
        response = await _add(client, auth_headers("reader-1"), club.id, 1)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_display_order_must_be_free(self, client: AsyncClient, auth_headers, club):
        headers = auth_headers("lead-1")
        await _add(client, headers, club.id, 1)

        response = await _add(client, headers, club.id, 1, "Another question?")

        assert response.status_code == 409

    @pytest.mark.asyncio
    @pytest.mark.parametrize("order", [0, 6])
    async def test_display_order_range(self, client: AsyncClient, auth_headers, club, order):
        response = await _add(client, auth_headers("lead-1"), club.id, order)

        assert response.status_code == 400
        assert response.json()["field"] == "display_order"

    @pytest.mark.asyncio
    async def test_at_most_five_questions(self, client: AsyncClient, auth_headers, club):
        headers = auth_headers("lead-1")
        for order in range(1, 6):
            assert (await _add(client, headers, club.id, order)).status_code == 201

        response = await client.post(
            f"{CLUBS}/{club.id}/questions",
            headers=headers,
            json={"question_text": "Sixth?", "display_order": 5},
        )

        assert response.status_code == 400
        assert "at most 5" in response.json()["error"]

    @pytest.mark.asyncio
    async def test_blank_text_is_rejected(self, client: AsyncClient, auth_headers, club):
        response = await _add(client, auth_headers("lead-1"), club.id, 1, "   ")

        assert response.status_code == 400
        assert response.json()["field"] == "question_text"

    @pytest.mark.asyncio
    async def test_reorder_swaps_positions(self, client: AsyncClient, auth_headers, club):
        headers = auth_headers("lead-1")
        first = (await _add(client, headers, club.id, 1, "First?")).json()
        second = (await _add(client, headers, club.id, 2, "Second?")).json()

        response = await client.put(
            f"{CLUBS}/{club.id}/questions/reorder",
            headers=headers,
            json={
                "questions": [
                    {"id": first["id"], "display_order": 2},
                    {"id": second["id"], "display_order": 1},
                ]
            },
        )

        assert response.status_code == 200
        assert [q["question_text"] for q in response.json()] == ["Second?", "First?"]

    @pytest.mark.asyncio
    async def test_reorder_rejects_duplicate_orders(self, client: AsyncClient, auth_headers, club):
        headers = auth_headers("lead-1")
        first = (await _add(client, headers, club.id, 1)).json()
        await _add(client, headers, club.id, 2)

        response = await client.put(
            f"{CLUBS}/{club.id}/questions/reorder",
            headers=headers,
            json={"questions": [{"id": first["id"], "display_order": 2}]},
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_and_delete(self, client: AsyncClient, auth_headers, club):
        headers = auth_headers("lead-1")
        question = (await _add(client, headers, club.id, 1)).json()

        updated = await client.patch(
            f"{CLUBS}/{club.id}/questions/{question['id']}", headers=headers, json={"question_text": "Reworded?"}
        )
        deleted = await client.delete(f"{CLUBS}/{club.id}/questions/{question['id']}", headers=headers)
        listed = await client.get(f"{CLUBS}/{club.id}/questions")

        assert updated.json()["question_text"] == "Reworded?"
        assert deleted.status_code == 204
        assert listed.json() == []

    @pytest.mark.asyncio
    async def test_toggle_questions(self, client: AsyncClient, auth_headers, club):
        response = await client.put(
            f"{CLUBS}/{club.id}/questions-enabled", headers=auth_headers("lead-1"), json={"enabled": False}
        )

        assert response.status_code == 200
        assert response.json()["join_questions_enabled"] is False

    @pytest.mark.asyncio
    async def test_answers_required_when_submitted(self, client: AsyncClient, auth_headers, club, seed):
        club_private = await seed.club("lead-1", name="Quiet Readers", privacy="private", join_questions_enabled=True)
        headers = auth_headers("lead-1")
        required = (await _add(client, headers, club_private.id, 1, "Why join?", required=True)).json()
        optional = (await _add(client, headers, club_private.id, 2, "Favourite book?")).json()

        rejected = await client.post(
            f"{CLUBS}/{club_private.id}/join",
            headers=auth_headers("reader-1"),
            json={"answers": [{"question_id": optional["id"], "answer": "Dune"}]},
        )
        accepted = await client.post(
            f"{CLUBS}/{club_private.id}/join",
            headers=auth_headers("reader-1"),
            json={"answers": [{"question_id": required["id"], "answer": "I love sci-fi"}]},
        )
        answers = await client.get(
            f"{CLUBS}/{club_private.id}/join-requests/reader-1/answers", headers=headers
        )

        assert rejected.status_code == 400
        assert rejected.json()["field"] == f"answers.{required['id']}"
        assert accepted.json()["role"] == "pending"
        assert [a["answer"] for a in answers.json()["answers"]] == ["I love sci-fi"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{"answers": []}, None])
    async def test_required_question_cannot_be_skipped(self, client: AsyncClient, auth_headers, seed, body):
        await seed.user("lead-1")
        club_private = await seed.club("lead-1", name="Quiet Readers", privacy="private", join_questions_enabled=True)
        required = (await _add(client, auth_headers("lead-1"), club_private.id, 1, "Why join?", required=True)).json()

        response = await client.post(f"{CLUBS}/{club_private.id}/join", headers=auth_headers("reader-1"), json=body)
        pending = await client.get(f"{CLUBS}/{club_private.id}/join-requests", headers=auth_headers("lead-1"))

        assert response.status_code == 400
        assert response.json()["field"] == f"answers.{required['id']}"
        assert pending.json() == []

    @pytest.mark.asyncio
    async def test_optional_questions_only_allow_empty_join(self, client: AsyncClient, auth_headers, club):
        await _add(client, auth_headers("lead-1"), club.id, 1, "Favourite book?")

        response = await client.post(f"{CLUBS}/{club.id}/join", headers=auth_headers("reader-1"))

        assert response.status_code == 201
        assert response.json()["role"] == "member"
