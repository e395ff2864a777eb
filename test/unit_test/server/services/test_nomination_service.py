"""
Unit tests for club book nominations.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from booktalks_buddy.core.database.entities.clubs import BookClub
from booktalks_buddy.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from booktalks_buddy.core.models.io.nominations import NominationCreate
from booktalks_buddy.server.services.nominations import NominationService
from booktalks_buddy.server.services.notifications import NotificationService


@pytest.fixture
def service(session, calculator):
    return NominationService(session, calculator)


@pytest.fixture
async def club(seed):
    await seed.user("lead-1")
    await seed.user("reader-1")
    club = await seed.club("lead-1")
    await seed.member(club.id, "reader-1")
    return club


def _search_result(volume_id: str, title: str) -> NominationCreate:
    return NominationCreate(google_books_id=volume_id, title=title, author="Ursula K. Le Guin")


class TestNominate:
    def test_reference_is_required(self):
        with pytest.raises(PydanticValidationError):
            NominationCreate(google_books_id="vol-1")

    @pytest.mark.asyncio
    async def test_search_result_is_added_to_catalog(self, service, club):
        nomination = await service.nominate(club.id, "reader-1", _search_result("vol-1", "The Dispossessed"))

        assert nomination.status == "active"
        assert nomination.book.title == "The Dispossessed"
        assert nomination.book.author == "Ursula K. Le Guin"

    @pytest.mark.asyncio
    async def test_same_book_twice_conflicts(self, service, club):
        await service.nominate(club.id, "reader-1", _search_result("vol-1", "The Dispossessed"))

        with pytest.raises(ConflictError):
            await service.nominate(club.id, "lead-1", _search_result("vol-1", "The Dispossessed"))

    @pytest.mark.asyncio
    async def test_non_member_cannot_nominate(self, service, club):
        with pytest.raises(PermissionDeniedError):
            await service.nominate(club.id, "outsider", _search_result("vol-1", "The Dispossessed"))

    @pytest.mark.asyncio
    async def test_unknown_catalog_book(self, service, club):
        with pytest.raises(NotFoundError):
            await service.nominate(club.id, "reader-1", NominationCreate(book_id="missing"))


class TestLikesAndSelection:
    @pytest.mark.asyncio
    async def test_likes_are_idempotent_and_order_the_list(self, service, club):
        first = await service.nominate(club.id, "reader-1", _search_result("vol-1", "The Dispossessed"))
        second = await service.nominate(club.id, "reader-1", _search_result("vol-2", "The Lathe of Heaven"))

        assert await service.like(club.id, second.id, "lead-1") == {"like_count": 1}
        assert await service.like(club.id, second.id, "lead-1") == {"like_count": 1}

        listed = await service.list_nominations(club.id, "lead-1")
        assert [n.id for n in listed] == [second.id, first.id]
        assert [n.user_has_liked for n in listed] == [True, False]
        assert listed[0].like_count == 1

        assert await service.unlike(club.id, second.id, "lead-1") == {"like_count": 0}
        assert await service.unlike(club.id, second.id, "lead-1") == {"like_count": 0}

    @pytest.mark.asyncio
    async def test_nomination_from_another_club_is_not_found(self, service, club, seed):
        other = await seed.club("lead-1", name="Mystery Mondays")
        nomination = await service.nominate(club.id, "reader-1", _search_result("vol-1", "The Dispossessed"))

        with pytest.raises(NotFoundError):
            await service.like(other.id, nomination.id, "lead-1")

    @pytest.mark.asyncio
    async def test_select_sets_current_book_and_archives_rest(self, service, club, session):
        chosen = await service.nominate(club.id, "reader-1", _search_result("vol-1", "The Dispossessed"))
        other = await service.nominate(club.id, "reader-1", _search_result("vol-2", "The Lathe of Heaven"))

        selected = await service.select_nomination(club.id, chosen.id, "lead-1")

        assert selected.status == "selected"
        refreshed = await session.get(BookClub, club.id)
        assert refreshed.current_book_id == chosen.book_id
        archived = await service.list_nominations(club.id, "lead-1", status="archived")
        assert [n.id for n in archived] == [other.id]
        inbox = await NotificationService(session).list_for_user("reader-1")
        assert [n.type for n in inbox] == ["book_selected"]

    @pytest.mark.asyncio
    async def test_only_lead_selects(self, service, club):
        nomination = await service.nominate(club.id, "reader-1", _search_result("vol-1", "The Dispossessed"))

        with pytest.raises(PermissionDeniedError):
            await service.select_nomination(club.id, nomination.id, "reader-1")

    @pytest.mark.asyncio
    async def test_selected_nomination_cannot_be_selected_again(self, service, club):
        nomination = await service.nominate(club.id, "reader-1", _search_result("vol-1", "The Dispossessed"))
        await service.select_nomination(club.id, nomination.id, "lead-1")

        with pytest.raises(ConflictError):
            await service.select_nomination(club.id, nomination.id, "lead-1")
