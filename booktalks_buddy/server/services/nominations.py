"""
Service for club book nominations.

Members nominate books and like each other's nominations. Selecting a
nomination makes its book the club's current book and archives the rest.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlmodel import select

from booktalks_buddy.core.database.entities.books import Book
from booktalks_buddy.core.database.entities.nominations import BookNomination, NominationLike
from booktalks_buddy.core.errors import ConflictError, NotFoundError
from booktalks_buddy.core.models.io.books import BookRead
from booktalks_buddy.core.models.io.nominations import NominationCreate, NominationRead
from booktalks_buddy.entitlements import can_manage_club, has_entitlement

from .base import BaseService
from .notifications import NotificationService

logger = logging.getLogger(__name__)


class NominationService(BaseService):
    """Nominations, likes and selection of the next club book."""

    async def _catalog_book(self, payload: NominationCreate) -> Book:
        if payload.book_id:
            return await self.get_or_404(Book, payload.book_id, "Book not found")
        result = await self.session.execute(select(Book).where(Book.google_books_id == payload.google_books_id))
        book = result.scalars().first()
        if book is None:
            book = Book(
                google_books_id=payload.google_books_id,
                title=payload.title,
                author=payload.author,
                description=payload.description,
                cover_url=payload.cover_url,
                page_count=payload.page_count,
            )
            self.session.add(book)
            await self.session.flush()
            logger.info(f"Added {book.google_books_id} to the catalog")
        return book

    async def _nomination(self, club_id: str, nomination_id: str) -> BookNomination:
        nomination = await self.session.get(BookNomination, nomination_id)
        if nomination is None or nomination.club_id != club_id:
            raise NotFoundError("Nomination not found")
        return nomination

    async def nominate(self, club_id: str, user_id: str, payload: NominationCreate) -> NominationRead:
        club = await self.get_club(club_id)
        await self.require_member(club, user_id)
        ents = await self.entitlements(user_id)
        self.require(has_entitlement(ents, "CAN_NOMINATE_BOOKS"), "You cannot nominate books")

        book = await self._catalog_book(payload)
        existing = await self.session.execute(
            select(BookNomination)
            .where(BookNomination.club_id == club_id)
            .where(BookNomination.book_id == book.id)
            .where(BookNomination.status == "active")
        )
        if existing.scalars().first() is not None:
            raise ConflictError("This book has already been nominated")

        nomination = BookNomination(club_id=club_id, book_id=book.id, nominated_by=user_id)
        self.session.add(nomination)
        await self.session.commit()
        await self.session.refresh(nomination)
        logger.info(f"User {user_id} nominated book {book.id} in club {club_id}")
        return NominationRead.model_validate(nomination).model_copy(update={"book": BookRead.model_validate(book)})

    async def list_nominations(
        self, club_id: str, user_id: str, status: Optional[str] = "active"
    ) -> List[NominationRead]:
        """Nominations ordered by likes (most first), then newest."""
        club = await self.get_club(club_id)
        await self.require_member(club, user_id)

        like_counts = (
            select(NominationLike.nomination_id, func.count().label("like_count"))
            .group_by(NominationLike.nomination_id)
            .subquery()
        )
        statement = (
            select(BookNomination, Book, func.coalesce(like_counts.c.like_count, 0))
            .join(Book, Book.id == BookNomination.book_id)
            .outerjoin(like_counts, like_counts.c.nomination_id == BookNomination.id)
            .where(BookNomination.club_id == club_id)
        )
        if status:
            statement = statement.where(BookNomination.status == status)
        statement = statement.order_by(
            func.coalesce(like_counts.c.like_count, 0).desc(), BookNomination.nominated_at.desc()
        )
        rows = (await self.session.execute(statement)).all()

        liked = await self.session.execute(
            select(NominationLike.nomination_id)
            .where(NominationLike.user_id == user_id)
            .where(NominationLike.nomination_id.in_([n.id for n, _, _ in rows]))
        )
        liked_ids = set(liked.scalars().all())
        return [
            NominationRead.model_validate(nomination).model_copy(
                update={
                    "like_count": int(count),
                    "user_has_liked": nomination.id in liked_ids,
                    "book": BookRead.model_validate(book),
                }
            )
            for nomination, book, count in rows
        ]

    async def like(self, club_id: str, nomination_id: str, user_id: str) -> Dict[str, int]:
        """Idempotent like."""
        club = await self.get_club(club_id)
        await self.require_member(club, user_id)
        await self._nomination(club_id, nomination_id)
        if await self._find_like(nomination_id, user_id) is None:
            self.session.add(NominationLike(nomination_id=nomination_id, user_id=user_id))
            await self.session.commit()
            logger.debug(f"User {user_id} liked nomination {nomination_id}")
        return {"like_count": await self._like_count(nomination_id)}

    async def unlike(self, club_id: str, nomination_id: str, user_id: str) -> Dict[str, int]:
        """Idempotent unlike."""
        await self._nomination(club_id, nomination_id)
        like = await self._find_like(nomination_id, user_id)
        if like is not None:
            await self.session.delete(like)
            await self.session.commit()
            logger.debug(f"User {user_id} unliked nomination {nomination_id}")
        return {"like_count": await self._like_count(nomination_id)}

    async def _find_like(self, nomination_id: str, user_id: str) -> Optional[NominationLike]:
        result = await self.session.execute(
            select(NominationLike)
            .where(NominationLike.nomination_id == nomination_id)
            .where(NominationLike.user_id == user_id)
        )
        return result.scalars().first()

    async def _like_count(self, nomination_id: str) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(NominationLike).where(NominationLike.nomination_id == nomination_id)
        )
        return int(result.scalar_one())

    async def select_nomination(self, club_id: str, nomination_id: str, user_id: str) -> BookNomination:
        """Make the nominated book the club's current book and archive the other active nominations."""
        club = await self.get_club(club_id)
        ents = await self.entitlements(user_id)
        self.require(can_manage_club(ents, club.id, club.store_id), "Only club leads can select the next book")
        nomination = await self._nomination(club_id, nomination_id)
        if nomination.status != "active":
            raise ConflictError("Only active nominations can be selected")

        others = await self.session.execute(
            select(BookNomination)
            .where(BookNomination.club_id == club_id)
            .where(BookNomination.status == "active")
            .where(BookNomination.id != nomination_id)
        )
        archived = 0
        for other in others.scalars().all():
            other.status = "archived"
            archived += 1
        nomination.status = "selected"
        club.current_book_id = nomination.book_id

        book = await self.session.get(Book, nomination.book_id)
        members = await self.club_member_ids(club_id, exclude=user_id)
        NotificationService(self.session).notify_many(
            members,
            type="book_selected",
            title="Next book selected",
            message=f"The club is now reading {book.title if book else 'a new book'}",
            data={"club_id": club_id, "book_id": nomination.book_id},
            category="club",
        )
        await self.session.commit()
        await self.session.refresh(nomination)
        logger.info(f"Nomination {nomination_id} selected in club {club_id}; archived {archived} others")
        return nomination
