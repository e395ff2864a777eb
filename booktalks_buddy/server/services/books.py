"""
Services for a user's personal library: books, reading list and collections.

Nothing here depends on club roles, so these services only need the session.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import delete, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.books import (
    BookCollection,
    CollectionBook,
    PersonalBook,
    ReadingListItem,
)
from booktalks_buddy.core.database.repositories import AsyncBaseRepository
from booktalks_buddy.core.errors import ConflictError, NotFoundError, ValidationError
from booktalks_buddy.core.models.io.books import (
    CollectionBookRead,
    CollectionCreate,
    CollectionRead,
    CollectionUpdate,
    PersonalBookCreate,
    PersonalBookRead,
    ReadingListItemRead,
    ReadingListUpsert,
)

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

SORT_COLUMNS = {
    "added_at": ReadingListItem.added_at,
    "status_changed_at": ReadingListItem.status_changed_at,
    "title": PersonalBook.title,
    "rating": ReadingListItem.rating,
}


def check_page(limit: int, offset: int) -> None:
    if not 1 <= limit <= MAX_PAGE_SIZE:
        raise ValidationError(f"limit must be between 1 and {MAX_PAGE_SIZE}", field="limit")
    if offset < 0:
        raise ValidationError("offset must be 0 or greater", field="offset")


class PersonalBookService:
    """The books a user keeps in their own library."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.books = AsyncBaseRepository(session, PersonalBook)

    async def add_book(self, user_id: str, payload: PersonalBookCreate) -> PersonalBook:
        if await self.books.get_one(user_id=user_id, google_books_id=payload.google_books_id) is not None:
            raise ConflictError("This book is already in your library")
        try:
            book = await self.books.create(PersonalBook(user_id=user_id, **payload.model_dump()))
        except IntegrityError as e:
            await self.session.rollback()
            raise ConflictError("This book is already in your library") from e
        logger.info(f"User {user_id} added {book.google_books_id} to their library")
        return book

    async def get_book(self, user_id: str, book_id: str) -> PersonalBook:
        book = await self.books.get_by_id(book_id)
        if book is None or book.user_id != user_id:
            raise NotFoundError("Book not found")
        return book

    async def list_books(
        self, user_id: str, search: Optional[str] = None, limit: int = 50, offset: int = 0
    ) -> List[PersonalBook]:
        check_page(limit, offset)
        statement = select(PersonalBook).where(PersonalBook.user_id == user_id)
        if search:
            pattern = f"%{search.strip()}%"
            statement = statement.where(or_(PersonalBook.title.ilike(pattern), PersonalBook.author.ilike(pattern)))
        statement = statement.order_by(PersonalBook.added_at.desc()).offset(offset).limit(limit)
        result = await self.session.execute(statement)
        return list(result.scalars().all())

    async def remove_book(self, user_id: str, book_id: str) -> None:
        """Remove a book together with its reading list entry and collection memberships."""
        book = await self.get_book(user_id, book_id)
        await self.session.execute(delete(ReadingListItem).where(ReadingListItem.book_id == book_id))
        await self.session.execute(delete(CollectionBook).where(CollectionBook.book_id == book_id))
        await self.session.delete(book)
        await self.session.commit()
        logger.info(f"User {user_id} removed book {book_id} from their library")


class ReadingListService:
    """Reading list entries, with ratings and reviews."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def upsert(self, user_id: str, payload: ReadingListUpsert) -> ReadingListItemRead:
        """
        Add a library book to the reading list or update its entry.

        ``status_changed_at`` only moves when the status actually changes.
        """
        book = await PersonalBookService(self.session).get_book(user_id, payload.book_id)
        result = await self.session.execute(
            select(ReadingListItem)
            .where(ReadingListItem.user_id == user_id)
            .where(ReadingListItem.book_id == payload.book_id)
        )
        item = result.scalars().first()
        now = utc_now()
        if item is None:
            item = ReadingListItem(
                user_id=user_id,
                book_id=payload.book_id,
                status=payload.status.value,
                added_at=now,
                status_changed_at=now,
            )
            self.session.add(item)
        elif item.status != payload.status.value:
            item.status = payload.status.value
            item.status_changed_at = now

        item.rating = payload.rating
        item.review_text = payload.review_text
        item.is_public = payload.is_public
        item.review_is_public = payload.review_is_public
        await self.session.commit()
        await self.session.refresh(item)
        logger.info(f"Reading list entry {item.id} of {user_id} is {item.status}")
        return self._read(item, book)

    @staticmethod
    def _read(item: ReadingListItem, book: Optional[PersonalBook], hide_review: bool = False) -> ReadingListItemRead:
        read = ReadingListItemRead.model_validate(item)
        update = {"book": PersonalBookRead.model_validate(book) if book else None}
        if hide_review:
            update["review_text"] = None
        return read.model_copy(update=update)

    async def remove(self, user_id: str, item_id: str) -> None:
        item = await self.session.get(ReadingListItem, item_id)
        if item is None or item.user_id != user_id:
            raise NotFoundError("Reading list entry not found")
        await self.session.delete(item)
        await self.session.commit()
        logger.info(f"Removed reading list entry {item_id}")

    async def _query(
        self,
        user_id: str,
        status: Optional[str],
        rating: Optional[int],
        is_public: Optional[bool],
        sort_by: str,
        sort_order: str,
        limit: int,
        offset: int,
    ) -> List[Tuple[ReadingListItem, PersonalBook]]:
        check_page(limit, offset)
        if sort_by not in SORT_COLUMNS:
            raise ValidationError(f"sort_by must be one of {', '.join(SORT_COLUMNS)}", field="sort_by")
        if sort_order not in ("asc", "desc"):
            raise ValidationError("sort_order must be asc or desc", field="sort_order")

        statement = (
            select(ReadingListItem, PersonalBook)
            .join(PersonalBook, PersonalBook.id == ReadingListItem.book_id)
            .where(ReadingListItem.user_id == user_id)
        )
        if status:
            statement = statement.where(ReadingListItem.status == status)
        if rating is not None:
            statement = statement.where(ReadingListItem.rating == rating)
        if is_public is not None:
            statement = statement.where(ReadingListItem.is_public == is_public)
        column = SORT_COLUMNS[sort_by]
        statement = statement.order_by(column.asc() if sort_order == "asc" else column.desc())
        result = await self.session.execute(statement.offset(offset).limit(limit))
        return [(item, book) for item, book in result.all()]

    async def list_own(
        self,
        user_id: str,
        status: Optional[str] = None,
        rating: Optional[int] = None,
        is_public: Optional[bool] = None,
        sort_by: str = "added_at",
        sort_order: str = "desc",
        limit: int = 50,
        offset: int = 0,
    ) -> List[ReadingListItemRead]:
        rows = await self._query(user_id, status, rating, is_public, sort_by, sort_order, limit, offset)
        return [self._read(item, book) for item, book in rows]

    async def list_public(
        self,
        owner_id: str,
        viewer_id: Optional[str],
        status: Optional[str] = None,
        sort_by: str = "added_at",
        sort_order: str = "desc",
        limit: int = 50,
        offset: int = 0,
    ) -> List[ReadingListItemRead]:
        """Another user's list: public items only, reviews only when shared."""
        if viewer_id == owner_id:
            return await self.list_own(
                owner_id, status=status, sort_by=sort_by, sort_order=sort_order, limit=limit, offset=offset
            )
        rows = await self._query(owner_id, status, None, True, sort_by, sort_order, limit, offset)
        return [self._read(item, book, hide_review=not item.review_is_public) for item, book in rows]


class CollectionService:
    """Named groups of library books."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.collections = AsyncBaseRepository(session, BookCollection)
        self.entries = AsyncBaseRepository(session, CollectionBook)

    async def _count(self, collection_id: str) -> int:
        return await self.entries.count({"collection_id": collection_id})

    async def _read(self, collection: BookCollection) -> CollectionRead:
        return CollectionRead.model_validate(collection).model_copy(
            update={"book_count": await self._count(collection.id)}
        )

    async def _owned(self, user_id: str, collection_id: str) -> BookCollection:
        collection = await self.collections.get_by_id(collection_id)
        if collection is None or collection.user_id != user_id:
            raise NotFoundError("Collection not found")
        return collection

    async def _visible(self, viewer_id: Optional[str], collection_id: str) -> BookCollection:
        collection = await self.collections.get_by_id(collection_id)
        # Private collections are reported as missing to everyone but the owner
        if collection is None or (not collection.is_public and collection.user_id != viewer_id):
            raise NotFoundError("Collection not found")
        return collection

    async def create(self, user_id: str, payload: CollectionCreate) -> CollectionRead:
        collection = await self.collections.create(BookCollection(user_id=user_id, **payload.model_dump()))
        logger.info(f"User {user_id} created collection {collection.id}")
        return await self._read(collection)

    async def update(self, user_id: str, collection_id: str, payload: CollectionUpdate) -> CollectionRead:
        collection = await self._owned(user_id, collection_id)
        collection = await self.collections.update(collection, payload.model_dump(exclude_unset=True))
        logger.info(f"Collection {collection_id} updated")
        return await self._read(collection)

    async def delete(self, user_id: str, collection_id: str) -> None:
        collection = await self._owned(user_id, collection_id)
        await self.session.execute(delete(CollectionBook).where(CollectionBook.collection_id == collection_id))
        await self.session.delete(collection)
        await self.session.commit()
        logger.info(f"Collection {collection_id} deleted")

    async def list_for_owner(self, owner_id: str, viewer_id: Optional[str]) -> List[CollectionRead]:
        filters: Dict[str, Any] = {"user_id": owner_id}
        if viewer_id != owner_id:
            filters["is_public"] = True
        collections = await self.collections.list(filters=filters, order_by=BookCollection.created_at.desc())
        return [await self._read(c) for c in collections]

    async def get(self, viewer_id: Optional[str], collection_id: str) -> CollectionRead:
        return await self._read(await self._visible(viewer_id, collection_id))

    async def list_books(self, viewer_id: Optional[str], collection_id: str) -> List[CollectionBookRead]:
        await self._visible(viewer_id, collection_id)
        result = await self.session.execute(
            select(CollectionBook, PersonalBook)
            .join(PersonalBook, PersonalBook.id == CollectionBook.book_id)
            .where(CollectionBook.collection_id == collection_id)
            .order_by(CollectionBook.added_at.desc())
        )
        return [
            CollectionBookRead.model_validate(entry).model_copy(update={"book": PersonalBookRead.model_validate(book)})
            for entry, book in result.all()
        ]

    async def add_book(self, user_id: str, collection_id: str, book_id: str, notes: Optional[str]) -> CollectionBook:
        await self._owned(user_id, collection_id)
        await PersonalBookService(self.session).get_book(user_id, book_id)
        if await self.entries.get_one(collection_id=collection_id, book_id=book_id) is not None:
            raise ConflictError("Book is already in this collection")
        entry = await self.entries.create(CollectionBook(collection_id=collection_id, book_id=book_id, notes=notes))
        logger.info(f"Book {book_id} added to collection {collection_id}")
        return entry

    async def remove_book(self, user_id: str, collection_id: str, book_id: str) -> None:
        await self._owned(user_id, collection_id)
        entry = await self.entries.get_one(collection_id=collection_id, book_id=book_id)
        if entry is None:
            raise NotFoundError("Book is not in this collection")
        await self.session.delete(entry)
        await self.session.commit()
        logger.info(f"Book {book_id} removed from collection {collection_id}")
