"""
Book entity models.

``books`` is the shared catalog that clubs nominate from and read. The other
tables form a user's personal library: ``personal_books`` holds the user's own
copy of the metadata, reading list rows and collection entries point at it.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import JSON, Field

from ..base import Base, new_id, utc_now


class Book(Base, table=True):
    """Catalog entry shared by clubs.

    Table: books
    """

    __tablename__ = "books"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    google_books_id: Optional[str] = Field(default=None, max_length=64, unique=True, index=True)
    title: str = Field(max_length=500, index=True)
    author: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = Field(default=None, max_length=2000)
    cover_url: Optional[str] = Field(default=None, max_length=500)
    page_count: Optional[int] = Field(default=None)

    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"Book(id={self.id}, title={self.title})"


class PersonalBook(Base, table=True):
    """A book in a user's personal library.

    Table: personal_books
    """

    __tablename__ = "personal_books"
    __table_args__ = (
        UniqueConstraint("user_id", "google_books_id", name="uq_personal_books_user_google_id"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    google_books_id: str = Field(max_length=64)
    title: str = Field(max_length=500)
    author: str = Field(max_length=300)
    cover_image_url: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    genre: Optional[str] = Field(default=None, max_length=100)
    categories: Optional[List[str]] = Field(default=None, sa_type=JSON)
    published_date: Optional[str] = Field(default=None, max_length=20)
    page_count: Optional[int] = Field(default=None)

    added_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"PersonalBook(id={self.id}, user_id={self.user_id}, title={self.title})"


class ReadingListItem(Base, table=True):
    """Reading status, rating and review of a personal book.

    Table: reading_lists
    """

    __tablename__ = "reading_lists"
    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_reading_lists_user_book"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    book_id: str = Field(foreign_key="personal_books.id", index=True, max_length=64)
    status: str = Field(default="want_to_read", max_length=32)
    rating: Optional[int] = Field(default=None, description="1..5")
    review_text: Optional[str] = Field(default=None, max_length=2000)
    is_public: bool = Field(default=True)
    review_is_public: bool = Field(default=True)

    added_at: datetime = Field(default_factory=utc_now, index=True)
    status_changed_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"ReadingListItem(id={self.id}, book_id={self.book_id}, status={self.status})"


class BookCollection(Base, table=True):
    """Named, user-curated group of personal books.

    Table: book_collections
    """

    __tablename__ = "book_collections"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"BookCollection(id={self.id}, name={self.name})"


class CollectionBook(Base, table=True):
    """Membership of a personal book in a collection.

    Table: collection_books
    """

    __tablename__ = "collection_books"
    __table_args__ = (
        UniqueConstraint("collection_id", "book_id", name="uq_collection_books_collection_book"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    collection_id: str = Field(foreign_key="book_collections.id", index=True, max_length=64)
    book_id: str = Field(foreign_key="personal_books.id", index=True, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=500)

    added_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"CollectionBook(collection_id={self.collection_id}, book_id={self.book_id})"
