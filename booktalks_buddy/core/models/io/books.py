"""Catalog, personal library, reading list, collection and search schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from booktalks_buddy.core.models.domain import ReadingListStatus


class BookRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    google_books_id: Optional[str] = None
    title: str
    author: Optional[str] = None
    description: Optional[str] = None
    cover_url: Optional[str] = None
    page_count: Optional[int] = None


class PersonalBookCreate(BaseModel):
    google_books_id: str = Field(..., min_length=1, max_length=64)
    title: str = Field(..., min_length=1, max_length=500)
    author: str = Field(..., min_length=1, max_length=300)
    cover_image_url: Optional[str] = Field(default=None, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    genre: Optional[str] = Field(default=None, max_length=100)
    categories: List[str] = Field(default_factory=list)
    published_date: Optional[str] = Field(default=None, max_length=20)
    page_count: Optional[int] = Field(default=None, gt=0)


class PersonalBookRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    google_books_id: str
    title: str
    author: str
    cover_image_url: Optional[str] = None
    description: Optional[str] = None
    genre: Optional[str] = None
    categories: Optional[List[str]] = None
    published_date: Optional[str] = None
    page_count: Optional[int] = None
    added_at: datetime


class ReadingListUpsert(BaseModel):
    book_id: str = Field(..., description="Personal library book")
    status: ReadingListStatus = ReadingListStatus.want_to_read
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    review_text: Optional[str] = Field(default=None, max_length=2000)
    is_public: bool = True
    review_is_public: bool = True


class ReadingListItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    book_id: str
    status: ReadingListStatus
    rating: Optional[int] = None
    review_text: Optional[str] = None
    is_public: bool
    review_is_public: bool
    added_at: datetime
    status_changed_at: datetime
    book: Optional[PersonalBookRead] = None


class CollectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: bool = True


class CollectionUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    is_public: Optional[bool] = None


class CollectionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    is_public: bool
    created_at: datetime
    updated_at: datetime
    book_count: int = 0


class CollectionBookAdd(BaseModel):
    book_id: str
    notes: Optional[str] = Field(default=None, max_length=500)


class CollectionBookRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    collection_id: str
    book_id: str
    notes: Optional[str] = None
    added_at: datetime
    book: Optional[PersonalBookRead] = None


class BookSearchResult(BaseModel):
    google_books_id: str
    title: str
    authors: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    page_count: Optional[int] = None
    published_date: Optional[str] = None
    categories: List[str] = Field(default_factory=list)


class BookSearchResponse(BaseModel):
    items: List[BookSearchResult]
    total_items: int
