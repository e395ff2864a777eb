"""Book nomination schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from booktalks_buddy.core.models.domain import NominationStatus

from .books import BookRead


class NominationCreate(BaseModel):
    """
    Book to nominate.

    Either ``book_id`` of a catalog book, or the metadata of a search result
    (``google_books_id`` and ``title``), which is added to the catalog first.
    """

    book_id: Optional[str] = None
    google_books_id: Optional[str] = Field(default=None, max_length=64)
    title: Optional[str] = Field(default=None, max_length=500)
    author: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = Field(default=None, max_length=2000)
    cover_url: Optional[str] = Field(default=None, max_length=500)
    page_count: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def check_reference(self) -> "NominationCreate":
        if not self.book_id and not (self.google_books_id and self.title):
            raise ValueError("Provide book_id, or google_books_id and title")
        return self


class NominationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    club_id: str
    book_id: str
    nominated_by: str
    status: NominationStatus
    nominated_at: datetime
    like_count: int = 0
    user_has_liked: bool = False
    book: Optional[BookRead] = None
