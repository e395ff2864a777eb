"""
Store entity models.

Stores own clubs and events. Store administrators (owners and managers) are
the source of the ``STORE_OWNER_*`` / ``STORE_MANAGER_*`` entitlements, and
the store's landing page carousel is curated by them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import Base, new_id, utc_now


class Store(Base, table=True):
    """Bookstore hosting clubs and events.

    Table: stores
    """

    __tablename__ = "stores"
    __table_args__ = ({"extend_existing": True},)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    location: Optional[str] = Field(default=None, max_length=200)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"Store(id={self.id}, name={self.name})"


class StoreAdministrator(Base, table=True):
    """Owner or manager assignment for a store.

    Table: store_administrators
    """

    __tablename__ = "store_administrators"
    __table_args__ = (
        UniqueConstraint("store_id", "user_id", name="uq_store_administrators_store_user"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    store_id: str = Field(foreign_key="stores.id", index=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", index=True, max_length=64)
    role: str = Field(max_length=16, description="owner or manager")
    assigned_by: Optional[str] = Field(default=None, max_length=64)

    created_at: datetime = Field(default_factory=utc_now)

    def __repr__(self) -> str:
        return f"StoreAdministrator(store_id={self.store_id}, user_id={self.user_id}, role={self.role})"


class CarouselItem(Base, table=True):
    """Featured book slot on a store's landing page carousel.

    Table: carousel_items
    """

    __tablename__ = "carousel_items"
    __table_args__ = (
        UniqueConstraint("store_id", "position", name="uq_carousel_items_store_position"),
        {"extend_existing": True},
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    store_id: str = Field(foreign_key="stores.id", index=True, max_length=64)
    position: int = Field(description="Slot 1..12")
    book_title: str = Field(max_length=200)
    book_author: str = Field(max_length=100)
    book_isbn: Optional[str] = Field(default=None, max_length=20)
    featured_badge: Optional[str] = Field(default=None, max_length=50)
    overlay_text: Optional[str] = Field(default=None, max_length=100)
    click_destination_url: Optional[str] = Field(default=None, max_length=500)
    book_image_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = Field(default=True)
    created_by: Optional[str] = Field(default=None, max_length=64)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now, sa_column_kwargs={"onupdate": utc_now})

    def __repr__(self) -> str:
        return f"CarouselItem(id={self.id}, store_id={self.store_id}, position={self.position})"
