"""Store, store administrator and carousel schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from booktalks_buddy.core.models.domain import StoreRole


class StoreCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    location: Optional[str] = Field(default=None, max_length=200)
    owner_id: str = Field(..., description="User who becomes the store owner")


class StoreRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    location: Optional[str] = None
    created_at: datetime


class StoreAdminCreate(BaseModel):
    user_id: str
    role: StoreRole = StoreRole.manager


class StoreAdminRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    store_id: str
    user_id: str
    role: StoreRole
    assigned_by: Optional[str] = None
    created_at: datetime


class CarouselItemCreate(BaseModel):
    position: int = Field(..., ge=1, le=12, description="Carousel slot, unique per store")
    book_title: str = Field(..., min_length=1, max_length=200)
    book_author: str = Field(..., min_length=1, max_length=100)
    book_isbn: Optional[str] = Field(default=None, max_length=20)
    featured_badge: Optional[str] = Field(default=None, max_length=50)
    overlay_text: Optional[str] = Field(default=None, max_length=100)
    click_destination_url: Optional[str] = Field(default=None, max_length=500)
    book_image_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True


class CarouselItemUpdate(BaseModel):
    position: Optional[int] = Field(default=None, ge=1, le=12)
    book_title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    book_author: Optional[str] = Field(default=None, min_length=1, max_length=100)
    book_isbn: Optional[str] = Field(default=None, max_length=20)
    featured_badge: Optional[str] = Field(default=None, max_length=50)
    overlay_text: Optional[str] = Field(default=None, max_length=100)
    click_destination_url: Optional[str] = Field(default=None, max_length=500)
    book_image_url: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None


class CarouselItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    store_id: str
    position: int
    book_title: str
    book_author: str
    book_isbn: Optional[str] = None
    featured_badge: Optional[str] = None
    overlay_text: Optional[str] = None
    click_destination_url: Optional[str] = None
    book_image_url: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CarouselPosition(BaseModel):
    id: str
    position: int = Field(..., ge=1, le=12)


class CarouselReorder(BaseModel):
    items: List[CarouselPosition] = Field(..., min_length=1)
