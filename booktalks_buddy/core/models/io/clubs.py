"""Club, membership and join request schemas."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from booktalks_buddy.core.models.domain import ClubPrivacy, ClubRole


class ClubCreate(BaseModel):
    """Payload for creating a book club. The caller becomes its lead."""

    name: str = Field(..., min_length=1, max_length=100, description="Club name", examples=["Sci-Fi Saturdays"])
    description: Optional[str] = Field(default=None, max_length=1000, description="What the club reads and how it meets")
    privacy: ClubPrivacy = Field(default=ClubPrivacy.public, description="Private clubs require approval to join")
    store_id: Optional[str] = Field(default=None, description="Hosting store, if any")
    join_questions_enabled: bool = Field(default=False, description="Ask join questions to prospective members")
    progress_tracking_enabled: bool = Field(default=False, description="Let members record reading progress")
    is_premium: bool = Field(default=False, description="Restrict the club to premium members")


class ClubUpdate(BaseModel):
    """Partial update of a club."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    privacy: Optional[ClubPrivacy] = None
    join_questions_enabled: Optional[bool] = None
    progress_tracking_enabled: Optional[bool] = None
    is_premium: Optional[bool] = None


class ClubRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    privacy: ClubPrivacy
    lead_user_id: str
    store_id: Optional[str] = None
    current_book_id: Optional[str] = None
    join_questions_enabled: bool
    progress_tracking_enabled: bool
    is_premium: bool
    created_at: datetime
    updated_at: datetime
    member_count: Optional[int] = Field(default=None, description="Members excluding pending requests")


class CurrentBookUpdate(BaseModel):
    book_id: str = Field(..., description="Catalog book the club is reading now")


class JoinAnswer(BaseModel):
    question_id: str = Field(..., description="Question being answered")
    answer: str = Field(default="", description="Answer text, at most 500 characters")


class JoinRequest(BaseModel):
    """Answers submitted with a join request. Empty when the club asks nothing."""

    answers: List[JoinAnswer] = Field(default_factory=list)


class JoinResult(BaseModel):
    success: bool
    message: str
    role: ClubRole
    membership_id: str


class StoredAnswer(BaseModel):
    question_id: str
    question_text: str
    answer: str
    is_required: bool


class JoinAnswersRead(BaseModel):
    user_id: str
    club_id: str
    answers: List[StoredAnswer] = Field(default_factory=list)
    submitted_at: Optional[str] = None


class MemberRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    club_id: str
    role: ClubRole
    joined_at: datetime


class PendingRequestRead(BaseModel):
    user_id: str
    club_id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    requested_at: datetime
    has_answers: bool


class ModeratorAssign(BaseModel):
    user_id: str = Field(..., description="Member to promote to moderator")


class ModeratorRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    club_id: str
    user_id: str
    assigned_by: Optional[str] = None
    created_at: datetime
