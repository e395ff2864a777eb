"""Join request question schemas.

Text and ordering rules are checked by the question service so that the API
reports them as field-level 400 errors.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class QuestionCreate(BaseModel):
    question_text: str = Field(..., description="Question shown to prospective members, 1..200 characters")
    is_required: bool = Field(default=False, description="Whether an answer is mandatory")
    display_order: int = Field(..., description="Position 1..5, unique within the club")


class QuestionUpdate(BaseModel):
    question_text: Optional[str] = None
    is_required: Optional[bool] = None
    display_order: Optional[int] = None


class QuestionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    club_id: str
    question_text: str
    is_required: bool
    display_order: int
    created_at: datetime
    updated_at: datetime


class QuestionOrder(BaseModel):
    id: str
    display_order: int


class QuestionReorder(BaseModel):
    questions: List[QuestionOrder] = Field(..., description="New position of every question being moved")


class QuestionsToggle(BaseModel):
    enabled: bool = Field(..., description="Turn join questions on or off for the club")
