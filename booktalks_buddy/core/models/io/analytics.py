"""Dashboard analytics schemas."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class PlatformAnalytics(BaseModel):
    months: List[str] = Field(description="Month keys, oldest first")
    users_per_month: Dict[str, int]
    clubs_per_month: Dict[str, int]
    posts_per_month: Dict[str, int]
    events_per_month: Dict[str, int]
    user_growth: Dict[str, int] = Field(description="Cumulative users at the end of each month")
    totals: Dict[str, int]


class ClubAnalytics(BaseModel):
    club_id: str
    member_count: int
    topic_count: int
    post_count: int
    active_members: int = Field(description="Members who posted in the last 30 days")
    engagement_rate: float
    avg_posts_per_topic: float
    reading_completion: float
    health_score: int
    trends: Dict[str, str]
    insights: List[Dict[str, str]]
