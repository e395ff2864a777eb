"""
API endpoints for platform and club analytics.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from booktalks_buddy.core.models.io.analytics import ClubAnalytics, PlatformAnalytics
from booktalks_buddy.server.services.deps import AnalyticsServiceDep, CurrentUserDep

router = APIRouter(tags=["analytics"])


@router.get(
    "/platform",
    response_model=PlatformAnalytics,
    summary="Platform Analytics",
    description="Monthly users, clubs, posts and events with cumulative user growth. Platform owner only.",
    responses={400: {"description": "months out of range"}, 403: {"description": "Not the platform owner"}},
)
async def platform_analytics(
    user: CurrentUserDep,
    service: AnalyticsServiceDep,
    months: int = Query(default=6, description="Number of months, 1..24"),
) -> PlatformAnalytics:
    return await service.platform(user.id, months)


@router.get(
    "/clubs/{club_id}",
    response_model=ClubAnalytics,
    summary="Club Analytics",
    description="Engagement, reading completion, health score, trends and insights of a club.",
    responses={403: {"description": "Not a club manager"}, 404: {"description": "Club not found"}},
)
async def club_analytics(club_id: str, user: CurrentUserDep, service: AnalyticsServiceDep) -> ClubAnalytics:
    """
    Club analytics.

    - **health_score**: 0..100, weighted from engagement, activity, completion and participation.
    - **trends**: Direction of members, activity and engagement over the last two weeks.
    - **insights**: Typed hints with a suggested action.
    """
    return await service.club(club_id, user.id)
