"""
Service for platform and club dashboards.

Platform analytics bucket creation timestamps by calendar month. Club
analytics combine live counts with daily snapshots rebuilt from member
join dates and post timestamps.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import func
from sqlmodel import select

from booktalks_buddy.analytics import (
    ClubSnapshot,
    compute_trends,
    cumulative_growth,
    generate_insights,
    group_by_month,
    health_score,
    last_n_month_keys,
    percentage,
)
from booktalks_buddy.analytics.club_health import insights_as_dicts
from booktalks_buddy.core.database.base import utc_now
from booktalks_buddy.core.database.entities.clubs import BookClub, ClubMember
from booktalks_buddy.core.database.entities.discussions import DiscussionPost, DiscussionTopic
from booktalks_buddy.core.database.entities.events import Event
from booktalks_buddy.core.database.entities.users import User
from booktalks_buddy.core.errors import ValidationError
from booktalks_buddy.core.models.io.analytics import ClubAnalytics, PlatformAnalytics
from booktalks_buddy.entitlements import can_manage_club, is_platform_owner

from .base import BaseService
from .progress import ProgressService

logger = logging.getLogger(__name__)

ACTIVE_WINDOW_DAYS = 30
SNAPSHOT_DAYS = 14
MAX_MONTHS = 24


def build_daily_snapshots(
    joined_at: List[datetime], posts: List[tuple], now: Optional[datetime] = None, days: int = SNAPSHOT_DAYS
) -> List[ClubSnapshot]:
    """
    Rebuild one snapshot per day, newest first.

    Args:
        joined_at: Join timestamps of the current members
        posts: ``(user_id, created_at)`` pairs of the club's posts
        now: End of the most recent day
        days: Number of snapshots
    """
    now = now or utc_now()
    snapshots: List[ClubSnapshot] = []
    for day in range(days):
        end = now - timedelta(days=day)
        start = end - timedelta(days=7)
        week = [(user_id, ts) for user_id, ts in posts if start < ts <= end]
        snapshots.append(
            ClubSnapshot(
                member_count=sum(1 for ts in joined_at if ts <= end),
                posts_this_week=len(week),
                active_members_week=len({user_id for user_id, _ in week}),
            )
        )
    return snapshots


class AnalyticsService(BaseService):
    """Dashboard numbers for the platform owner and club managers."""

    async def _created_since(self, model, since: datetime) -> List[datetime]:
        result = await self.session.execute(select(model.created_at).where(model.created_at >= since))
        return list(result.scalars().all())

    async def _count(self, model) -> int:
        result = await self.session.execute(select(func.count()).select_from(model))
        return int(result.scalar_one())

    async def platform(self, user_id: str, months: int = 6) -> PlatformAnalytics:
        """Monthly activity of the whole platform over the last ``months`` months."""
        ents = await self.entitlements(user_id)
        self.require(is_platform_owner(ents), "Only the platform owner can view platform analytics")
        if not 1 <= months <= MAX_MONTHS:
            raise ValidationError(f"months must be between 1 and {MAX_MONTHS}", field="months")

        keys = last_n_month_keys(months, utc_now().date())
        year, month = (int(part) for part in keys[0].split("-"))
        since = datetime(year, month, 1)

        def buckets(timestamps: List[datetime]):
            return group_by_month([{"created_at": ts} for ts in timestamps], "created_at", keys)

        users = buckets(await self._created_since(User, since))
        total_users = await self._count(User)
        users_before = total_users - sum(users.values())
        analytics = PlatformAnalytics(
            months=keys,
            users_per_month=users,
            clubs_per_month=buckets(await self._created_since(BookClub, since)),
            posts_per_month=buckets(await self._created_since(DiscussionPost, since)),
            events_per_month=buckets(await self._created_since(Event, since)),
            user_growth=cumulative_growth(users, starting_total=users_before),
            totals={
                "users": total_users,
                "clubs": await self._count(BookClub),
                "posts": await self._count(DiscussionPost),
                "events": await self._count(Event),
            },
        )
        logger.debug(f"Platform analytics computed for {months} months")
        return analytics

    async def club(self, club_id: str, user_id: str) -> ClubAnalytics:
        club = await self.get_club(club_id)
        ents = await self.entitlements(user_id)
        self.require(can_manage_club(ents, club.id, club.store_id), "Only club leads can view club analytics")
        now = utc_now()

        members = await self.session.execute(
            select(ClubMember.user_id, ClubMember.joined_at)
            .where(ClubMember.club_id == club_id)
            .where(ClubMember.role != "pending")
        )
        member_rows = members.all()
        member_ids = {row[0] for row in member_rows}

        topic_count = (
            await self.session.execute(
                select(func.count()).select_from(DiscussionTopic).where(DiscussionTopic.club_id == club_id)
            )
        ).scalar_one()
        post_rows = (
            await self.session.execute(
                select(DiscussionPost.user_id, DiscussionPost.created_at)
                .join(DiscussionTopic, DiscussionTopic.id == DiscussionPost.topic_id)
                .where(DiscussionTopic.club_id == club_id)
                .where(DiscussionPost.is_deleted == False)  # noqa: E712
            )
        ).all()
        posts = [(row[0], row[1]) for row in post_rows]

        cutoff = now - timedelta(days=ACTIVE_WINDOW_DAYS)
        active = {uid for uid, ts in posts if ts >= cutoff and uid in member_ids}
        posters = {uid for uid, _ in posts if uid in member_ids}
        member_count = len(member_ids)

        engagement = percentage(len(active), member_count)
        participation = percentage(len(posters), member_count)
        avg_posts = round(len(posts) / topic_count, 2) if topic_count else 0.0
        stats = await ProgressService(self.session, self.calculator).get_stats(club_id)
        completion = stats.completion_percentage

        trends = compute_trends(build_daily_snapshots([row[1] for row in member_rows], posts, now))
        logger.debug(f"Club analytics for {club_id}: engagement={engagement} participation={participation}")
        return ClubAnalytics(
            club_id=club_id,
            member_count=member_count,
            topic_count=int(topic_count),
            post_count=len(posts),
            active_members=len(active),
            engagement_rate=engagement,
            avg_posts_per_topic=avg_posts,
            reading_completion=completion,
            health_score=health_score(engagement, participation, completion),
            trends={"members": trends.members, "activity": trends.activity, "engagement": trends.engagement},
            insights=insights_as_dicts(generate_insights(engagement, avg_posts, trends)),
        )
