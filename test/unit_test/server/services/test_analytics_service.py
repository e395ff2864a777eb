"""
Unit tests for platform and club dashboards.
"""

from datetime import datetime, timedelta

import pytest

from booktalks_buddy.core.errors import PermissionDeniedError, ValidationError
from booktalks_buddy.core.models.io.discussions import PostCreate, TopicCreate
from booktalks_buddy.server.services.analytics import AnalyticsService, build_daily_snapshots
from booktalks_buddy.server.services.discussions import DiscussionService


class TestBuildDailySnapshots:
    def test_counts_members_and_weekly_posts(self):
        now = datetime(2026, 3, 15, 12, 0)
        joined = [now - timedelta(days=30), now - timedelta(hours=23)]
        posts = [
            ("reader-1", now - timedelta(hours=2)),
            ("reader-1", now - timedelta(days=3)),
            ("reader-2", now - timedelta(days=7, hours=12)),
        ]

        snapshots = build_daily_snapshots(joined, posts, now=now, days=3)

        assert len(snapshots) == 3
        today, yesterday, two_days_ago = snapshots
        assert (today.member_count, today.posts_this_week, today.active_members_week) == (2, 2, 1)
        assert yesterday.member_count == 1
        assert (yesterday.posts_this_week, yesterday.active_members_week) == (2, 2)
        assert two_days_ago.member_count == 1

    def test_no_activity(self):
        snapshots = build_daily_snapshots([], [], now=datetime(2026, 3, 15), days=2)

        assert [(s.member_count, s.posts_this_week) for s in snapshots] == [(0, 0), (0, 0)]


@pytest.fixture
def service(session, calculator):
    return AnalyticsService(session, calculator)


class TestPlatformAnalytics:
    @pytest.mark.asyncio
    async def test_owner_only(self, service, seed):
        await seed.user("reader-1")

        with pytest.raises(PermissionDeniedError):
            await service.platform("reader-1")

    @pytest.mark.asyncio
    async def test_month_range_is_validated(self, service, seed):
        await seed.user("owner-1")
        await seed.platform_owner("owner-1")

        with pytest.raises(ValidationError) as exc_info:
            await service.platform("owner-1", months=25)

        assert exc_info.value.field == "months"

    @pytest.mark.asyncio
    async def test_current_month_totals(self, service, seed):
        await seed.user("owner-1")
        await seed.platform_owner("owner-1")
        await seed.user("reader-1")
        await seed.club("reader-1")

        analytics = await service.platform("owner-1", months=3)

        assert len(analytics.months) == 3
        current = analytics.months[-1]
        assert analytics.users_per_month[current] == 2
        assert analytics.clubs_per_month[current] == 1
        assert analytics.user_growth[current] == 2
        assert analytics.totals == {"users": 2, "clubs": 1, "posts": 0, "events": 0}


class TestClubAnalytics:
    @pytest.fixture
    async def club(self, seed):
        await seed.user("lead-1")
        await seed.user("reader-1")
        await seed.user("reader-2")
        club = await seed.club("lead-1")
        await seed.member(club.id, "reader-1")
        await seed.member(club.id, "reader-2")
        return club

    @pytest.mark.asyncio
    async def test_engagement_and_health(self, service, club, session, calculator):
        discussions = DiscussionService(session, calculator)
        topic = await discussions.create_topic(club.id, "reader-1", TopicCreate(title="First impressions"))
        await discussions.create_post(topic.id, "reader-1", PostCreate(content="Gripping start"))
        await discussions.create_post(topic.id, "reader-1", PostCreate(content="Chapter 2 too"))

        analytics = await service.club(club.id, "lead-1")

        assert analytics.member_count == 3
        assert analytics.topic_count == 1
        assert analytics.post_count == 2
        assert analytics.active_members == 1
        assert analytics.engagement_rate == 33.33
        assert analytics.avg_posts_per_topic == 2.0
        assert analytics.reading_completion == 0.0
        assert analytics.health_score == 27
        assert set(analytics.trends) == {"members", "activity", "engagement"}

    @pytest.mark.asyncio
    async def test_members_cannot_view(self, service, club):
        with pytest.raises(PermissionDeniedError):
            await service.club(club.id, "reader-1")
