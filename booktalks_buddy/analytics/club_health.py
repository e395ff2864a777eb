"""
Club health metrics, trends and insights.

Trends compare the average of the most recent seven daily snapshots with the
seven before them. Snapshots are ordered newest first.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, List, Literal, Sequence

Trend = Literal["up", "down", "stable"]

MEMBER_TREND_THRESHOLD = 0.05
ACTIVITY_TREND_THRESHOLD = 0.10
ENGAGEMENT_TREND_THRESHOLD = 0.05

HIGH_ENGAGEMENT = 70
LOW_ENGAGEMENT = 30
HIGH_POSTS_PER_TOPIC = 10
LOW_POSTS_PER_TOPIC = 3


@dataclass(frozen=True)
class ClubSnapshot:
    """Daily state of a club."""

    member_count: int
    posts_this_week: int
    active_members_week: int

    @property
    def engagement(self) -> float:
        if self.member_count <= 0:
            return 0.0
        return self.active_members_week / self.member_count * 100


@dataclass(frozen=True)
class ClubTrends:
    members: Trend = "stable"
    activity: Trend = "stable"
    engagement: Trend = "stable"


@dataclass(frozen=True)
class Insight:
    type: Literal["positive", "warning"]
    category: str
    title: str
    description: str
    recommendation: str


def health_score(engagement: float, participation: float, completion: float) -> int:
    """Weighted club health: 40% engagement, 40% discussion participation, 20% reading completion."""
    return round(engagement * 0.4 + participation * 0.4 + completion * 0.2)


def percentage(part: float, whole: float, digits: int = 2) -> float:
    if whole <= 0:
        return 0.0
    return round(part / whole * 100, digits)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def _trend(recent: float, previous: float, threshold: float) -> Trend:
    if recent > previous * (1 + threshold):
        return "up"
    if recent < previous * (1 - threshold):
        return "down"
    return "stable"


def compute_trends(snapshots: Sequence[ClubSnapshot]) -> ClubTrends:
    """Compare the last 7 snapshots against the 7 before them."""
    if len(snapshots) < 2:
        return ClubTrends()

    recent = snapshots[:7]
    previous = snapshots[7:14] or recent

    return ClubTrends(
        members=_trend(
            _mean([s.member_count for s in recent]),
            _mean([s.member_count for s in previous]),
            MEMBER_TREND_THRESHOLD,
        ),
        activity=_trend(
            _mean([s.posts_this_week for s in recent]),
            _mean([s.posts_this_week for s in previous]),
            ACTIVITY_TREND_THRESHOLD,
        ),
        engagement=_trend(
            _mean([s.engagement for s in recent]),
            _mean([s.engagement for s in previous]),
            ENGAGEMENT_TREND_THRESHOLD,
        ),
    )


def generate_insights(engagement_score: float, avg_posts_per_topic: float, trends: ClubTrends) -> List[Insight]:
    insights: List[Insight] = []

    if engagement_score >= HIGH_ENGAGEMENT:
        insights.append(
            Insight(
                "positive",
                "members",
                "Excellent Member Engagement",
                f"{engagement_score:g}% of members are actively participating",
                "Keep up the great work! Consider sharing success strategies with other clubs.",
            )
        )
    elif engagement_score < LOW_ENGAGEMENT:
        insights.append(
            Insight(
                "warning",
                "members",
                "Low Member Engagement",
                f"Only {engagement_score:g}% of members are actively participating",
                "Try hosting interactive events or discussion prompts to boost engagement.",
            )
        )

    if avg_posts_per_topic >= HIGH_POSTS_PER_TOPIC:
        insights.append(
            Insight(
                "positive",
                "discussions",
                "Vibrant Discussions",
                f"Average of {avg_posts_per_topic:g} posts per topic shows great engagement",
                "Your discussion topics are resonating well with members!",
            )
        )
    elif avg_posts_per_topic < LOW_POSTS_PER_TOPIC:
        insights.append(
            Insight(
                "warning",
                "discussions",
                "Limited Discussion Activity",
                f"Only {avg_posts_per_topic:g} posts per topic on average",
                "Try asking thought-provoking questions or sharing interesting quotes to spark discussion.",
            )
        )

    if trends.members == "up":
        insights.append(
            Insight(
                "positive",
                "members",
                "Growing Membership",
                "Your club is attracting new members consistently",
                "Consider creating a welcome process for new members.",
            )
        )
    elif trends.members == "down":
        insights.append(
            Insight(
                "warning",
                "members",
                "Declining Membership",
                "Member count has been decreasing recently",
                "Survey members to understand concerns and improve the club experience.",
            )
        )

    return insights


def insights_as_dicts(insights: Sequence[Insight]) -> List[Dict[str, str]]:
    return [asdict(insight) for insight in insights]
