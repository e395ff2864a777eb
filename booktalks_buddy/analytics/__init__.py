"""Month bucketing and club health metrics."""

from .aggregation import cumulative_growth, group_by_month, last_n_month_keys, month_key
from .club_health import (
    ClubSnapshot,
    ClubTrends,
    Insight,
    compute_trends,
    generate_insights,
    health_score,
    percentage,
)

__all__ = [
    "ClubSnapshot",
    "ClubTrends",
    "Insight",
    "compute_trends",
    "cumulative_growth",
    "generate_insights",
    "group_by_month",
    "health_score",
    "last_n_month_keys",
    "month_key",
    "percentage",
]
