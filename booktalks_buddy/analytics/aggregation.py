"""
Month bucketing for dashboard analytics.

Rows are grouped by the calendar month of one of their timestamps. The day of
month never matters: a row dated on the 1st and one dated on the 31st of the
same month land in the same bucket, and nothing leaks into a neighbouring one.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Union

DateLike = Union[date, datetime, str]


def month_key(value: DateLike) -> str:
    """Return the ``YYYY-MM`` bucket for a date, datetime or ISO-8601 string."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return f"{value.year:04d}-{value.month:02d}"


def last_n_month_keys(n: int, today: Optional[date] = None) -> List[str]:
    """Keys of the ``n`` months ending with the current one, oldest first."""
    today = today or datetime.now(timezone.utc).date()
    year, month = today.year, today.month
    keys: List[str] = []
    for _ in range(max(n, 0)):
        keys.append(f"{year:04d}-{month:02d}")
        month -= 1
        if month == 0:
            month = 12
            year -= 1
    return list(reversed(keys))


def _field_value(row: Any, field: str) -> Optional[DateLike]:
    if isinstance(row, dict):
        return row.get(field)
    return getattr(row, field, None)


def group_by_month(rows: Iterable[Any], field: str, months: Optional[List[str]] = None) -> Dict[str, int]:
    """
    Count rows per month of ``field``.

    Args:
        rows: Mappings or objects carrying ``field``.
        field: Name of the timestamp attribute.
        months: Buckets to report. When given, every key is present (zero if
            empty) and rows outside these months are ignored.

    Returns:
        Ordered mapping of ``YYYY-MM`` to row count.
    """
    counts: Dict[str, int] = {key: 0 for key in months} if months is not None else {}
    for row in rows:
        value = _field_value(row, field)
        if value is None:
            continue
        key = month_key(value)
        if months is not None and key not in counts:
            continue
        counts[key] = counts.get(key, 0) + 1
    if months is None:
        return dict(sorted(counts.items()))
    return counts


def cumulative_growth(buckets: Dict[str, int], starting_total: int = 0) -> Dict[str, int]:
    """Running totals over ordered month buckets."""
    total = starting_total
    result: Dict[str, int] = {}
    for key, count in buckets.items():
        total += count
        result[key] = total
    return result
