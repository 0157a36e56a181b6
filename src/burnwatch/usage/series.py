"""
Series Normalizer

Turns parsed report rows into chart series.

Daily series are gap-filled: one point per calendar day of a fixed trailing
window ending today, with zero cost for days the report does not mention.
Weekly and monthly series pass rows through in source order with a
best-effort parsed date. Labels are precomputed for display only.
"""

from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import Protocol

from .models import SeriesPoint

_DAY_FORMATS = ("%Y-%m-%d", "%Y%m%d")
_MONTH_FORMATS = ("%Y-%m", "%Y%m")


class CostRow(Protocol):
    """Any report row with a date-like key and a total cost."""

    @property
    def key(self) -> str: ...

    total_cost: float


def _parse(value: str, formats: Sequence[str]) -> date | None:
    text = value.strip()
    for fmt in formats:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_day(value: str) -> date | None:
    """Parse a YYYY-MM-DD (or YYYYMMDD) key."""
    return _parse(value, _DAY_FORMATS)


def parse_month(value: str) -> date | None:
    """Parse a YYYY-MM key to the first day of that month."""
    return _parse(value, _MONTH_FORMATS)


def normalize_daily(rows: Iterable[CostRow], window_days: int, today: date) -> tuple[SeriesPoint, ...]:
    """
    Gap-fill daily rows over the trailing window ending at today.

    Args:
        rows: Daily report rows
        window_days: Number of calendar days in the window
        today: Last day of the window (inclusive)

    Returns:
        Exactly window_days points in ascending date order
    """
    if window_days < 1:
        return ()

    lookup: dict[date, float] = {}
    for row in rows:
        day = parse_day(row.key)
        if day is not None:
            lookup[day] = row.total_cost

    points = []
    for days_ago in range(window_days - 1, -1, -1):
        day = today - timedelta(days=days_ago)
        points.append(SeriesPoint(label=day.strftime("%a"), cost=lookup.get(day, 0.0), date=day))
    return tuple(points)


def normalize_weekly(rows: Iterable[CostRow]) -> tuple[SeriesPoint, ...]:
    """One point per week; the month name labels only the first week of each month."""
    points = []
    previous_month: int | None = None
    for row in rows:
        parsed = parse_day(row.key)
        if parsed is None:
            label = row.key
            previous_month = None
        else:
            label = parsed.strftime("%b") if parsed.month != previous_month else ""
            previous_month = parsed.month
        points.append(SeriesPoint(label=label, cost=row.total_cost, date=parsed))
    return tuple(points)


def normalize_monthly(rows: Iterable[CostRow]) -> tuple[SeriesPoint, ...]:
    points = []
    for row in rows:
        parsed = parse_month(row.key)
        label = parsed.strftime("%b") if parsed else row.key
        points.append(SeriesPoint(label=label, cost=row.total_cost, date=parsed))
    return tuple(points)


def window(series: Sequence[SeriesPoint], days: int) -> tuple[SeriesPoint, ...]:
    """Trailing days points of a daily series."""
    if days < 1:
        return ()
    return tuple(series[-days:])
