"""
Calendar period boundaries used by report, analyze and goals commands.

All helpers take an optional `now` so callers (and tests) can pin the clock.
Boundaries are local wall-clock midnights. Each one is built from calendar
fields and localised on its own, so a boundary on the other side of a DST
change gets that day's UTC offset rather than today's.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Tuple


def local_now() -> datetime:
    return datetime.now().astimezone()


def _local_date(now: Optional[datetime]) -> date:
    # astimezone() on an aware value converts to local time; on a naive one
    # it assumes local time already.
    return (now or local_now()).astimezone().date()


def _local_midnight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day).astimezone()


def today_start(now: Optional[datetime] = None) -> datetime:
    return _local_midnight(_local_date(now))


def week_start(now: Optional[datetime] = None) -> datetime:
    """Monday 00:00 of the current week."""
    return _local_midnight(_monday(_local_date(now)))


def month_start(now: Optional[datetime] = None) -> datetime:
    return _local_midnight(_local_date(now).replace(day=1))


def year_start(now: Optional[datetime] = None) -> datetime:
    return _local_midnight(_local_date(now).replace(month=1, day=1))


def previous_week_start(now: Optional[datetime] = None) -> datetime:
    return _local_midnight(_monday(_local_date(now)) - timedelta(days=7))


def previous_month_start(now: Optional[datetime] = None) -> datetime:
    day = _local_date(now)
    if day.month == 1:
        return _local_midnight(date(day.year - 1, 12, 1))
    return _local_midnight(date(day.year, day.month - 1, 1))


def previous_week_range(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """[previous Monday 00:00, last Sunday 23:59:59]"""
    return previous_week_start(now), week_start(now) - timedelta(seconds=1)


def previous_month_range(now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    return previous_month_start(now), month_start(now) - timedelta(seconds=1)


def _monday(day: date) -> date:
    return day - timedelta(days=day.weekday())
