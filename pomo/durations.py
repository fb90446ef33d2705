"""Human-readable durations shared by the timer output and the reports."""

from __future__ import annotations

from datetime import timedelta


def whole_minutes(delta: timedelta) -> int:
    return int(delta.total_seconds() // 60)


def format_duration(delta: timedelta) -> str:
    """'1h 35m' above an hour, '35m' below."""
    hours, minutes = divmod(whole_minutes(delta), 60)
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
