"""
Trends — period-over-period comparison, goal progress and streaks.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..data.models import SessionRecord
from .periods import local_now
from .report import ReportStats, focus_efficiency, generate_report

IMPROVING = "improving"
DECLINING = "declining"
STABLE = "stable"

# Percent change beyond which a trend counts as moving
TREND_THRESHOLD = 10.0

DAY_HOURS = 24.0
WEEK_HOURS = 7 * 24.0


@dataclass
class ComparisonStats:
    current: ReportStats
    previous: ReportStats
    pomo_change: int
    percent_change: float
    trend: str
    efficiency_current: float
    efficiency_previous: float


@dataclass
class GoalProgress:
    goal: int
    completed: int
    percentage: float
    remaining: int
    on_track: bool
    percent_elapsed: float


@dataclass
class StreakInfo:
    current_streak: int = 0
    longest_streak: int = 0
    last_active: Optional[datetime] = None


# ── Comparison ──────────────────────────────────────────────────────────────

def percent_change(current: int, previous: int) -> float:
    if previous > 0:
        return (current - previous) / previous * 100
    if current > 0:
        return 100.0
    return 0.0


def classify_trend(change: float) -> str:
    if change > TREND_THRESHOLD:
        return IMPROVING
    if change < -TREND_THRESHOLD:
        return DECLINING
    return STABLE


def compare_periods(
    current_records: Sequence[SessionRecord],
    previous_records: Sequence[SessionRecord],
) -> ComparisonStats:
    """Compare a period against the one immediately before it."""
    current = generate_report(current_records)
    previous = generate_report(previous_records)
    change = percent_change(current.total_pomos, previous.total_pomos)
    return ComparisonStats(
        current=current,
        previous=previous,
        pomo_change=current.total_pomos - previous.total_pomos,
        percent_change=change,
        trend=classify_trend(change),
        efficiency_current=focus_efficiency(current),
        efficiency_previous=focus_efficiency(previous),
    )


# ── Goals ───────────────────────────────────────────────────────────────────

def calculate_goal_progress(
    goal: int,
    records: Sequence[SessionRecord],
    period_start: datetime,
    weekly: bool = False,
    now: Optional[datetime] = None,
) -> GoalProgress:
    """
    Progress toward a daily or weekly pomodoro goal.

    `records` must already be restricted to the goal's period. On track means
    the share of the goal done is at least the share of the period gone
    (equality counts), or the goal is already met.
    """
    completed = sum(r.completed_pomos for r in records)
    percentage = completed / goal * 100 if goal > 0 else 0.0
    remaining = max(goal - completed, 0)

    now = now or local_now()
    elapsed_hours = (now - period_start) / timedelta(hours=1)
    period_hours = WEEK_HOURS if weekly else DAY_HOURS
    percent_elapsed = elapsed_hours / period_hours * 100

    return GoalProgress(
        goal=goal,
        completed=completed,
        percentage=percentage,
        remaining=remaining,
        on_track=percentage >= percent_elapsed or completed >= goal,
        percent_elapsed=percent_elapsed,
    )


# ── Streaks ─────────────────────────────────────────────────────────────────

def calculate_streak(
    records: Sequence[SessionRecord],
    today: Optional[date] = None,
) -> StreakInfo:
    """Current and longest runs of consecutive days with a completed pomodoro."""
    active = [r for r in records if r.completed_pomos > 0]
    if not active:
        return StreakInfo()

    dates = sorted({r.timestamp.date() for r in active})
    date_set = set(dates)
    last_active = max(r.timestamp for r in active)

    today = today or local_now().date()
    current = 0
    day = today
    while day in date_set:
        current += 1
        day -= timedelta(days=1)

    longest = 1
    run = 1
    for prev, curr in zip(dates, dates[1:]):
        if curr - prev == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)

    return StreakInfo(
        current_streak=current,
        longest_streak=max(longest, current),
        last_active=last_active,
    )
