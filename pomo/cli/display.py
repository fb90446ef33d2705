"""
Console presentation for reports, insights, comparisons, goals and streaks.

Functions here only format; every number comes from pomo.analytics.
"""

from __future__ import annotations

import sys
from datetime import date
from typing import Optional, TextIO

from ..analytics.breakdown import (
    BestBucket,
    DayOfWeekStats,
    ProductivityInsights,
    TimeOfDayStats,
    best_day,
    best_time_slot,
)
from ..analytics.report import ReportStats
from ..analytics.trends import DECLINING, IMPROVING, ComparisonStats, GoalProgress, StreakInfo
from ..data.models import GoalConfig
from ..durations import format_duration

RULE = "  ════════════════════════════════════════════"
THIN_RULE = "  ────────────────────────────────────────────"
RECENT_SESSIONS = 10
HOT_STREAK_DAYS = 7


def format_best(best: Optional[BestBucket]) -> str:
    if best is None:
        return "No data available"
    return f"{best.label} ({best.average_pomos:.1f} avg pomodoros)"


def _p(out: Optional[TextIO], text: str = "") -> None:
    print(text, file=out or sys.stdout)


# ── Reports ─────────────────────────────────────────────────────────────────

def display_report(stats: ReportStats, title: str, out: Optional[TextIO] = None) -> None:
    if stats.total_sessions == 0:
        _p(out, f"\n📊 {title}\n")
        _p(out, "  No sessions recorded yet. Start a pomodoro to begin tracking!")
        return

    _p(out, f"\n📊 {title}")
    _p(out, RULE)
    _p(out, f"  Total sessions: {stats.total_sessions}")
    _p(out, f"  Total pomodoros: {stats.total_pomos}")
    if stats.total_skipped > 0:
        _p(out, f"  Sessions skipped: {stats.total_skipped}")
    _p(out, f"  Average pomodoros per session: {stats.average_pomos:.1f}")
    _p(out)
    _p(out, f"  Total work time: {format_duration(stats.total_work_time)}")
    _p(out, f"  Total break time: {format_duration(stats.total_break_time)}")
    _p(out, f"  Total time: {format_duration(stats.total_duration)}")
    _p(out, RULE)


def display_detailed_report(stats: ReportStats, title: str, out: Optional[TextIO] = None) -> None:
    """Report plus the most recent sessions, newest first."""
    display_report(stats, title, out)
    if not stats.records:
        return

    _p(out, "\n  Recent Sessions:")
    _p(out, THIN_RULE)
    recent = sorted(stats.records, key=lambda r: r.timestamp, reverse=True)[:RECENT_SESSIONS]
    for r in recent:
        when = r.timestamp.strftime("%b %d, %Y %H:%M")
        work = format_duration(r.work_time)
        if r.title:
            _p(out, f"  {when} - {r.title}")
            _p(out, f"    {r.completed_pomos} 🍅 ({work} work)")
        else:
            _p(out, f"  {when} - {r.completed_pomos} 🍅 ({work} work)")
    _p(out)


# ── Breakdowns ──────────────────────────────────────────────────────────────

def display_time_of_day(stats: TimeOfDayStats, out: Optional[TextIO] = None) -> None:
    _p(out, "\n  Time of Day Analysis")
    _p(out, THIN_RULE)
    for label, slot in stats.slots():
        if slot.total_sessions == 0:
            _p(out, f"  {label}:\n    No sessions")
            continue
        _p(out, f"  {label}:")
        _p(out, f"    Sessions: {slot.total_sessions} | Pomodoros: {slot.total_pomos} "
                f"| Avg: {slot.average_pomos:.1f}")
    _p(out)
    _p(out, f"  Best performing time: {format_best(best_time_slot(stats))}")


def display_day_of_week(stats: DayOfWeekStats, out: Optional[TextIO] = None) -> None:
    _p(out, "\n  Day of Week Analysis")
    _p(out, THIN_RULE)
    for name, day in stats.days():
        label = f"{name}:"
        if day.total_sessions == 0:
            _p(out, f"  {label:<10} No sessions")
            continue
        _p(out, f"  {label:<10} Sessions: {day.total_sessions:<3} | "
                f"Pomodoros: {day.total_pomos:<3} | Avg: {day.average_pomos:.1f}")
    _p(out)
    _p(out, f"  Most productive day: {format_best(best_day(stats))}")


def display_insights(
    insights: ProductivityInsights,
    stats: ReportStats,
    title: str,
    out: Optional[TextIO] = None,
) -> None:
    _p(out, f"\n📊 {title}")
    _p(out, RULE)
    if stats.total_sessions == 0:
        _p(out, "  No sessions recorded yet")
        return

    _p(out, f"  Sessions:        {stats.total_sessions} sessions")
    _p(out, f"  Total Pomos:     {stats.total_pomos} pomodoros")

    eff = insights.focus_efficiency
    eff_rating = "excellent" if eff >= 90 else "good" if eff >= 75 else "needs improvement"
    _p(out, f"  Focus Rate:      {eff:.0f}% ({eff_rating})")

    ratio = insights.work_break_ratio
    if ratio > 0:
        ratio_rating = "optimal" if 4 <= ratio <= 6 else "off-target"
        _p(out, f"  Work/Break:      {ratio:.1f}:1 ({ratio_rating})")

    score = insights.consistency_score
    score_rating = "excellent" if score >= 80 else "good" if score >= 60 else "needs work"
    _p(out, f"  Consistency:     {score:.0f}/100 ({score_rating})")

    _p(out)
    _p(out, f"  Best Time:       {format_best(insights.best_time_slot)}")
    _p(out, f"  Best Day:        {format_best(insights.best_day)}")
    _p(out, f"  Avg Daily:       {insights.avg_daily_pomos:.1f} pomodoros")


def display_comparison(comp: ComparisonStats, title: str, out: Optional[TextIO] = None) -> None:
    _p(out, f"\n  {title}")
    _p(out, RULE)
    if comp.current.total_sessions == 0 and comp.previous.total_sessions == 0:
        _p(out, "  No data available for comparison")
        return

    _p(out, f"  This Period:  {comp.current.total_pomos} pomodoros | "
            f"{format_duration(comp.current.total_work_time)} work time")
    _p(out, f"  Last Period:  {comp.previous.total_pomos} pomodoros | "
            f"{format_duration(comp.previous.total_work_time)} work time")
    _p(out)
    _p(out, f"  Change:       {comp.pomo_change:+d} pomodoros ({comp.percent_change:+.1f}%)")

    symbol = {IMPROVING: "✓", DECLINING: "↓"}.get(comp.trend, "→")
    _p(out, f"  Trend:        {symbol} {comp.trend}")

    if comp.previous.total_sessions > 0:
        delta = comp.efficiency_current - comp.efficiency_previous
        direction = "up" if delta >= 0 else "down"
        _p(out, f"  Focus Rate:   {comp.efficiency_current:.0f}% ({direction} "
                f"{abs(delta):.0f}% from {comp.efficiency_previous:.0f}%)")


# ── Goals & streaks ─────────────────────────────────────────────────────────

def display_goal_config(config: GoalConfig, out: Optional[TextIO] = None) -> None:
    _p(out, "\n  Current Goals")
    _p(out, RULE)
    if not config.enabled:
        _p(out, "  No goals set")
        _p(out, "\n  Set goals with: pomo goals set --daily N --weekly N")
        return
    if config.daily_goal > 0:
        _p(out, f"  Daily Goal:   {config.daily_goal} pomodoros")
    if config.weekly_goal > 0:
        _p(out, f"  Weekly Goal:  {config.weekly_goal} pomodoros")
    if config.created_at:
        _p(out, f"\n  Set on:       {config.created_at.strftime('%b %d, %Y')}")


def display_goal_progress(progress: GoalProgress, goal_type: str, out: Optional[TextIO] = None) -> None:
    _p(out, f"\n  {goal_type} Goal Progress")
    _p(out, RULE)
    _p(out, f"  Goal:         {progress.goal} pomodoros")
    _p(out, f"  Completed:    {progress.completed} pomodoros ({progress.percentage:.0f}%)")
    if progress.remaining > 0:
        _p(out, f"  Remaining:    {progress.remaining} pomodoros")
    else:
        _p(out, "  🎉 Goal achieved!")

    if progress.completed >= progress.goal:
        status = "✓ Goal met"
    elif progress.on_track:
        status = "✓ On track"
    else:
        status = "⚠ Behind schedule"
    _p(out, f"  Status:       {status}")


def display_streak(streak: StreakInfo, today: Optional[date] = None, out: Optional[TextIO] = None) -> None:
    _p(out, "\n  Consistency Streak")
    _p(out, RULE)
    if streak.current_streak == 0:
        _p(out, "  No active streak")
        if streak.last_active is not None:
            _p(out, f"  Last Active:     {streak.last_active.strftime('%b %d, %Y')}")
        return

    flame = " 🔥" if streak.current_streak >= HOT_STREAK_DAYS else ""
    _p(out, f"  Current Streak:  {streak.current_streak} days{flame}")
    _p(out, f"  Longest Streak:  {streak.longest_streak} days")

    last = "Today"
    today = today or date.today()
    if streak.last_active is not None and streak.last_active.date() != today:
        last = streak.last_active.strftime("%b %d, %Y")
    _p(out, f"  Last Active:     {last}")
