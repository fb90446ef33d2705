"""Aggregate report over a set of session records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from typing import List, Sequence

from ..data.models import SessionRecord


@dataclass
class ReportStats:
    total_sessions: int = 0
    total_pomos: int = 0
    total_skipped: int = 0
    total_work_time: timedelta = timedelta(0)
    total_break_time: timedelta = timedelta(0)
    total_duration: timedelta = timedelta(0)
    average_pomos: float = 0.0
    records: List[SessionRecord] = field(default_factory=list)


def generate_report(records: Sequence[SessionRecord]) -> ReportStats:
    """Sum counters and durations. An empty input gives an all-zero report."""
    stats = ReportStats(total_sessions=len(records), records=list(records))
    for r in records:
        stats.total_pomos += r.completed_pomos
        stats.total_skipped += r.skipped_sessions
        stats.total_work_time += r.work_time
        stats.total_break_time += r.break_time
        stats.total_duration += r.total_duration

    if stats.total_sessions > 0:
        stats.average_pomos = stats.total_pomos / stats.total_sessions
    return stats


def focus_efficiency(stats: ReportStats) -> float:
    """Completed pomodoros as a percentage of everything started."""
    attempts = stats.total_pomos + stats.total_skipped
    if attempts == 0:
        return 0.0
    return stats.total_pomos / attempts * 100


def work_break_ratio(stats: ReportStats) -> float:
    """Work time per unit of break time; 0 when no break time was logged."""
    if stats.total_break_time <= timedelta(0):
        return 0.0
    return stats.total_work_time / stats.total_break_time
