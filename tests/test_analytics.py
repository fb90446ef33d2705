"""Unit tests for the analytics engine (reports, breakdowns, trends, periods)."""

import pytest
from datetime import date, datetime, timedelta, timezone

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pomo.analytics.breakdown import (
    AFTERNOON,
    EVENING,
    MORNING,
    NIGHT,
    analyze_day_of_week,
    analyze_time_of_day,
    average_daily_pomos,
    best_day,
    best_time_slot,
    consistency_score,
    generate_insights,
    time_of_day,
)
from pomo.analytics.periods import (
    month_start,
    previous_month_range,
    previous_month_start,
    previous_week_range,
    today_start,
    week_start,
    year_start,
)
from pomo.analytics.report import focus_efficiency, generate_report, work_break_ratio
from pomo.analytics.trends import (
    DECLINING,
    IMPROVING,
    STABLE,
    calculate_goal_progress,
    calculate_streak,
    compare_periods,
    percent_change,
)
from pomo.data.models import SessionRecord

UTC = timezone.utc
TODAY = date(2026, 10, 17)  # a Saturday


def _rec(ts: datetime, pomos: int = 4, skipped: int = 0,
         work: int = None, brk: int = None) -> SessionRecord:
    """Record with durations in minutes (defaults: 25 per pomo, 5 per break)."""
    work = 25 * pomos if work is None else work
    brk = 5 * pomos if brk is None else brk
    return SessionRecord(
        timestamp=ts,
        completed_pomos=pomos,
        skipped_sessions=skipped,
        work_time=timedelta(minutes=work),
        break_time=timedelta(minutes=brk),
        total_duration=timedelta(minutes=work + brk),
    )


def _at(day: date, hour: int = 10, minute: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=UTC)


# ── Report ──────────────────────────────────────────────────────────────────

class TestReport:
    def test_empty_report_is_zero(self):
        stats = generate_report([])
        assert stats.total_sessions == 0
        assert stats.total_pomos == 0
        assert stats.total_work_time == timedelta(0)
        assert stats.average_pomos == 0.0
        assert stats.records == []

    def test_totals_and_average(self):
        stats = generate_report([_rec(_at(TODAY), pomos=4, skipped=1), _rec(_at(TODAY), pomos=2)])
        assert stats.total_sessions == 2
        assert stats.total_pomos == 6
        assert stats.total_skipped == 1
        assert stats.total_work_time == timedelta(minutes=150)
        assert stats.total_break_time == timedelta(minutes=30)
        assert stats.total_duration == timedelta(minutes=180)
        assert stats.average_pomos == pytest.approx(3.0)

    def test_report_of_union_is_sum_of_reports(self):
        a = [_rec(_at(TODAY), pomos=3), _rec(_at(TODAY, 14), pomos=1, skipped=2)]
        b = [_rec(_at(TODAY, 20), pomos=5)]
        ra, rb, both = generate_report(a), generate_report(b), generate_report(a + b)
        assert both.total_sessions == ra.total_sessions + rb.total_sessions
        assert both.total_pomos == ra.total_pomos + rb.total_pomos
        assert both.total_skipped == ra.total_skipped + rb.total_skipped
        assert both.total_work_time == ra.total_work_time + rb.total_work_time
        assert both.average_pomos == pytest.approx(both.total_pomos / both.total_sessions)


class TestRatios:
    def test_focus_efficiency(self):
        stats = generate_report([_rec(_at(TODAY), pomos=9, skipped=1)])
        assert focus_efficiency(stats) == pytest.approx(90.0)

    def test_focus_efficiency_without_attempts(self):
        assert focus_efficiency(generate_report([])) == 0.0

    def test_work_break_ratio(self):
        stats = generate_report([_rec(_at(TODAY), pomos=4, work=100, brk=20)])
        assert work_break_ratio(stats) == pytest.approx(5.0)

    def test_work_break_ratio_without_breaks(self):
        stats = generate_report([_rec(_at(TODAY), pomos=1, work=25, brk=0)])
        assert work_break_ratio(stats) == 0.0


# ── Breakdowns ──────────────────────────────────────────────────────────────

class TestTimeOfDay:
    @pytest.mark.parametrize("hour,minute,expected", [
        (0, 0, NIGHT),
        (5, 59, NIGHT),
        (6, 0, MORNING),
        (11, 59, MORNING),
        (12, 0, AFTERNOON),
        (17, 59, AFTERNOON),
        (18, 0, EVENING),
        (23, 59, EVENING),
    ])
    def test_slot_boundaries(self, hour, minute, expected):
        assert time_of_day(_at(TODAY, hour, minute)) == expected

    def test_buckets_partition_records(self):
        records = [_rec(_at(TODAY, h)) for h in (1, 7, 8, 13, 19, 23)]
        stats = analyze_time_of_day(records)
        assert stats.night.total_sessions == 1
        assert stats.morning.total_sessions == 2
        assert stats.afternoon.total_sessions == 1
        assert stats.evening.total_sessions == 2
        assert sum(s.total_sessions for _, s in stats.slots()) == len(records)

    def test_best_slot_by_average(self):
        records = [
            _rec(_at(TODAY, 8), pomos=2),
            _rec(_at(TODAY, 9), pomos=2),
            _rec(_at(TODAY, 14), pomos=5),
        ]
        best = best_time_slot(analyze_time_of_day(records))
        assert best.label == "Afternoon (12pm-6pm)"
        assert best.average_pomos == pytest.approx(5.0)

    def test_best_slot_tie_keeps_first(self):
        records = [_rec(_at(TODAY, 20), pomos=3), _rec(_at(TODAY, 8), pomos=3)]
        best = best_time_slot(analyze_time_of_day(records))
        assert best.label == "Morning (6am-12pm)"

    def test_best_slot_without_data(self):
        assert best_time_slot(analyze_time_of_day([])) is None


class TestDayOfWeek:
    def test_weekday_buckets(self):
        monday = date(2026, 10, 12)
        records = [
            _rec(_at(monday), pomos=2),
            _rec(_at(monday + timedelta(days=2)), pomos=6),
            _rec(_at(TODAY), pomos=1),
        ]
        stats = analyze_day_of_week(records)
        assert stats.monday.total_pomos == 2
        assert stats.wednesday.total_pomos == 6
        assert stats.saturday.total_pomos == 1
        assert stats.sunday.total_sessions == 0
        assert sum(s.total_sessions for _, s in stats.days()) == 3

        best = best_day(stats)
        assert best.label == "Wednesday"
        assert best.average_pomos == pytest.approx(6.0)

    def test_best_day_without_data(self):
        assert best_day(analyze_day_of_week([])) is None


class TestConsistency:
    def test_no_records(self):
        assert consistency_score([]) == 0.0

    def test_identical_days_score_full(self):
        records = [_rec(_at(TODAY - timedelta(days=i)), pomos=4) for i in range(5)]
        assert consistency_score(records) == pytest.approx(100.0)

    def test_spread_lowers_score(self):
        # daily totals 2 and 6: mean 4, population std 2, CV 0.5
        records = [_rec(_at(TODAY), pomos=2), _rec(_at(TODAY - timedelta(days=1)), pomos=6)]
        assert consistency_score(records) == pytest.approx(75.0)

    def test_same_day_records_combine(self):
        records = [
            _rec(_at(TODAY, 8), pomos=1),
            _rec(_at(TODAY, 15), pomos=3),
            _rec(_at(TODAY - timedelta(days=1)), pomos=4),
        ]
        assert consistency_score(records) == pytest.approx(100.0)

    def test_score_is_clamped(self):
        records = [_rec(_at(TODAY), pomos=10)]
        records += [_rec(_at(TODAY - timedelta(days=i)), pomos=0) for i in range(1, 9)]
        assert consistency_score(records) == 0.0

    def test_average_daily_pomos(self):
        records = [
            _rec(_at(TODAY, 8), pomos=1),
            _rec(_at(TODAY, 15), pomos=3),
            _rec(_at(TODAY - timedelta(days=1)), pomos=2),
        ]
        assert average_daily_pomos(records) == pytest.approx(3.0)
        assert average_daily_pomos([]) == 0.0


class TestInsights:
    def test_empty_history(self):
        insights = generate_insights([])
        assert insights.best_time_slot is None
        assert insights.best_day is None
        assert insights.avg_daily_pomos == 0.0
        assert insights.focus_efficiency == 0.0
        assert insights.work_break_ratio == 0.0
        assert insights.consistency_score == 0.0

    def test_populated_history(self):
        records = [
            _rec(_at(TODAY, 9), pomos=4, skipped=1, work=100, brk=20),
            _rec(_at(TODAY - timedelta(days=1), 9), pomos=4, work=100, brk=20),
        ]
        insights = generate_insights(records)
        assert insights.best_time_slot.label == "Morning (6am-12pm)"
        assert insights.focus_efficiency == pytest.approx(8 / 9 * 100)
        assert insights.work_break_ratio == pytest.approx(5.0)
        assert insights.consistency_score == pytest.approx(100.0)
        assert insights.avg_daily_pomos == pytest.approx(4.0)


# ── Trends ──────────────────────────────────────────────────────────────────

class TestComparison:
    def test_growth_from_nothing_is_improving(self):
        comp = compare_periods([_rec(_at(TODAY), pomos=5)], [])
        assert comp.percent_change == pytest.approx(100.0)
        assert comp.pomo_change == 5
        assert comp.trend == IMPROVING

    def test_nothing_to_nothing_is_stable(self):
        comp = compare_periods([], [])
        assert comp.percent_change == 0.0
        assert comp.trend == STABLE

    def test_decline(self):
        comp = compare_periods([_rec(_at(TODAY), pomos=2)], [_rec(_at(TODAY), pomos=4)])
        assert comp.percent_change == pytest.approx(-50.0)
        assert comp.pomo_change == -2
        assert comp.trend == DECLINING

    def test_threshold_is_exclusive(self):
        assert percent_change(11, 10) == pytest.approx(10.0)
        comp = compare_periods([_rec(_at(TODAY), pomos=11)], [_rec(_at(TODAY), pomos=10)])
        assert comp.trend == STABLE

    def test_efficiency_per_period(self):
        comp = compare_periods(
            [_rec(_at(TODAY), pomos=3, skipped=1)],
            [_rec(_at(TODAY), pomos=4)],
        )
        assert comp.efficiency_current == pytest.approx(75.0)
        assert comp.efficiency_previous == pytest.approx(100.0)


class TestGoalProgress:
    def test_halfway_at_half_time_is_on_track(self):
        start = datetime(2026, 10, 16, 0, 0, tzinfo=UTC)
        progress = calculate_goal_progress(
            10, [_rec(_at(TODAY), pomos=5)], start, now=start + timedelta(hours=12),
        )
        assert progress.percentage == pytest.approx(50.0)
        assert progress.percent_elapsed == pytest.approx(50.0)
        assert progress.remaining == 5
        assert progress.on_track is True

    def test_behind_schedule(self):
        start = datetime(2026, 10, 16, 0, 0, tzinfo=UTC)
        progress = calculate_goal_progress(
            10, [_rec(_at(TODAY), pomos=2)], start, now=start + timedelta(hours=18),
        )
        assert progress.on_track is False

    def test_weekly_period_length(self):
        start = datetime(2026, 10, 12, 0, 0, tzinfo=UTC)
        progress = calculate_goal_progress(
            40, [_rec(_at(TODAY), pomos=10)], start, weekly=True, now=start + timedelta(days=1),
        )
        assert progress.percent_elapsed == pytest.approx(100 / 7)
        assert progress.percentage == pytest.approx(25.0)
        assert progress.on_track is True

    def test_goal_exceeded(self):
        start = datetime(2026, 10, 16, 0, 0, tzinfo=UTC)
        progress = calculate_goal_progress(
            4, [_rec(_at(TODAY), pomos=6)], start, now=start + timedelta(hours=1),
        )
        assert progress.remaining == 0
        assert progress.percentage == pytest.approx(150.0)
        assert progress.on_track is True

    def test_more_pomodoros_never_hurt(self):
        start = datetime(2026, 10, 16, 0, 0, tzinfo=UTC)
        now = start + timedelta(hours=20)
        previous = None
        for n in range(0, 12):
            progress = calculate_goal_progress(10, [_rec(_at(TODAY), pomos=n)], start, now=now)
            if previous is not None:
                assert progress.percentage >= previous.percentage
                assert progress.remaining <= previous.remaining
                assert progress.on_track or not previous.on_track
            previous = progress


class TestStreak:
    def test_three_consecutive_days(self):
        records = [_rec(_at(TODAY - timedelta(days=i))) for i in range(3)]
        streak = calculate_streak(records, today=TODAY)
        assert streak.current_streak == 3
        assert streak.longest_streak == 3
        assert streak.last_active == _at(TODAY)

    def test_gap_breaks_the_run(self):
        offsets = [5, 4, 2, 1, 0]
        records = [_rec(_at(TODAY - timedelta(days=i))) for i in offsets]
        streak = calculate_streak(records, today=TODAY)
        assert streak.current_streak == 3
        assert streak.longest_streak == 3

    def test_no_activity_today(self):
        records = [_rec(_at(TODAY - timedelta(days=i))) for i in (1, 2)]
        streak = calculate_streak(records, today=TODAY)
        assert streak.current_streak == 0
        assert streak.longest_streak == 2
        assert streak.last_active == _at(TODAY - timedelta(days=1))

    def test_longer_run_in_the_past(self):
        records = [_rec(_at(TODAY - timedelta(days=i))) for i in (0, 5, 6, 7, 8)]
        streak = calculate_streak(records, today=TODAY)
        assert streak.current_streak == 1
        assert streak.longest_streak == 4

    def test_zero_pomodoro_records_ignored(self):
        records = [_rec(_at(TODAY), pomos=0), _rec(_at(TODAY - timedelta(days=1)), pomos=2)]
        streak = calculate_streak(records, today=TODAY)
        assert streak.current_streak == 0
        assert streak.longest_streak == 1
        assert streak.last_active == _at(TODAY - timedelta(days=1))

    def test_several_records_same_day_count_once(self):
        records = [_rec(_at(TODAY, h)) for h in (8, 12, 20)]
        streak = calculate_streak(records, today=TODAY)
        assert streak.current_streak == 1
        assert streak.longest_streak == 1

    def test_empty(self):
        streak = calculate_streak([], today=TODAY)
        assert streak.current_streak == 0
        assert streak.longest_streak == 0
        assert streak.last_active is None


# ── Periods ─────────────────────────────────────────────────────────────────


def _local(*fields) -> datetime:
    """Aware local datetime for the given wall-clock fields."""
    return datetime(*fields).astimezone()


class TestPeriods:
    NOW = _local(2026, 10, 17, 15, 42, 7, 1234)

    def test_today_start(self):
        assert today_start(self.NOW) == _local(2026, 10, 17)

    def test_week_starts_monday(self):
        assert week_start(self.NOW) == _local(2026, 10, 12)
        assert week_start(_local(2026, 10, 12, 9, 0)) == _local(2026, 10, 12)

    def test_month_and_year_start(self):
        assert month_start(self.NOW) == _local(2026, 10, 1)
        assert year_start(self.NOW) == _local(2026, 1, 1)

    def test_previous_week_range(self):
        start, end = previous_week_range(self.NOW)
        assert start == _local(2026, 10, 5)
        assert end == _local(2026, 10, 11, 23, 59, 59)

    def test_previous_month_wraps_year(self):
        assert previous_month_start(_local(2026, 1, 15)) == _local(2025, 12, 1)

    def test_previous_month_range(self):
        start, end = previous_month_range(self.NOW)
        assert start == _local(2026, 9, 1)
        assert end == _local(2026, 9, 30, 23, 59, 59)

    def test_aware_input_in_another_zone_uses_local_calendar(self):
        assert today_start(self.NOW.astimezone(UTC)) == today_start(self.NOW)


class TestPeriodsAcrossDst:
    """Europe/Berlin is +01:00 in winter and +02:00 in summer."""

    WINTER = timezone(timedelta(hours=1))
    SUMMER = timezone(timedelta(hours=2))

    def test_year_start_uses_january_offset(self, berlin_tz):
        start = year_start(_local(2026, 7, 1, 12, 0))
        assert start == datetime(2026, 1, 1, tzinfo=self.WINTER)
        assert start.utcoffset() == timedelta(hours=1)

    def test_previous_month_range_spans_the_switch(self, berlin_tz):
        # Clocks go forward on 2026-03-29
        start, end = previous_month_range(_local(2026, 4, 10, 12, 0))
        assert start == datetime(2026, 3, 1, tzinfo=self.WINTER)
        assert end == datetime(2026, 3, 31, 23, 59, 59, tzinfo=self.SUMMER)

    def test_previous_week_across_autumn_switch(self, berlin_tz):
        # Clocks go back on 2026-10-25
        start, end = previous_week_range(_local(2026, 10, 28, 9, 0))
        assert start == datetime(2026, 10, 19, tzinfo=self.SUMMER)
        assert end == datetime(2026, 10, 25, 23, 59, 59, tzinfo=self.WINTER)
        assert week_start(_local(2026, 10, 28, 9, 0)) == datetime(2026, 10, 26, tzinfo=self.WINTER)

    def test_session_just_before_month_start_stays_out(self, berlin_tz):
        start, end = previous_month_range(_local(2026, 4, 10, 12, 0))
        late_february = _local(2026, 2, 28, 23, 30)
        early_march = _local(2026, 3, 1, 0, 30)
        assert not start <= late_february <= end
        assert start <= early_march <= end


class TestRepeatability:
    RECORDS = [
        _rec(_at(TODAY, 9), pomos=4, skipped=1),
        _rec(_at(TODAY - timedelta(days=1), 14), pomos=2),
        _rec(_at(TODAY - timedelta(days=3), 21), pomos=6, skipped=2),
    ]

    def test_report_is_repeatable(self):
        assert generate_report(self.RECORDS) == generate_report(self.RECORDS)

    def test_insights_are_repeatable(self):
        assert generate_insights(self.RECORDS) == generate_insights(self.RECORDS)

    def test_comparison_and_streak_are_repeatable(self):
        current, previous = self.RECORDS[:1], self.RECORDS[1:]
        assert compare_periods(current, previous) == compare_periods(current, previous)
        assert calculate_streak(self.RECORDS, today=TODAY) == calculate_streak(self.RECORDS, today=TODAY)
