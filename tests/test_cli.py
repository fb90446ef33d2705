"""End-to-end tests for the command-line interface against a temp data directory."""

import io
import pytest
from datetime import datetime, timedelta

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pomo.cli.commands import create_parser, main
from pomo.config import db_path, goals_path
from pomo.data.database import Database
from pomo.data.models import SessionRecord
from pomo.data.repository import Repository


def run(base: Path, *argv: str):
    out = io.StringIO()
    code = main(["--data-dir", str(base), *argv], out=out)
    return code, out.getvalue()


def seed(base: Path, *pomos: int) -> None:
    """One record per value, all started a few seconds ago."""
    now = datetime.now().astimezone()
    db = Database(db_path(base))
    repo = Repository(db.connect())
    for n in pomos:
        repo.add_record(SessionRecord(
            timestamp=now - timedelta(seconds=5),
            title="Writing",
            completed_pomos=n,
            skipped_sessions=1,
            work_time=timedelta(minutes=25 * n),
            break_time=timedelta(minutes=5 * n),
            total_duration=timedelta(minutes=30 * n),
        ))
    db.close()


class TestParser:
    def test_timer_defaults(self):
        args = create_parser().parse_args([])
        assert args.work == 25
        assert args.short_break == 5
        assert args.long_break == 30
        assert args.count == 4
        assert args.countdown is True
        assert args.no_notify is False

    def test_countdown_can_be_disabled(self):
        args = create_parser().parse_args(["--no-countdown", "-w", "50", "-t", "Docs"])
        assert args.countdown is False
        assert args.work == 50
        assert args.title == "Docs"

    def test_report_period_flags(self):
        assert create_parser().parse_args(["report"]).period == "today"
        assert create_parser().parse_args(["report", "--month", "-d"]).period == "month"

    def test_report_periods_are_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["report", "--week", "--year"])

    def test_negative_goal_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["goals", "set", "--daily", "-3"])


class TestTimerCommand:
    def test_out_of_range_work_duration(self, tmp_path, capsys):
        code, _ = run(tmp_path, "-w", "0")
        assert code == 1
        assert "work duration must be between 1 and 120 minutes" in capsys.readouterr().err

    def test_validation_error_leaves_no_files(self, tmp_path, capsys):
        fresh = tmp_path / "fresh"
        code, _ = run(fresh, "-w", "0")
        assert code == 1
        assert not fresh.exists()
        err = capsys.readouterr().err
        assert err.count("work duration must be between 1 and 120 minutes, got 0") == 1

    def test_out_of_range_count(self, tmp_path, capsys):
        code, _ = run(tmp_path, "-c", "11")
        assert code == 1
        assert "pomodoros before long break" in capsys.readouterr().err


class TestReportCommand:
    def test_empty_history(self, tmp_path):
        code, out = run(tmp_path, "report")
        assert code == 0
        assert "No sessions recorded yet" in out

    def test_totals(self, tmp_path):
        seed(tmp_path, 2, 4)
        code, out = run(tmp_path, "report", "--all")
        assert code == 0
        assert "All Time Statistics" in out
        assert "Total sessions: 2" in out
        assert "Total pomodoros: 6" in out
        assert "Sessions skipped: 2" in out
        assert "Total work time: 2h 30m" in out

    def test_detailed_lists_sessions(self, tmp_path):
        seed(tmp_path, 3)
        code, out = run(tmp_path, "report", "--today", "--detailed")
        assert code == 0
        assert "Recent Sessions" in out
        assert "Writing" in out

    def test_unusable_data_dir(self, tmp_path, capsys):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        code, _ = run(blocker, "report")
        assert code == 1
        assert "Error:" in capsys.readouterr().err


class TestAnalyzeCommand:
    def test_insights(self, tmp_path):
        seed(tmp_path, 4)
        code, out = run(tmp_path, "analyze", "insights")
        assert code == 0
        assert "Productivity Insights - This Week" in out
        assert "Sessions:        1 sessions" in out
        assert "Focus Rate:      80%" in out
        assert "Streak:          1 days" in out

    def test_insights_empty(self, tmp_path):
        code, out = run(tmp_path, "analyze", "insights", "--all")
        assert code == 0
        assert "No sessions recorded yet" in out

    def test_time_and_days(self, tmp_path):
        seed(tmp_path, 2)
        code, out = run(tmp_path, "analyze", "time", "--all")
        assert code == 0
        assert "Best performing time:" in out
        code, out = run(tmp_path, "analyze", "days")
        assert code == 0
        assert "Most productive day:" in out

    def test_compare_without_data(self, tmp_path):
        code, out = run(tmp_path, "analyze", "compare", "--months")
        assert code == 0
        assert "Month-over-Month Comparison" in out
        assert "No data available for comparison" in out

    def test_compare_current_week_only(self, tmp_path):
        seed(tmp_path, 5)
        code, out = run(tmp_path, "analyze", "compare")
        assert code == 0
        assert "+5 pomodoros (+100.0%)" in out
        assert "improving" in out

    def test_streak(self, tmp_path):
        seed(tmp_path, 1)
        code, out = run(tmp_path, "analyze", "streak")
        assert code == 0
        assert "Current Streak:  1 days" in out
        assert "Last Active:     Today" in out

    def test_bare_analyze_prints_help(self, tmp_path):
        code, out = run(tmp_path, "analyze")
        assert code == 0
        assert "insights" in out


class TestGoalsCommand:
    def test_set_requires_a_goal(self, tmp_path, capsys):
        fresh = tmp_path / "fresh"
        code, _ = run(fresh, "goals", "set")
        assert code == 1
        assert capsys.readouterr().err.count("Please specify at least one goal") == 1
        assert not fresh.exists()

    def test_log_file_written_once_store_is_used(self, tmp_path):
        code, _ = run(tmp_path, "report")
        assert code == 0
        assert (tmp_path / "pomo.log").exists()

    def test_set_show_clear(self, tmp_path):
        code, out = run(tmp_path, "goals", "set", "--daily", "8")
        assert code == 0
        assert "Goals updated successfully" in out
        assert "Daily Goal:   8 pomodoros" in out

        code, out = run(tmp_path, "goals", "set", "--weekly", "40")
        assert code == 0
        assert "Daily Goal:   8 pomodoros" in out
        assert "Weekly Goal:  40 pomodoros" in out

        code, out = run(tmp_path, "goals", "show")
        assert "Weekly Goal:  40 pomodoros" in out

        code, out = run(tmp_path, "goals", "clear")
        assert code == 0
        code, out = run(tmp_path, "goals", "show")
        assert "No goals set" in out

    def test_progress_without_goals(self, tmp_path):
        code, out = run(tmp_path, "goals", "progress")
        assert code == 0
        assert "No goals configured yet" in out

    def test_progress(self, tmp_path):
        seed(tmp_path, 3)
        run(tmp_path, "goals", "set", "--daily", "6", "--weekly", "20")
        code, out = run(tmp_path, "goals", "progress", "--daily")
        assert code == 0
        assert "Daily Goal Progress" in out
        assert "Completed:    3 pomodoros (50%)" in out
        assert "Remaining:    3 pomodoros" in out
        assert "Weekly Goal Progress" not in out

    def test_malformed_goal_file(self, tmp_path, capsys):
        goals_path(tmp_path).write_text("[broken")
        code, _ = run(tmp_path, "goals", "show")
        assert code == 1
        assert "Could not load goal config" in capsys.readouterr().err
