"""
Command-line interface.

`pomo` on its own runs the timer; `report`, `analyze` and `goals` are
read-mostly commands over the stored history. Each command opens the stores
it needs, uses them once and closes them.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional, TextIO, Tuple

from .. import __version__
from ..analytics import (
    analyze_day_of_week,
    analyze_time_of_day,
    calculate_goal_progress,
    calculate_streak,
    compare_periods,
    generate_insights,
    generate_report,
)
from ..analytics import periods
from ..config import (
    DEFAULT_LONG_BREAK_MIN,
    DEFAULT_POMOS_UNTIL_LONG_BREAK,
    DEFAULT_SHORT_BREAK_MIN,
    DEFAULT_WORK_MIN,
    TimerConfig,
    data_dir,
    db_path,
    goals_path,
    log_path,
)
from ..data.database import Database
from ..data.goals import GoalStore
from ..data.repository import Repository
from ..errors import ConfigError, PomoError
from ..services.notifier import Notifier
from ..services.timer_service import TimerService
from . import display

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# period key → (title suffix, start-of-period helper; None = all time)
REPORT_PERIODS: Dict[str, Tuple[str, Optional[Callable]]] = {
    "today": ("Today's Statistics", periods.today_start),
    "week": ("This Week's Statistics", periods.week_start),
    "month": ("This Month's Statistics", periods.month_start),
    "year": ("This Year's Statistics", periods.year_start),
    "all": ("All Time Statistics", None),
}

ANALYZE_PERIODS: Dict[str, Tuple[str, Optional[Callable]]] = {
    "week": ("This Week", periods.week_start),
    "month": ("This Month", periods.month_start),
    "all": ("All Time", None),
}


# =============================================================================
# SETUP
# =============================================================================

def setup_logging(verbose: bool = False) -> None:
    """Console logging only; the log file is attached once a command opens the data dir."""
    console = logging.StreamHandler()
    console.setLevel(logging.INFO if verbose else logging.WARNING)
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, handlers=[console], force=True)


def attach_file_log(base: Path) -> None:
    root = logging.getLogger()
    target = os.path.abspath(log_path(base))
    if any(isinstance(h, logging.FileHandler) and h.baseFilename == target for h in root.handlers):
        return
    try:
        base.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target, encoding="utf-8")
    except OSError as e:
        logger.warning("File logging disabled (%s)", e)
        return
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


@contextmanager
def open_repository(base: Path) -> Iterator[Repository]:
    attach_file_log(base)
    db = Database(db_path(base))
    conn = db.connect()
    try:
        yield Repository(conn)
    finally:
        db.close()


def open_goal_store(base: Path) -> GoalStore:
    attach_file_log(base)
    return GoalStore(goals_path(base))


def _load_period(repo: Repository, start_fn: Optional[Callable]):
    if start_fn is None:
        return repo.list_records()
    return repo.list_records_since(start_fn())


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or greater, got {number}")
    return number


# =============================================================================
# COMMANDS
# =============================================================================

def cmd_timer(args: argparse.Namespace, out: TextIO) -> int:
    config = TimerConfig.from_minutes(
        work=args.work,
        short_break=args.short_break,
        long_break=args.long_break,
        count=args.count,
        show_countdown=args.countdown,
        title=args.title,
        goal=args.goal,
    )
    with open_repository(args.base_dir) as repo:
        timer = TimerService(
            config,
            repo=repo,
            notifier=Notifier(enabled=not args.no_notify, out=out),
            stdout=out,
        )
        timer.run()
    return 0


def cmd_report(args: argparse.Namespace, out: TextIO) -> int:
    title, start_fn = REPORT_PERIODS[args.period]
    with open_repository(args.base_dir) as repo:
        records = _load_period(repo, start_fn)
    stats = generate_report(records)
    if args.detailed:
        display.display_detailed_report(stats, title, out)
    else:
        display.display_report(stats, title, out)
    return 0


def cmd_insights(args: argparse.Namespace, out: TextIO) -> int:
    label, start_fn = ANALYZE_PERIODS[args.period]
    with open_repository(args.base_dir) as repo:
        records = _load_period(repo, start_fn)
        history = repo.list_records()
        goals = open_goal_store(args.base_dir).load()
        weekly_records = None
        if goals.enabled and goals.weekly_goal > 0 and args.period == "week":
            weekly_records = repo.list_records_since(periods.week_start())

    stats = generate_report(records)
    display.display_insights(generate_insights(records), stats, f"Productivity Insights - {label}", out)

    streak = calculate_streak(history)
    if streak.current_streak > 0:
        flame = " 🔥" if streak.current_streak >= display.HOT_STREAK_DAYS else ""
        print(f"\n  Streak:          {streak.current_streak} days{flame}", file=out)

    if weekly_records is not None:
        progress = calculate_goal_progress(
            goals.weekly_goal, weekly_records, periods.week_start(), weekly=True
        )
        print(f"\n  Weekly Goal:     {progress.completed}/{progress.goal} "
              f"({progress.percentage:.0f}%)", file=out)
    print(file=out)
    return 0


def cmd_time(args: argparse.Namespace, out: TextIO) -> int:
    label, start_fn = ANALYZE_PERIODS[args.period]
    with open_repository(args.base_dir) as repo:
        records = _load_period(repo, start_fn)
    print(f"\n📊 Time of Day Analysis - {label}", file=out)
    display.display_time_of_day(analyze_time_of_day(records), out)
    print(file=out)
    return 0


def cmd_days(args: argparse.Namespace, out: TextIO) -> int:
    label, start_fn = ANALYZE_PERIODS[args.period]
    with open_repository(args.base_dir) as repo:
        records = _load_period(repo, start_fn)
    print(f"\n📊 Day of Week Analysis - {label}", file=out)
    display.display_day_of_week(analyze_day_of_week(records), out)
    print(file=out)
    return 0


def cmd_compare(args: argparse.Namespace, out: TextIO) -> int:
    if args.unit == "months":
        current_start = periods.month_start()
        previous_start, previous_end = periods.previous_month_range()
        title = "Month-over-Month Comparison"
    else:
        current_start = periods.week_start()
        previous_start, previous_end = periods.previous_week_range()
        title = "Week-over-Week Comparison"

    with open_repository(args.base_dir) as repo:
        current = repo.list_records_since(current_start)
        previous = repo.list_records_in_range(previous_start, previous_end)

    display.display_comparison(compare_periods(current, previous), title, out)
    print(file=out)
    return 0


def cmd_streak(args: argparse.Namespace, out: TextIO) -> int:
    with open_repository(args.base_dir) as repo:
        records = repo.list_records()
    display.display_streak(calculate_streak(records), out=out)
    print(file=out)
    return 0


def cmd_goals_set(args: argparse.Namespace, out: TextIO) -> int:
    if not args.daily and not args.weekly:
        raise ConfigError(
            "Please specify at least one goal\n\nUsage:\n"
            "  pomo goals set --daily N     Set daily goal\n"
            "  pomo goals set --weekly N    Set weekly goal\n"
            "  pomo goals set --daily N --weekly N    Set both"
        )
    store = open_goal_store(args.base_dir)
    config = store.load()
    if args.daily:
        config.daily_goal = args.daily
    if args.weekly:
        config.weekly_goal = args.weekly
    config.enabled = True
    store.save(config)

    print("\n✓ Goals updated successfully!", file=out)
    display.display_goal_config(config, out)
    print(file=out)
    return 0


def cmd_goals_show(args: argparse.Namespace, out: TextIO) -> int:
    display.display_goal_config(open_goal_store(args.base_dir).load(), out)
    print(file=out)
    return 0


def cmd_goals_progress(args: argparse.Namespace, out: TextIO) -> int:
    config = open_goal_store(args.base_dir).load()
    if not config.enabled:
        print("\nNo goals configured yet.", file=out)
        print("Set goals with: pomo goals set --daily N --weekly N\n", file=out)
        return 0

    show_daily, show_weekly = args.daily, args.weekly
    if not show_daily and not show_weekly:
        show_daily = config.daily_goal > 0
        show_weekly = config.weekly_goal > 0

    with open_repository(args.base_dir) as repo:
        if show_daily and config.daily_goal > 0:
            start = periods.today_start()
            progress = calculate_goal_progress(
                config.daily_goal, repo.list_records_since(start), start
            )
            display.display_goal_progress(progress, "Daily", out)
        if show_weekly and config.weekly_goal > 0:
            start = periods.week_start()
            progress = calculate_goal_progress(
                config.weekly_goal, repo.list_records_since(start), start, weekly=True
            )
            display.display_goal_progress(progress, "Weekly", out)
        streak = calculate_streak(repo.list_records())

    if streak.current_streak > 0:
        display.display_streak(streak, out=out)
    print(file=out)
    return 0


def cmd_goals_clear(args: argparse.Namespace, out: TextIO) -> int:
    open_goal_store(args.base_dir).clear()
    print("\n✓ Goals cleared successfully\n", file=out)
    return 0


# =============================================================================
# PARSER
# =============================================================================

def _add_range_flags(parser: argparse.ArgumentParser, choices: Dict, default: str) -> None:
    group = parser.add_mutually_exclusive_group()
    for key in choices:
        hint = " (default)" if key == default else ""
        group.add_argument(
            f"--{key}", dest="period", action="store_const", const=key,
            help=f"{choices[key][0]}{hint}",
        )
    parser.set_defaults(period=default)


def _help_for(parser: argparse.ArgumentParser) -> Callable:
    def show_help(args: argparse.Namespace, out: TextIO) -> int:
        parser.print_help(out)
        return 0
    return show_help


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pomo",
        description=(
            "Pomodoro timer with configurable work sessions, short breaks and long "
            "breaks. During breaks it presents reflection prompts about your work."
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", help="Where to keep history and goals (default: $POMO_HOME or ~/.pomo)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to the console")

    parser.add_argument("-w", "--work", type=int, default=DEFAULT_WORK_MIN,
                        help="Work session duration in minutes (1-120)")
    parser.add_argument("-s", "--short-break", type=int, default=DEFAULT_SHORT_BREAK_MIN,
                        help="Short break duration in minutes (1-60)")
    parser.add_argument("-l", "--long-break", type=int, default=DEFAULT_LONG_BREAK_MIN,
                        help="Long break duration in minutes (1-120)")
    parser.add_argument("-c", "--count", type=int, default=DEFAULT_POMOS_UNTIL_LONG_BREAK,
                        help="Number of pomodoros before a long break (1-10)")
    parser.add_argument("-d", "--countdown", action=argparse.BooleanOptionalAction, default=True,
                        help="Show real-time countdown during sessions")
    parser.add_argument("-t", "--title", default="", help="Title for this session")
    parser.add_argument("-g", "--goal", default="", help="What you want to get done")
    parser.add_argument("--no-notify", action="store_true", help="Disable desktop notifications")
    parser.set_defaults(func=cmd_timer)

    sub = parser.add_subparsers(dest="command")

    # report
    report = sub.add_parser("report", help="Generate a report of your pomodoro statistics")
    _add_range_flags(report, REPORT_PERIODS, "today")
    report.add_argument("-d", "--detailed", action="store_true", help="Show detailed session list")
    report.set_defaults(func=cmd_report)

    # analyze
    analyze = sub.add_parser("analyze", help="Analyze your productivity patterns and trends")
    analyze.set_defaults(func=_help_for(analyze))
    analyze_sub = analyze.add_subparsers(dest="analyze_command")

    for name, func, help_text in (
        ("insights", cmd_insights, "Show comprehensive productivity insights"),
        ("time", cmd_time, "Analyze productivity by time of day"),
        ("days", cmd_days, "Analyze productivity by day of week"),
    ):
        p = analyze_sub.add_parser(name, help=help_text)
        _add_range_flags(p, ANALYZE_PERIODS, "week")
        p.set_defaults(func=func)

    compare = analyze_sub.add_parser("compare", help="Compare productivity across time periods")
    unit = compare.add_mutually_exclusive_group()
    unit.add_argument("--weeks", dest="unit", action="store_const", const="weeks",
                      help="Compare weeks (default)")
    unit.add_argument("--months", dest="unit", action="store_const", const="months",
                      help="Compare months")
    compare.set_defaults(func=cmd_compare, unit="weeks")

    streak = analyze_sub.add_parser("streak", help="Show your consistency streak")
    streak.set_defaults(func=cmd_streak)

    # goals
    goals = sub.add_parser("goals", help="Manage and track your pomodoro goals")
    goals.set_defaults(func=_help_for(goals))
    goals_sub = goals.add_subparsers(dest="goals_command")

    goals_set = goals_sub.add_parser("set", help="Set your daily or weekly pomodoro goals")
    goals_set.add_argument("--daily", type=_non_negative_int, default=0, help="Daily pomodoro goal")
    goals_set.add_argument("--weekly", type=_non_negative_int, default=0, help="Weekly pomodoro goal")
    goals_set.set_defaults(func=cmd_goals_set)

    goals_sub.add_parser("show", help="Display your current goals").set_defaults(func=cmd_goals_show)

    progress = goals_sub.add_parser("progress", help="Check your progress toward goals")
    progress.add_argument("--daily", action="store_true", help="Show daily progress")
    progress.add_argument("--weekly", action="store_true", help="Show weekly progress")
    progress.set_defaults(func=cmd_goals_progress)

    goals_sub.add_parser("clear", help="Remove all goals").set_defaults(func=cmd_goals_clear)

    return parser


def main(argv: Optional[List[str]] = None, out: Optional[TextIO] = None) -> int:
    out = out or sys.stdout
    args = create_parser().parse_args(argv)
    args.base_dir = data_dir(args.data_dir)
    setup_logging(args.verbose)

    try:
        return args.func(args, out)
    except PomoError as e:
        logger.info("Command failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130
