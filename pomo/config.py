"""
Configuration — defaults, validation ranges, and on-disk locations.

Data lives in ~/.pomo by default. The POMO_HOME environment variable or the
--data-dir flag move it elsewhere (tests point it at a temp directory).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Optional, Union

from .errors import ConfigError

DATA_DIR_ENV = "POMO_HOME"
DEFAULT_DATA_DIR = Path.home() / ".pomo"

DB_FILENAME = "pomo.db"
GOALS_FILENAME = "goals.json"
LOG_FILENAME = "pomo.log"

# Defaults (minutes)
DEFAULT_WORK_MIN = 25
DEFAULT_SHORT_BREAK_MIN = 5
DEFAULT_LONG_BREAK_MIN = 30
DEFAULT_POMOS_UNTIL_LONG_BREAK = 4

# Accepted ranges, inclusive
WORK_RANGE = (1, 120)
SHORT_BREAK_RANGE = (1, 60)
LONG_BREAK_RANGE = (1, 120)
POMOS_RANGE = (1, 10)

# Display refresh / accounting granularity of the countdown
DEFAULT_TICK = timedelta(minutes=1)


@dataclass
class TimerConfig:
    """Settings for one interactive timer run."""
    work_duration: timedelta = timedelta(minutes=DEFAULT_WORK_MIN)
    short_break_duration: timedelta = timedelta(minutes=DEFAULT_SHORT_BREAK_MIN)
    long_break_duration: timedelta = timedelta(minutes=DEFAULT_LONG_BREAK_MIN)
    pomos_until_long_break: int = DEFAULT_POMOS_UNTIL_LONG_BREAK
    show_countdown: bool = True
    session_title: str = ""
    session_goal: str = ""

    @classmethod
    def from_minutes(
        cls,
        work: int = DEFAULT_WORK_MIN,
        short_break: int = DEFAULT_SHORT_BREAK_MIN,
        long_break: int = DEFAULT_LONG_BREAK_MIN,
        count: int = DEFAULT_POMOS_UNTIL_LONG_BREAK,
        show_countdown: bool = True,
        title: str = "",
        goal: str = "",
    ) -> "TimerConfig":
        """Build a config from CLI minute values, rejecting anything out of range."""
        _check_range("work duration", work, WORK_RANGE, "minutes")
        _check_range("short break duration", short_break, SHORT_BREAK_RANGE, "minutes")
        _check_range("long break duration", long_break, LONG_BREAK_RANGE, "minutes")
        _check_range("pomodoros before long break", count, POMOS_RANGE)
        return cls(
            work_duration=timedelta(minutes=work),
            short_break_duration=timedelta(minutes=short_break),
            long_break_duration=timedelta(minutes=long_break),
            pomos_until_long_break=count,
            show_countdown=show_countdown,
            session_title=title or "",
            session_goal=goal or "",
        )


def _check_range(name: str, value: int, bounds: tuple, unit: str = "") -> None:
    low, high = bounds
    if value < low or value > high:
        suffix = f" {unit}" if unit else ""
        raise ConfigError(
            f"{name} must be between {low} and {high}{suffix}, got {value}"
        )


# ── Locations ───────────────────────────────────────────────────────────────

def data_dir(override: Optional[Union[str, Path]] = None) -> Path:
    """Resolve the data directory: explicit override, then $POMO_HOME, then ~/.pomo."""
    if override:
        return Path(override).expanduser()
    env = os.environ.get(DATA_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return DEFAULT_DATA_DIR


def db_path(base: Optional[Path] = None) -> Path:
    return (base or data_dir()) / DB_FILENAME


def goals_path(base: Optional[Path] = None) -> Path:
    return (base or data_dir()) / GOALS_FILENAME


def log_path(base: Optional[Path] = None) -> Path:
    return (base or data_dir()) / LOG_FILENAME
