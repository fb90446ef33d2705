"""
Data models for Pomo.

Plain dataclasses for what gets persisted: one SessionRecord per finished
timer run, and the single GoalConfig document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

# Stand-in for timestamps that could not be parsed from storage
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class SessionRecord:
    """One completed (or partially completed) timer run."""
    timestamp: datetime
    id: Optional[int] = None
    title: str = ""
    goal_label: str = ""
    completed_pomos: int = 0
    skipped_sessions: int = 0
    work_time: timedelta = timedelta(0)
    break_time: timedelta = timedelta(0)
    total_duration: timedelta = timedelta(0)

    def __post_init__(self) -> None:
        if self.completed_pomos < 0 or self.skipped_sessions < 0:
            raise ValueError("Session counters cannot be negative.")
        for name in ("work_time", "break_time", "total_duration"):
            if getattr(self, name) < timedelta(0):
                raise ValueError(f"{name} cannot be negative.")


@dataclass
class GoalConfig:
    """User-defined pomodoro targets. 0 means 'not set'."""
    daily_goal: int = 0
    weekly_goal: int = 0
    enabled: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "daily_goal": self.daily_goal,
            "weekly_goal": self.weekly_goal,
            "enabled": self.enabled,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GoalConfig":
        enabled = data.get("enabled", False)
        if not isinstance(enabled, bool):
            raise ValueError(f"'enabled' must be true or false, got {enabled!r}")
        return cls(
            daily_goal=int(data.get("daily_goal") or 0),
            weekly_goal=int(data.get("weekly_goal") or 0),
            enabled=enabled,
            created_at=_parse_dt(data.get("created_at")),
            updated_at=_parse_dt(data.get("updated_at")),
        )


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Defines the two things Pomo persists. SessionRecord is one row in the
#   append-only history; GoalConfig is a small JSON document.
#
# Key classes and why they exist:
#   - SessionRecord: frozen, because stored history is never edited. The
#     timer builds it once at the end of a run; analytics only read it.
#   - GoalConfig: mutable on purpose. `goals set` edits fields in place and
#     the store writes the whole document back.
#
# Interviewer-friendly talking points:
#   1. timedelta for durations: arithmetic (summing work time across runs)
#      is exact and the storage layer converts to integer nanoseconds.
#   2. ZERO_TIME is a visible marker for a corrupt timestamp. A report can
#      still load every other row instead of failing outright.
#   3. Validation in __post_init__ means a negative counter can never reach
#      the database, whichever code path builds the record.
