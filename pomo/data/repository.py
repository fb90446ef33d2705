"""
Repository — the single place where SQL lives.

Every other module talks to Repository, never to raw SQL. The session log is
append-only: records go in through add_record() and come back out through the
list_* queries, newest first.
"""

from __future__ import annotations

import dataclasses
import logging
import sqlite3
from datetime import datetime, timedelta, timezone
from typing import List, Sequence

from ..errors import StorageError
from .models import ZERO_TIME, SessionRecord

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, date, title, goal, completed_pomos, skipped_sessions, "
    "work_time, break_time, duration"
)


def format_timestamp(ts: datetime) -> str:
    """Canonical storage form: UTC, second precision, explicit offset."""
    if ts.tzinfo is None:
        ts = ts.astimezone()
    return ts.astimezone(timezone.utc).isoformat(timespec="seconds")


def parse_timestamp(text: str) -> datetime:
    """Parse a stored timestamp into local time; ZERO_TIME if it is unreadable."""
    try:
        ts = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except (AttributeError, TypeError, ValueError):
        logger.warning("Unparseable session timestamp %r; using zero time.", text)
        return ZERO_TIME
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone()


def to_nanos(delta: timedelta) -> int:
    return (delta // timedelta(microseconds=1)) * 1000


def from_nanos(nanos: int) -> timedelta:
    return timedelta(microseconds=(nanos or 0) // 1000)


class Repository:
    """Data-access layer wrapping a sqlite3 connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    # ── Sessions ────────────────────────────────────────────────────────────

    def add_record(self, record: SessionRecord) -> SessionRecord:
        """Append a finished run. Runs without a completed pomodoro are refused."""
        if record.completed_pomos <= 0:
            raise ValueError("Only runs with at least one completed pomodoro are stored.")
        try:
            cur = self.conn.execute(
                """INSERT INTO sessions (date, title, goal, completed_pomos,
                       skipped_sessions, work_time, break_time, duration)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    format_timestamp(record.timestamp),
                    record.title,
                    record.goal_label,
                    record.completed_pomos,
                    record.skipped_sessions,
                    to_nanos(record.work_time),
                    to_nanos(record.break_time),
                    to_nanos(record.total_duration),
                ),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not save session: {e}") from e
        logger.info("Saved session %d (%d pomodoros)", cur.lastrowid, record.completed_pomos)
        return dataclasses.replace(record, id=cur.lastrowid)

    def list_records(self) -> List[SessionRecord]:
        return self._query(f"SELECT {_COLUMNS} FROM sessions ORDER BY date DESC, id DESC")

    def list_records_since(self, since: datetime) -> List[SessionRecord]:
        return self._query(
            f"SELECT {_COLUMNS} FROM sessions WHERE date >= ? ORDER BY date DESC, id DESC",
            (format_timestamp(since),),
        )

    def list_records_in_range(self, start: datetime, end: datetime) -> List[SessionRecord]:
        """Records with start <= timestamp <= end."""
        return self._query(
            f"SELECT {_COLUMNS} FROM sessions WHERE date >= ? AND date <= ? "
            "ORDER BY date DESC, id DESC",
            (format_timestamp(start), format_timestamp(end)),
        )

    def count_records(self) -> int:
        try:
            row = self.conn.execute("SELECT COUNT(*) FROM sessions").fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Could not count sessions: {e}") from e
        return row[0]

    # ── Internal ────────────────────────────────────────────────────────────

    def _query(self, sql: str, params: Sequence = ()) -> List[SessionRecord]:
        try:
            rows = self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise StorageError(f"Could not load sessions: {e}") from e
        return [self._row_to_record(r) for r in rows]

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> SessionRecord:
        return SessionRecord(
            id=row["id"],
            timestamp=parse_timestamp(row["date"]),
            title=row["title"] or "",
            goal_label=row["goal"] or "",
            completed_pomos=row["completed_pomos"],
            skipped_sessions=row["skipped_sessions"],
            work_time=from_nanos(row["work_time"]),
            break_time=from_nanos(row["break_time"]),
            total_duration=from_nanos(row["duration"]),
        )


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The Repository is the ONLY place raw SQL lives. The timer calls
#   add_record(); report/analyze/goals commands call the list_* queries.
#
# Key methods:
#   - add_record(): the one write path. Refuses empty runs so the history
#     only ever holds runs with real work in them.
#   - list_records / list_records_since / list_records_in_range: the three
#     query shapes every command needs, always newest first.
#
# Data flow:
#   Timer finishes → SessionRecord → add_record() → INSERT
#   `pomo report --week` → list_records_since(week_start) → analytics
#
# Interviewer-friendly talking points:
#   1. Timestamps are stored in UTC with a fixed format, so plain string
#      comparison in SQL is the same as chronological comparison.
#   2. A corrupt date degrades to ZERO_TIME instead of aborting the load:
#      one bad row should not hide a whole month of history.
#   3. Integer nanoseconds for durations keep round trips lossless.
