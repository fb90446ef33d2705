"""
SQLite database initialization and connection management.

Single responsibility: own the connection, create tables.
All actual queries live in Repository.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from ..config import db_path
from ..errors import StorageError

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
-- Sessions (append-only run history) -----------------------------------------
CREATE TABLE IF NOT EXISTS sessions (
    id               INTEGER PRIMARY KEY AUTOINCREMENT,
    date             TEXT    NOT NULL,
    title            TEXT,
    goal             TEXT,
    completed_pomos  INTEGER NOT NULL,
    skipped_sessions INTEGER NOT NULL,
    work_time        INTEGER NOT NULL,
    break_time       INTEGER NOT NULL,
    duration         INTEGER NOT NULL
);

-- Indexes for common queries -------------------------------------------------
CREATE INDEX IF NOT EXISTS idx_sessions_date ON sessions(date);
CREATE INDEX IF NOT EXISTS idx_sessions_goal ON sessions(goal);
"""


class Database:
    """Thin wrapper around a SQLite connection."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.db_path = path or db_path()
        self.conn: Optional[sqlite3.Connection] = None

    # -- lifecycle -----------------------------------------------------------

    def connect(self) -> sqlite3.Connection:
        """Open (or return existing) connection and ensure schema exists."""
        if self.conn is not None:
            return self.conn
        logger.info("Connecting to SQLite at %s", self.db_path)
        try:
            if str(self.db_path) != ":memory:":
                Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(str(self.db_path))
            self.conn.row_factory = sqlite3.Row
            self._create_tables()
        except (OSError, sqlite3.Error) as e:
            self.close()
            raise StorageError(f"Could not access storage at {self.db_path}: {e}") from e
        return self.conn

    def close(self) -> None:
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("Database connection closed.")

    def __enter__(self) -> sqlite3.Connection:
        return self.connect()

    def __exit__(self, *exc) -> None:
        self.close()

    # -- internal ------------------------------------------------------------

    def _create_tables(self) -> None:
        assert self.conn is not None
        self.conn.executescript(SCHEMA_SQL)
        self.conn.commit()
        logger.info("Database schema ensured.")


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Manages the SQLite connection and makes sure the sessions table exists.
#
# Key pieces:
#   - SCHEMA_SQL: the full DDL. CREATE IF NOT EXISTS makes it idempotent, so
#     it runs on every command invocation.
#   - Database: one connection per command. Usable as a context manager so
#     the CLI opens, uses and releases the store in one block.
#
# Interviewer-friendly talking points:
#   1. Errors are translated once, here: anything sqlite3 or the filesystem
#      throws while opening becomes a StorageError the CLI knows how to
#      report with a non-zero exit.
#   2. Durations are INTEGER columns (nanoseconds), not REAL minutes, so a
#      save/load round trip is exact.
#   3. No locking beyond what SQLite does natively: one user, one process.
