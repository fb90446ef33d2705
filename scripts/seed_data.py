"""
Seed Data Generator — creates realistic fake history for development and demos.

Run: python scripts/seed_data.py [num_days] [--data-dir DIR]
"""

import argparse
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from pomo.config import data_dir, db_path
from pomo.data.database import Database
from pomo.data.models import SessionRecord
from pomo.data.repository import Repository

TITLES = ["", "", "Backend API", "Code Review", "Writing docs", "Reading", "Bug Fixing"]

WORK = timedelta(minutes=25)
SHORT_BREAK = timedelta(minutes=5)
LONG_BREAK = timedelta(minutes=30)


def seed(num_days: int = 30, base: Path = None, rng: random.Random = None) -> int:
    rng = rng or random.Random()
    db = Database(db_path(base or data_dir()))
    repo = Repository(db.connect())

    today = datetime.now().astimezone().replace(hour=0, minute=0, second=0, microsecond=0)
    saved = 0
    for offset in range(num_days, -1, -1):
        day = today - timedelta(days=offset)
        # Skip some days so streaks have gaps
        if rng.random() < 0.2:
            continue
        for _ in range(rng.randint(1, 3)):
            start = day + timedelta(hours=rng.randint(5, 23), minutes=rng.randint(0, 59))
            pomos = rng.randint(1, 6)
            skipped = rng.choice([0, 0, 0, 1, 2])
            long_breaks = pomos // 4
            short_breaks = pomos - long_breaks
            work = WORK * pomos
            breaks = SHORT_BREAK * short_breaks + LONG_BREAK * long_breaks
            repo.add_record(SessionRecord(
                timestamp=start,
                title=rng.choice(TITLES),
                completed_pomos=pomos,
                skipped_sessions=skipped,
                work_time=work,
                break_time=breaks,
                total_duration=work + breaks + timedelta(minutes=rng.randint(0, 10)),
            ))
            saved += 1

    db.close()
    return saved


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Fill a Pomo store with fake history.")
    parser.add_argument("days", type=int, nargs="?", default=30)
    parser.add_argument("--data-dir")
    args = parser.parse_args()
    count = seed(args.days, data_dir(args.data_dir))
    print(f"Seeded {count} sessions over {args.days} days.")


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this script does:
#   Generates plausible history so `pomo report` and `pomo analyze` have
#   something to show without weeks of real use.
#
# Key points:
#   - Random gaps (about one day in five) exercise streak detection.
#   - Start hours span 5am-11pm so every time-of-day bucket gets sessions.
#   - Uses the same Repository.add_record() path as the real timer.
