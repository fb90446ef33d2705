"""
Pomo — terminal Pomodoro timer.
Entry point for running from a source checkout (`python main.py --help`).
"""

import sys
from pathlib import Path

# Ensure the package is importable from the repo root
sys.path.insert(0, str(Path(__file__).resolve().parent))

from pomo.cli.commands import main


if __name__ == "__main__":
    sys.exit(main())


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   The entry point when running straight from the repo. The installed
#   `pomo` console script calls the same main().
#
# Key points:
#   - sys.path manipulation: ensures imports work whether you run from the
#     repo root or another directory.
#   - main() returns an exit status; sys.exit() hands it to the shell, so
#     validation and storage errors end with a non-zero code.
