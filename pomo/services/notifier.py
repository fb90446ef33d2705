"""
Notifier — advisory desktop alerts at interval boundaries.

Delivery goes through plyer. Notifications are best effort: if the platform
has no backend (headless Linux, missing dbus, …) the message is printed to
the console instead and the timer carries on.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from plyer import notification

logger = logging.getLogger(__name__)

APP_NAME = "Pomodoro"
NOTIFY_TIMEOUT_SEC = 5


class Notifier:
    """Sends a notification or falls back to a console line."""

    def __init__(self, enabled: bool = True, out: Optional[TextIO] = None) -> None:
        self.enabled = enabled
        self.out = out or sys.stdout

    def alert(self, message: str) -> bool:
        """Returns True if a desktop notification was delivered."""
        if self.enabled:
            try:
                notification.notify(
                    title=APP_NAME,
                    message=message,
                    app_name=APP_NAME,
                    timeout=NOTIFY_TIMEOUT_SEC,
                )
                return True
            except Exception as e:
                logger.warning("Notification delivery failed: %s", e)
        self.out.write(f"\n🔔 ALERT: {message}\n")
        self.out.flush()
        return False


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this file does:
#   Pops a desktop notification when a work interval or break starts and
#   when a break ends, so the user notices even with the terminal hidden.
#
# Key points:
#   - plyer wraps each platform's native mechanism (notify-send/dbus,
#     Windows toast, macOS notification center) behind one call.
#   - Any failure is logged and turned into a console line. Losing a popup
#     must never kill a 25-minute work interval.
#
# Interviewer-friendly talking points:
#   1. plyer raises different exception types per backend
#      (NotImplementedError, dbus errors, OSError), hence `except Exception`.
#   2. The output stream is injectable, so tests read the fallback text
#      from a StringIO instead of stdout.
