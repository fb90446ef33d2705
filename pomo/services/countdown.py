"""
Countdown — a fixed-duration wait that the user can cut short.

Two things race per interval: the countdown on the primary thread, and a
KeyboardListener thread waiting for "s" + Enter. They meet at a SkipSignal,
a single-slot queue. The primary thread blocks on it with the tick length as
timeout, so one call is both "wait for the next tick" and "wait for a skip".
Whoever finishes first wins; the signal is closed afterwards and anything the
listener offers later is dropped.
"""

from __future__ import annotations

import logging
import math
import queue
import select
import sys
import threading
import time
from datetime import timedelta
from typing import Callable, Optional, TextIO

logger = logging.getLogger(__name__)

COMPLETED = "completed"
SKIPPED = "skipped"

SKIP_COMMAND = "s"
LISTENER_POLL_SEC = 0.2
KEY_POLL_SEC = 0.02

if sys.platform == "win32":
    import msvcrt
else:
    msvcrt = None


class SkipSignal:
    """Single-slot, non-blocking completion signal for one interval."""

    def __init__(self) -> None:
        self._slot: "queue.Queue[bool]" = queue.Queue(maxsize=1)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def offer(self) -> bool:
        """Deliver a skip without blocking. False if nobody is waiting any more."""
        if self._closed.is_set():
            return False
        try:
            self._slot.put_nowait(True)
        except queue.Full:
            return False
        return True

    def wait(self, timeout: float) -> bool:
        """Block up to `timeout` seconds; True if a skip arrived."""
        try:
            return self._slot.get(timeout=timeout)
        except queue.Empty:
            return False

    def close(self) -> None:
        self._closed.set()


def total_ticks(duration: timedelta, tick: timedelta) -> int:
    return max(1, math.ceil(duration / tick))


def run_countdown(
    duration: timedelta,
    signal: SkipSignal,
    tick: timedelta,
    on_tick: Optional[Callable[[int], None]] = None,
) -> str:
    """
    Wait out `duration` in ticks unless a skip arrives first.

    Completion depends only on elapsed ticks versus the configured duration;
    on_tick(remaining_ticks) is a display hook. Returns COMPLETED or SKIPPED.
    """
    ticks = total_ticks(duration, tick)
    elapsed = 0
    try:
        while elapsed < ticks:
            if signal.wait(tick.total_seconds()):
                return SKIPPED
            elapsed += 1
            if on_tick is not None and elapsed < ticks:
                on_tick(ticks - elapsed)
        return COMPLETED
    finally:
        signal.close()


class KeyboardListener:
    """
    Background reader that turns "s" + Enter into a skip.

    Polls the stream for readability so stop() takes effect between lines and
    the next prompt gets the keyboard back. Windows consoles are polled through
    msvcrt; a real stream that cannot be polled at all is never read, so the
    skip is unavailable there but the continue prompt keeps its input. EOF or a
    read error ends the listener quietly without signalling.
    """

    def __init__(
        self,
        stream: TextIO,
        signal: SkipSignal,
        poll_interval: float = LISTENER_POLL_SEC,
    ) -> None:
        self.stream = stream
        self.signal = signal
        self.poll_interval = poll_interval
        self._stop = threading.Event()
        self._warned = False
        self._thread = threading.Thread(target=self._run, name="skip-listener", daemon=True)

    def start(self) -> None:
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        self._thread.join(timeout if timeout is not None else self.poll_interval * 2)

    def _run(self) -> None:
        while not self._stop.is_set() and not self.signal.closed:
            if not self._readable():
                continue
            try:
                line = self.stream.readline()
            except (OSError, ValueError) as e:
                logger.debug("Skip listener stopped on read error: %s", e)
                return
            if not line:
                return
            if line.strip().lower() == SKIP_COMMAND:
                if not self.signal.offer():
                    logger.debug("Skip arrived after the interval ended; dropped.")
                return

    def _readable(self) -> bool:
        """True only when readline() will not block indefinitely."""
        try:
            ready, _, _ = select.select([self.stream], [], [], self.poll_interval)
            return bool(ready)
        except (OSError, ValueError, TypeError):
            pass
        if not _has_fileno(self.stream):
            # In-memory streams (StringIO) never block
            return True
        if msvcrt is not None and self.stream.isatty():
            return self._console_key_waiting()
        if not self._warned:
            logger.warning("Input stream cannot be polled; skipping with 's' is unavailable.")
            self._warned = True
        self._stop.wait(self.poll_interval)
        return False

    def _console_key_waiting(self) -> bool:
        # Windows consoles are not selectable; poll the keyboard buffer instead.
        deadline = time.monotonic() + self.poll_interval
        while time.monotonic() < deadline:
            if msvcrt.kbhit():
                return True
            if self._stop.wait(KEY_POLL_SEC):
                return False
        return False


def _has_fileno(stream: TextIO) -> bool:
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):
        return False
    return True


ListenerFactory = Callable[[SkipSignal], "KeyboardListener"]
