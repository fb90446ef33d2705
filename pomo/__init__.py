"""Pomo — a terminal Pomodoro timer with session history and analytics."""

__version__ = "1.0.0"
