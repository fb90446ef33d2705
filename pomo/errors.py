"""
Exception types shared across Pomo.

The CLI catches PomoError at the command boundary, prints the message and
exits non-zero. Everything else propagates as-is.
"""

from __future__ import annotations


class PomoError(Exception):
    """Base class for errors that should be reported to the user."""


class ConfigError(PomoError, ValueError):
    """A flag or setting is outside its accepted range."""


class StorageError(PomoError):
    """The record store or goal document could not be opened, read or written."""
