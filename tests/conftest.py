"""Shared fixtures."""

import time
import pytest


@pytest.fixture
def berlin_tz(monkeypatch):
    """Run the test with Europe/Berlin as the process-local timezone."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset() is not available on this platform")
    monkeypatch.setenv("TZ", "Europe/Berlin")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()
