"""Shared fixtures."""

import pytest

from sse_helpers import FakeClock


@pytest.fixture
def clock(monkeypatch):
    """Drive the cursor's liveness clock by hand."""
    fake = FakeClock()
    monkeypatch.setattr("eventstreams.cursor.monotonic", fake)
    return fake
