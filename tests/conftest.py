"""Shared fixtures for rescue rewards tests."""

import pytest
from datetime import datetime, timedelta


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    """Clock pinned to 2024-06-15 12:00 local time."""
    return FakeClock(datetime(2024, 6, 15, 12, 0, 0))
