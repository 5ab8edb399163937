"""Pytest configuration for horologe tests."""

from collections.abc import Iterator

import pytest

from horologe import DateTime
from horologe.config import configure, reset_settings, set_now


@pytest.fixture(autouse=True)
def isolated_settings() -> Iterator[None]:
    """Run every test against fresh settings with a fixed default zone."""
    reset_settings()
    configure(default_zone="America/New_York")
    yield
    set_now(None)
    reset_settings()


@pytest.fixture
def frozen_now() -> DateTime:
    """Pin the clock to 2024-01-15T12:00:00Z and return that instant."""
    now = DateTime.utc(2024, 1, 15, 12)
    millis = now.to_millis()
    set_now(lambda: millis)
    return now
