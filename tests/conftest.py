"""Pytest configuration and shared fixtures."""

import pytest
from datetime import datetime, timedelta, timezone
from typing import List
from unittest.mock import Mock

from returns_alpha.data.models import Bar, Resolution
from returns_alpha.host.memory import InMemoryHost


START = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_daily_bars(closes: List[float], start: datetime = START) -> List[Bar]:
    """Consecutive daily bars ending at midnight UTC."""
    return [
        Bar(timestamp=start + timedelta(days=i), close=close)
        for i, close in enumerate(closes)
    ]


@pytest.fixture
def daily_bars():
    """Factory for consecutive daily bars."""
    return make_daily_bars


@pytest.fixture
def mock_host() -> Mock:
    """Host double returning a fresh aggregator handle per resolution call and no history."""
    host = Mock()
    host.resolve_aggregator.side_effect = lambda instrument, resolution: Mock(
        name=f"aggregator-{instrument}", resolution=resolution
    )
    host.fetch_history.return_value = []
    return host


@pytest.fixture
def memory_host() -> InMemoryHost:
    """In-memory host with a few days of history for two instruments."""
    host = InMemoryHost()
    host.history["BTC-USDT"][Resolution.DAILY] = make_daily_bars([100.0, 105.0])
    host.history["ETH-USDT"][Resolution.DAILY] = make_daily_bars([50.0, 45.0])
    return host
