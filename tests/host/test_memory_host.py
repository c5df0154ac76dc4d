"""Tests for the in-memory host and bar aggregation."""

import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

from returns_alpha.data.models import Bar, Resolution, Slice
from returns_alpha.host.base import AlgorithmHost
from returns_alpha.host.memory import InMemoryHost, TimeBarAggregator, period_start
from returns_alpha.indicators.roc import RateOfChange

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def minute_bar(minutes: int, close: float, volume: float = 1.0) -> Bar:
    """One-minute bar ending `minutes` after T0."""
    return Bar(timestamp=T0 + timedelta(minutes=minutes), close=close, volume=volume)


class TestPeriodStart:
    """Test period bucketing of end-stamped bars."""

    def test_bar_ending_on_boundary_belongs_to_previous_period(self):
        assert period_start(T0 + timedelta(hours=1), timedelta(hours=1)) == T0

    def test_bar_inside_period(self):
        assert period_start(T0 + timedelta(minutes=30), timedelta(hours=1)) == T0


class TestTimeBarAggregator:
    """Test consolidation of finer bars."""

    def test_tick_resolution_passes_through(self):
        aggregator = TimeBarAggregator("BTC", Resolution.TICK)
        indicator = RateOfChange("BTC", 1)
        aggregator.attach(indicator)

        bar = minute_bar(1, 100.0)
        assert aggregator.update(bar) is bar
        assert indicator.samples == 1

    def test_consolidates_minutes_into_hour(self):
        aggregator = TimeBarAggregator("BTC", Resolution.HOUR)
        for minute in range(1, 60):
            assert aggregator.update(minute_bar(minute, 100.0 + minute)) is None

        closed = aggregator.update(minute_bar(60, 99.0))

        assert closed.timestamp == T0 + timedelta(hours=1)
        assert closed.open == 101.0
        assert closed.high == 159.0
        assert closed.low == 99.0
        assert closed.close == 99.0
        assert closed.volume == 60.0

    def test_next_period_bar_closes_working_bar(self):
        aggregator = TimeBarAggregator("BTC", Resolution.HOUR)
        aggregator.update(minute_bar(30, 100.0))

        closed = aggregator.update(minute_bar(90, 110.0))

        assert closed.timestamp == T0 + timedelta(hours=1)
        assert closed.close == 100.0
        assert len(aggregator.consolidated) == 1

    def test_scan_closes_on_time(self):
        aggregator = TimeBarAggregator("BTC", Resolution.HOUR)
        aggregator.update(minute_bar(30, 100.0))

        assert aggregator.scan(T0 + timedelta(minutes=59)) is None
        closed = aggregator.scan(T0 + timedelta(hours=1))
        assert closed.close == 100.0

    def test_naive_scan_time_treated_as_utc(self):
        aggregator = TimeBarAggregator("BTC", Resolution.HOUR)
        aggregator.update(minute_bar(30, 100.0))

        closed = aggregator.scan(datetime(2024, 1, 1, 1, 0))
        assert closed.timestamp == T0 + timedelta(hours=1)

    def test_feeds_attached_indicators(self):
        aggregator = TimeBarAggregator("BTC", Resolution.DAILY)
        indicator = Mock()
        aggregator.attach(indicator)
        aggregator.attach(indicator)

        aggregator.update(Bar(timestamp=T0 + timedelta(days=1), close=105.0))

        indicator.update.assert_called_once_with(T0 + timedelta(days=1), 105.0)

    def test_detach_all(self):
        aggregator = TimeBarAggregator("BTC", Resolution.DAILY)
        indicator = Mock()
        aggregator.attach(indicator)
        aggregator.detach_all()

        aggregator.update(Bar(timestamp=T0 + timedelta(days=1), close=105.0))
        indicator.update.assert_not_called()


class TestInMemoryHost:
    """Test host services."""

    def test_satisfies_host_protocol(self):
        assert isinstance(InMemoryHost(), AlgorithmHost)

    def test_resolve_restricted_to_known_instruments(self):
        host = InMemoryHost(instruments=["BTC"])

        assert isinstance(host.resolve_aggregator("BTC", Resolution.DAILY), TimeBarAggregator)
        assert host.resolve_aggregator("ETH", Resolution.DAILY) is None

    def test_register_and_release(self):
        host = InMemoryHost()
        handle = host.resolve_aggregator("BTC", Resolution.DAILY)

        host.register_aggregator("BTC", handle)
        assert host.active_instruments() == ["BTC"]

        host.release_aggregator("BTC", handle)
        host.release_aggregator("BTC", handle)

        assert host.active_instruments() == []
        assert host.registration_count == 1
        assert host.release_count == 1

    def test_load_and_fetch_history(self):
        host = InMemoryHost()
        host.load_history("BTC", [
            {"timestamp": "2024-01-01T00:00:00Z", "close": 100},
            {"timestamp": "2024-01-02T00:00:00Z", "close": 101},
            {"timestamp": "2024-01-03T00:00:00Z", "close": 102},
        ])

        bars = host.fetch_history("BTC", 2, Resolution.DAILY)

        assert [bar.close for bar in bars] == [101.0, 102.0]
        assert host.fetch_history("BTC", 2, Resolution.HOUR) == []
        assert host.fetch_history("ETH", 2, Resolution.DAILY) == []
        assert host.fetch_history("BTC", 0, Resolution.DAILY) == []

    def test_push_feeds_indicators_and_records_history(self):
        host = InMemoryHost()
        handle = host.resolve_aggregator("BTC", Resolution.DAILY)
        host.register_aggregator("BTC", handle)
        indicator = RateOfChange("BTC", 1)
        host.register_indicator("BTC", indicator, handle)

        day1 = T0 + timedelta(days=1)
        closed = host.push(Slice(time=day1, bars={"BTC": Bar(timestamp=day1, close=100.0)}))

        assert [bar.close for bar in closed] == [100.0]
        assert indicator.samples == 1
        assert host.fetch_history("BTC", 5, Resolution.DAILY)[-1].timestamp == day1

    def test_push_ignores_unregistered_instruments(self):
        host = InMemoryHost()
        closed = host.push(Slice(time=T0, bars={"BTC": Bar(timestamp=T0, close=1.0)}))
        assert closed == []

    def test_push_accepts_naive_timestamps(self):
        host = InMemoryHost()
        host.load_history("BTC", [{"timestamp": T0, "close": 99.0}])
        handle = host.resolve_aggregator("BTC", Resolution.DAILY)
        host.register_aggregator("BTC", handle)
        indicator = RateOfChange("BTC", 1)
        host.register_indicator("BTC", indicator, handle)

        day1 = datetime(2024, 1, 2)
        closed = host.push(Slice(time=day1, bars={"BTC": Bar(timestamp=day1, close=100.0)}))

        assert [bar.timestamp for bar in closed] == [T0 + timedelta(days=1)]
        assert closed[0].timestamp.tzinfo is timezone.utc
        assert indicator.last_time == T0 + timedelta(days=1)
        assert [bar.close for bar in host.fetch_history("BTC", 5, Resolution.DAILY)] == [99.0, 100.0]
