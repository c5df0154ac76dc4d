"""Tests for the rate of change indicator"""

import math
import pytest
from datetime import datetime, timedelta, timezone

from returns_alpha.errors import MalformedDataError
from returns_alpha.indicators.base import Indicator
from returns_alpha.indicators.roc import RateOfChange, calculate_roc

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def feed(indicator, values):
    for i, value in enumerate(values):
        indicator.update(T0 + timedelta(days=i), value)


class TestCalculateRoc:
    """Test the raw ROC formula"""

    def test_positive_change(self):
        assert calculate_roc(105.0, 100.0) == pytest.approx(0.05)

    def test_negative_change(self):
        assert calculate_roc(90.0, 100.0) == pytest.approx(-0.1)

    def test_zero_denominator(self):
        """Zero previous value yields 0.0 instead of dividing by zero"""
        assert calculate_roc(10.0, 0.0) == 0.0


class TestRateOfChange:
    """Test the rolling indicator"""

    def test_satisfies_indicator_protocol(self):
        assert isinstance(RateOfChange("BTC", 1), Indicator)

    def test_rejects_non_positive_period(self):
        with pytest.raises(ValueError):
            RateOfChange("BTC", 0)

    def test_initial_state(self):
        roc = RateOfChange("BTC", 3)
        assert roc.samples == 0
        assert roc.current == 0.0
        assert roc.is_ready is False
        assert roc.last_time is None

    def test_lookback_one_two_closes(self):
        """Two closes with period 1 give one full transition and readiness"""
        roc = RateOfChange("BTC", 1)
        feed(roc, [100.0, 105.0])

        assert roc.current == pytest.approx((105.0 - 100.0) / 100.0)
        assert roc.samples == 2
        assert roc.is_ready is True

    def test_not_ready_until_samples_exceed_period(self):
        roc = RateOfChange("BTC", 3)
        feed(roc, [100.0, 101.0, 102.0])
        assert roc.is_ready is False

        feed(roc, [103.0])
        assert roc.is_ready is True

    def test_uses_value_period_samples_ago(self):
        roc = RateOfChange("BTC", 2)
        feed(roc, [100.0, 200.0, 110.0, 220.0])
        # window is [200, 110, 220]
        assert roc.current == pytest.approx(0.1)

    def test_partial_window_uses_oldest_value(self):
        roc = RateOfChange("BTC", 5)
        feed(roc, [100.0, 120.0])
        assert roc.current == pytest.approx(0.2)

    def test_first_sample_is_zero(self):
        roc = RateOfChange("BTC", 1)
        feed(roc, [100.0])
        assert roc.current == 0.0
        assert roc.samples == 1

    def test_samples_monotonic(self):
        roc = RateOfChange("BTC", 2)
        counts = []
        for i in range(5):
            roc.update(T0 + timedelta(days=i), 100.0 + i)
            counts.append(roc.samples)
        assert counts == [1, 2, 3, 4, 5]

    def test_update_returns_current(self):
        roc = RateOfChange("BTC", 1)
        roc.update(T0, 50.0)
        result = roc.update(T0 + timedelta(days=1), 25.0)
        assert result == roc.current == pytest.approx(-0.5)

    def test_tracks_last_time(self):
        roc = RateOfChange("BTC", 1)
        feed(roc, [1.0, 2.0])
        assert roc.last_time == T0 + timedelta(days=1)

    def test_rejects_non_finite_values(self):
        roc = RateOfChange("BTC", 1)
        with pytest.raises(MalformedDataError):
            roc.update(T0, math.nan)
        assert roc.samples == 0

    def test_reset(self):
        roc = RateOfChange("BTC", 1)
        feed(roc, [100.0, 105.0])
        roc.reset()

        assert roc.samples == 0
        assert roc.current == 0.0
        assert roc.is_ready is False
