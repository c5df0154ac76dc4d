"""
In-memory host: bar aggregation, subscriptions and history.

Lets the signal model run end-to-end without a live data feed.
"""

from collections import defaultdict, deque
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, Optional, Sequence

import structlog

from ..data.models import Bar, Resolution, Slice
from ..data.parsers import parse_bars
from ..indicators.base import Indicator
from ..utils.time import ensure_utc

logger = structlog.get_logger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_BOUNDARY_EPSILON = timedelta(microseconds=1)


def period_start(ts: datetime, period: timedelta) -> datetime:
    """Start of the period an end-stamped bar at `ts` belongs to."""
    return EPOCH + ((ts - _BOUNDARY_EPSILON - EPOCH) // period) * period


class TimeBarAggregator:
    """
    Consolidates finer bars into bars of a fixed resolution.

    Each closed bar is stored and its (end time, close) pushed into every
    attached indicator. Tick resolution passes bars straight through.
    Naive timestamps are treated as UTC.
    """

    def __init__(self, instrument: Any, resolution: Resolution, max_history: int = 500):
        self.instrument = instrument
        self.resolution = resolution
        self.period = resolution.to_timedelta()
        self.consolidated: deque = deque(maxlen=max_history)
        self._indicators: list[Indicator] = []
        self._working: Optional[dict[str, Any]] = None

    def attach(self, indicator: Indicator) -> None:
        """Attach an indicator to receive closed bars."""
        if indicator not in self._indicators:
            self._indicators.append(indicator)

    def detach_all(self) -> None:
        self._indicators.clear()
        self._working = None

    @property
    def indicators(self) -> list[Indicator]:
        return list(self._indicators)

    def update(self, bar: Bar) -> Optional[Bar]:
        """
        Feed one input bar.

        Returns:
            The consolidated bar closed by this input, if any
        """
        if bar.timestamp.tzinfo is not timezone.utc:
            bar = replace(bar, timestamp=ensure_utc(bar.timestamp))

        if not self.period:
            self._emit(bar)
            return bar

        closed = None
        start = period_start(bar.timestamp, self.period)
        end = start + self.period

        if self._working is not None and end > self._working["end"]:
            closed = self._close_working()

        if self._working is None:
            self._working = {
                "end": end,
                "open": bar.open if bar.open is not None else bar.close,
                "high": bar.high if bar.high is not None else bar.close,
                "low": bar.low if bar.low is not None else bar.close,
                "close": bar.close,
                "volume": bar.volume,
            }
        else:
            working = self._working
            working["high"] = max(working["high"], bar.high if bar.high is not None else bar.close)
            working["low"] = min(working["low"], bar.low if bar.low is not None else bar.close)
            working["close"] = bar.close
            working["volume"] += bar.volume

        if bar.timestamp >= end:
            closed = self._close_working()

        return closed

    def scan(self, now: datetime) -> Optional[Bar]:
        """Close the working bar if `now` has reached its end time."""
        now = ensure_utc(now)
        if self._working is not None and now >= self._working["end"]:
            return self._close_working()
        return None

    def _close_working(self) -> Bar:
        working = self._working
        self._working = None
        bar = Bar(
            timestamp=working["end"],
            open=working["open"],
            high=working["high"],
            low=working["low"],
            close=working["close"],
            volume=working["volume"],
        )
        self._emit(bar)
        return bar

    def _emit(self, bar: Bar) -> None:
        self.consolidated.append(bar)
        for indicator in self._indicators:
            indicator.update(bar.timestamp, bar.close)

    def __repr__(self) -> str:
        return f"TimeBarAggregator({self.instrument!r}, {self.resolution.display_name})"


class InMemoryHost:
    """
    AlgorithmHost backed by in-process dictionaries.

    If `instruments` is given, aggregators only resolve for those instruments.
    History is kept per instrument and resolution; bars closed by registered
    aggregators are appended to it.
    """

    def __init__(self, instruments: Optional[Iterable[Any]] = None):
        self.instruments = set(instruments) if instruments is not None else None
        self.history: dict[Any, dict[Resolution, list[Bar]]] = defaultdict(dict)
        self.aggregators: dict[Any, list[TimeBarAggregator]] = defaultdict(list)
        self.registration_count = 0
        self.release_count = 0

    def load_history(
        self,
        instrument: Any,
        rows: Iterable[Any],
        resolution: Resolution = Resolution.DAILY
    ) -> int:
        """Parse raw rows and append them to the instrument's history."""
        bars = parse_bars(rows)
        self.history[instrument].setdefault(resolution, []).extend(bars)
        logger.debug(
            "Loaded history",
            instrument=str(instrument),
            resolution=resolution.value,
            bar_count=len(bars)
        )
        return len(bars)

    def resolve_aggregator(
        self,
        instrument: Any,
        resolution: Resolution
    ) -> Optional[TimeBarAggregator]:
        if self.instruments is not None and instrument not in self.instruments:
            logger.warning(
                "No aggregator available for instrument",
                instrument=str(instrument),
                resolution=resolution.value
            )
            return None
        return TimeBarAggregator(instrument, resolution)

    def register_aggregator(self, instrument: Any, handle: TimeBarAggregator) -> None:
        self.aggregators[instrument].append(handle)
        self.registration_count += 1

    def release_aggregator(self, instrument: Any, handle: TimeBarAggregator) -> None:
        handles = self.aggregators.get(instrument, [])
        if handle not in handles:
            logger.warning(
                "Release requested for unknown aggregator",
                instrument=str(instrument),
                aggregator=repr(handle)
            )
            return

        handles.remove(handle)
        handle.detach_all()
        if not handles:
            del self.aggregators[instrument]
        self.release_count += 1

    def register_indicator(
        self,
        instrument: Any,
        indicator: Indicator,
        handle: TimeBarAggregator
    ) -> None:
        handle.attach(indicator)

    def fetch_history(
        self,
        instrument: Any,
        count: int,
        resolution: Resolution
    ) -> Sequence[Bar]:
        if count <= 0:
            return []
        bars = self.history.get(instrument, {}).get(resolution, [])
        return list(bars[-count:])

    def push(self, data: Slice) -> list[Bar]:
        """
        Deliver a slice to every registered aggregator.

        Consolidated bars are appended to history so later warm-ups see them.

        Returns:
            Consolidated bars closed while processing the slice
        """
        closed = []
        for instrument, bar in data.bars.items():
            for aggregator in self.aggregators.get(instrument, []):
                result = aggregator.update(bar)
                if result is not None:
                    closed.append((aggregator, result))

        for handles in self.aggregators.values():
            for aggregator in handles:
                result = aggregator.scan(data.time)
                if result is not None:
                    closed.append((aggregator, result))

        for aggregator, bar in closed:
            self._record(aggregator.instrument, aggregator.resolution, bar)

        return [bar for _, bar in closed]

    def _record(self, instrument: Any, resolution: Resolution, bar: Bar) -> None:
        bars = self.history[instrument].setdefault(resolution, [])
        if bars and bars[-1].timestamp >= bar.timestamp:
            return
        bars.append(bar)

    def active_instruments(self) -> list[Any]:
        return list(self.aggregators)
