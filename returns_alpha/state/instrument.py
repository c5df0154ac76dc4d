"""
Per-instrument runtime state.

Binds one instrument to its aggregator and rate-of-change indicator, replays
history to warm the indicator up, and turns the indicator's growing sample
count into an edge trigger that fires at most once per closed bar.
"""

from typing import Any, Optional

from ..data.models import Resolution
from ..errors import AggregatorResolutionError
from ..host.base import AggregatorHandle, AlgorithmHost, HistoryProvider
from ..indicators.roc import RateOfChange
from ..logging.config import get_logger
from .models import InstrumentPhase

logger = get_logger(__name__)


class InstrumentState:
    """Aggregator binding, indicator and emission latch for one instrument."""

    def __init__(
        self,
        host: AlgorithmHost,
        instrument: Any,
        lookback: int,
        resolution: Resolution
    ):
        self.instrument = instrument
        self.lookback = lookback
        self.resolution = resolution
        self.previous_samples = 0
        self._released = False
        self.logger = logger.bind(instrument=str(instrument))

        handle: Optional[AggregatorHandle] = host.resolve_aggregator(instrument, resolution)
        if handle is None:
            raise AggregatorResolutionError(
                f"Unable to resolve {resolution.value} aggregator for {instrument}",
                instrument=instrument,
                resolution=resolution.value
            )
        self.aggregator = handle
        host.register_aggregator(instrument, handle)

        try:
            self.indicator = RateOfChange(str(instrument), lookback)
            host.register_indicator(instrument, self.indicator, handle)
        except Exception as e:
            try:
                self.release(host)
            except Exception as release_error:
                self.logger.error(
                    "Aggregator release failed after indicator registration failure",
                    error=str(release_error),
                    error_type=type(release_error).__name__,
                    original_error=str(e)
                )
            raise

    @property
    def phase(self) -> InstrumentPhase:
        if self.indicator.is_ready:
            return InstrumentPhase.READY
        if self.indicator.samples == 0:
            return InstrumentPhase.UNSEEDED
        return InstrumentPhase.WARMING_UP

    @property
    def released(self) -> bool:
        return self._released

    def warm_up(
        self,
        history_provider: HistoryProvider,
        lookback: int,
        resolution: Resolution
    ) -> int:
        """
        Replay recent history through the indicator.

        Blocks until the fetch completes. Fetch errors propagate to the caller.

        Returns:
            Number of bars replayed
        """
        history = history_provider.fetch_history(self.instrument, lookback, resolution)

        replayed = 0
        for bar in history:
            self.indicator.update(bar.timestamp, bar.close)
            replayed += 1

        if replayed < lookback:
            self.logger.warning(
                "Insufficient history for warm-up",
                required_count=lookback,
                available_count=replayed,
                resolution=resolution.value
            )

        self.logger.debug(
            "Indicator warmed up",
            bars_replayed=replayed,
            samples=self.indicator.samples,
            phase=self.phase.value
        )
        return replayed

    def can_emit(self) -> bool:
        """
        True once per new indicator sample, and only when the indicator is ready.

        Repeated calls without a new sample return False.
        """
        samples = self.indicator.samples
        if samples == self.previous_samples:
            return False

        self.previous_samples = samples
        return self.indicator.is_ready

    def release(self, host: AlgorithmHost) -> None:
        """Release the aggregator binding. Subsequent calls do nothing."""
        if self._released:
            return
        self._released = True
        host.release_aggregator(self.instrument, self.aggregator)

    def __repr__(self) -> str:
        return (f"InstrumentState({self.instrument!r}, lookback={self.lookback}, "
                f"resolution={self.resolution.display_name}, phase={self.phase.value})")
