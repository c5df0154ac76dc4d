"""
Historical returns signal model.

Tracks a universe of instruments, keeps one rate-of-change indicator per
instrument, and emits one price signal per instrument each time a new bar
closes on a ready indicator:

Membership change → InstrumentState (aggregator + ROC + warm-up) → update() → Signals
"""

from datetime import timedelta
from typing import Any, Iterable, Iterator, Optional, Union

import structlog

from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .data.models import Resolution, Slice
from .errors import ConfigurationError
from .host.base import AlgorithmHost
from .logging.config import (
    get_membership_logger,
    log_membership_change,
    log_signal_emission,
)
from .signals.models import Signal, SignalDirection
from .state.instrument import InstrumentState
from .utils.time import get_market_time

logger = structlog.get_logger(__name__)
membership_logger = get_membership_logger(__name__)


class HistoricalReturnsSignalModel:
    """
    Emits price signals from historical returns.

    The magnitude of each signal is the instrument's rate of change over
    `lookback` bars at `resolution`; the prediction period is
    `resolution * lookback`.
    """

    def __init__(
        self,
        host: AlgorithmHost,
        lookback: int = 1,
        resolution: Union[Resolution, str] = Resolution.DAILY
    ) -> None:
        """Initialize the model; invalid parameters raise ConfigurationError."""
        errors = ConfigValidator.validate_model_params(
            {"lookback": lookback, "resolution": resolution}
        )
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value!r})" for err in errors]
            logger.error("Signal model parameter validation failed", errors=error_msgs)
            raise ConfigurationError(
                f"Invalid signal model parameters: {'; '.join(error_msgs)}",
                errors=errors
            )

        self.host = host
        self._lookback = lookback
        self._resolution = Resolution.parse(resolution)
        self._prediction_interval = self._resolution.to_timedelta() * lookback
        self._name = f"{type(self).__name__}({lookback},{self._resolution.display_name})"

        self.logger = logger.bind(model=self._name)
        self.membership_logger = membership_logger

        # Tracked set: only on_membership_changed mutates it
        self._states: dict[Any, InstrumentState] = {}

        self.logger.info(
            "Signal model initialized",
            lookback=lookback,
            resolution=self._resolution.value,
            prediction_interval_seconds=self._prediction_interval.total_seconds()
        )

    @classmethod
    def from_config(
        cls,
        host: AlgorithmHost,
        loader: Optional[ConfigLoader] = None,
        overrides: Optional[dict[str, Any]] = None
    ) -> "HistoricalReturnsSignalModel":
        """Build a model from defaults, model.yaml and explicit overrides."""
        if loader is None:
            loader = ConfigLoader.create()

        config = loader.merge_config(overrides)

        errors = ConfigValidator.validate_config(config)
        if errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value!r})" for err in errors]
            logger.error(
                "Signal model configuration validation failed",
                config_dir=str(loader.config_dir),
                errors=error_msgs
            )
            raise ConfigurationError(
                f"Invalid signal model configuration: {'; '.join(error_msgs)}",
                errors=errors
            )

        model_params = config.get("model", {})

        return cls(
            host,
            lookback=model_params.get("lookback", 1),
            resolution=model_params.get("resolution", Resolution.DAILY),
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def lookback(self) -> int:
        return self._lookback

    @property
    def resolution(self) -> Resolution:
        return self._resolution

    @property
    def prediction_interval(self) -> timedelta:
        return self._prediction_interval

    def on_membership_changed(
        self,
        added: Iterable[Any] = (),
        removed: Iterable[Any] = ()
    ) -> None:
        """
        Apply universe additions and removals.

        Removals release the instrument's aggregator binding before its state
        is dropped. Additions build state, warm it up, and only then make it
        visible to update(). Duplicate additions and unknown removals are
        no-ops. Errors raised while adding an instrument propagate after any
        binding registered for it has been released.
        """
        for instrument in removed:
            state = self._states.get(instrument)
            if state is None:
                self.logger.debug(
                    "Ignoring removal of untracked instrument",
                    instrument=str(instrument)
                )
                continue

            state.release(self.host)
            del self._states[instrument]
            log_membership_change(
                self.membership_logger,
                instrument,
                action="removed",
                model=self._name,
                context={"tracked_count": len(self._states)}
            )

        for instrument in added:
            if instrument in self._states:
                self.logger.debug(
                    "Ignoring addition of tracked instrument",
                    instrument=str(instrument)
                )
                continue

            self._states[instrument] = self._initialize_state(instrument)
            log_membership_change(
                self.membership_logger,
                instrument,
                action="added",
                model=self._name,
                context={
                    "tracked_count": len(self._states),
                    "phase": self._states[instrument].phase.value,
                }
            )

    def _initialize_state(self, instrument: Any) -> InstrumentState:
        """Construct and warm up state for one instrument, releasing it on failure."""
        state = InstrumentState(self.host, instrument, self._lookback, self._resolution)
        try:
            state.warm_up(self.host, self._lookback, self._resolution)
        except Exception as e:
            self.logger.error(
                "Warm-up failed, instrument not added",
                instrument=str(instrument),
                error=str(e),
                error_type=type(e).__name__
            )
            self._release_after_failure(state)
            raise
        return state

    def _release_after_failure(self, state: InstrumentState) -> None:
        """Release a half-built state without masking the error being handled."""
        try:
            state.release(self.host)
        except Exception as release_error:
            self.logger.error(
                "Aggregator release failed after warm-up failure",
                instrument=str(state.instrument),
                error=str(release_error),
                error_type=type(release_error).__name__
            )

    def update(self, current_slice: Optional[Slice] = None) -> list[Signal]:
        """
        Emit signals for instruments whose indicator produced a new ready value.

        Args:
            current_slice: Data delivered by the host for this time step

        Returns:
            New signals, empty between bar closes
        """
        generated_time = get_market_time(current_slice.time if current_slice else None)

        signals = []
        for instrument, state in self._states.items():
            if not state.can_emit():
                continue

            magnitude = float(state.indicator.current)
            direction = SignalDirection.from_magnitude(magnitude)
            signal = Signal.price(
                instrument,
                self._prediction_interval,
                direction,
                magnitude=magnitude,
                confidence=None,
                generated_time=generated_time,
                source_model=self._name,
            )
            signals.append(signal)

            log_signal_emission(
                self.logger,
                instrument,
                direction=direction.name,
                magnitude=magnitude,
                model=self._name,
                context={"samples": state.indicator.samples}
            )

        return signals

    @property
    def tracked_instruments(self) -> list[Any]:
        return list(self._states)

    def get_instrument_state(self, instrument: Any) -> Optional[InstrumentState]:
        """Get state for a tracked instrument, None if untracked."""
        return self._states.get(instrument)

    def get_runtime_stats(self) -> dict[str, Any]:
        """Get runtime statistics."""
        phases: dict[str, int] = {}
        for state in self._states.values():
            phases[state.phase.value] = phases.get(state.phase.value, 0) + 1

        return {
            'model': self._name,
            'tracked_instruments': len(self._states),
            'phases': phases,
        }

    def __contains__(self, instrument: Any) -> bool:
        return instrument in self._states

    def __len__(self) -> int:
        return len(self._states)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._states))

    def __repr__(self) -> str:
        return self._name
