"""Interfaces the signal model requires from its host."""

from typing import Any, Optional, Protocol, Sequence, runtime_checkable

from ..data.models import Bar, Resolution
from ..indicators.base import Indicator


@runtime_checkable
class AggregatorHandle(Protocol):
    """Opaque binding that turns raw data into bars at one resolution."""

    resolution: Resolution


@runtime_checkable
class HistoryProvider(Protocol):
    """Source of historical bars used to warm up indicators."""

    def fetch_history(
        self,
        instrument: Any,
        count: int,
        resolution: Resolution
    ) -> Sequence[Bar]:
        """
        Return up to `count` bars in chronological order.

        May return fewer bars when history is sparse.
        """
        ...


@runtime_checkable
class AlgorithmHost(HistoryProvider, Protocol):
    """Aggregator and subscription services provided by the host."""

    def resolve_aggregator(
        self,
        instrument: Any,
        resolution: Resolution
    ) -> Optional[AggregatorHandle]:
        ...

    def register_aggregator(self, instrument: Any, handle: AggregatorHandle) -> None:
        ...

    def release_aggregator(self, instrument: Any, handle: AggregatorHandle) -> None:
        ...

    def register_indicator(
        self,
        instrument: Any,
        indicator: Indicator,
        handle: AggregatorHandle
    ) -> None:
        ...
