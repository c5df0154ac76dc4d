"""
Canonical data models for market data consumed by the signal model.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Mapping, Optional, Union


class Resolution(str, Enum):
    """Bar sampling resolution."""
    TICK = "tick"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAILY = "daily"

    def to_timedelta(self) -> timedelta:
        """Duration of one bar at this resolution (zero for ticks)."""
        return _RESOLUTION_SPANS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: Union["Resolution", str]) -> "Resolution":
        """Parse a resolution from an enum member or case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ValueError(
            f"Unknown resolution {value!r}; expected one of "
            f"{', '.join(r.value for r in cls)}"
        )


_RESOLUTION_SPANS = {
    Resolution.TICK: timedelta(0),
    Resolution.SECOND: timedelta(seconds=1),
    Resolution.MINUTE: timedelta(minutes=1),
    Resolution.HOUR: timedelta(hours=1),
    Resolution.DAILY: timedelta(days=1),
}


@dataclass(frozen=True)
class Bar:
    """Closed price bar with UTC end time."""
    timestamp: datetime              # UTC bar end time
    close: float                     # Closing price
    open: Optional[float] = None
    high: Optional[float] = None
    low: Optional[float] = None
    volume: float = 0.0


@dataclass(frozen=True)
class Slice:
    """All bars delivered by the host at one point in time."""
    time: datetime
    bars: Mapping[Any, Bar] = field(default_factory=dict)

    def get(self, instrument: Any) -> Optional[Bar]:
        """Bar for instrument in this slice, None if absent."""
        return self.bars.get(instrument)

    def __contains__(self, instrument: Any) -> bool:
        return instrument in self.bars
