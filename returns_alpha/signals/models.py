"""
Signal data models.

Signals are immutable and built fresh on every emission; nothing in this
package stores them.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Optional

from ..utils.time import format_market_time


class SignalType(str, Enum):
    """What the signal predicts."""
    PRICE = "price"


class SignalDirection(int, Enum):
    """Predicted direction of movement."""
    DOWN = -1
    FLAT = 0
    UP = 1

    @classmethod
    def from_magnitude(cls, magnitude: float) -> "SignalDirection":
        """Map a signed magnitude to a direction; only exact zero is flat."""
        if magnitude > 0:
            return cls.UP
        if magnitude < 0:
            return cls.DOWN
        return cls.FLAT


@dataclass(frozen=True)
class Signal:
    """Directional prediction for one instrument over a fixed period."""
    instrument: Any
    direction: SignalDirection
    period: timedelta                        # Prediction horizon
    magnitude: Optional[float] = None        # Signed expected move
    confidence: Optional[float] = None
    signal_type: SignalType = SignalType.PRICE
    generated_time: Optional[datetime] = None
    source_model: Optional[str] = None

    @classmethod
    def price(
        cls,
        instrument: Any,
        period: timedelta,
        direction: SignalDirection,
        magnitude: Optional[float] = None,
        confidence: Optional[float] = None,
        generated_time: Optional[datetime] = None,
        source_model: Optional[str] = None
    ) -> "Signal":
        """Create a price signal."""
        return cls(
            instrument=instrument,
            direction=direction,
            period=period,
            magnitude=magnitude,
            confidence=confidence,
            signal_type=SignalType.PRICE,
            generated_time=generated_time,
            source_model=source_model,
        )

    @property
    def close_time(self) -> Optional[datetime]:
        """When the prediction period ends."""
        if self.generated_time is None:
            return None
        return self.generated_time + self.period

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "instrument": str(self.instrument),
            "type": self.signal_type.value,
            "direction": self.direction.name.lower(),
            "magnitude": self.magnitude,
            "confidence": self.confidence,
            "period_seconds": self.period.total_seconds(),
            "generated_time": format_market_time(self.generated_time) if self.generated_time else None,
            "close_time": format_market_time(self.close_time) if self.close_time else None,
            "source_model": self.source_model,
        }
