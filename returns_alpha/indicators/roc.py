"""Rate of change (ROC) over a fixed number of samples"""

import math
from collections import deque
from datetime import datetime
from typing import Optional

from ..errors import MalformedDataError


def calculate_roc(current: float, previous: float) -> float:
    """
    Calculate rate of change between two values

    ROC = (current - previous) / previous

    Args:
        current: Most recent value
        previous: Value `period` samples ago

    Returns:
        Rate of change, 0.0 when previous is zero
    """
    if previous == 0:
        return 0.0

    return (current - previous) / previous


class RateOfChange:
    """
    Rolling rate of change over `period` samples.

    Keeps the last period + 1 values. Until the window fills, the oldest
    value seen so far is used as the denominator. Ready once more than
    `period` samples have been processed.
    """

    def __init__(self, name: str, period: int):
        if period < 1:
            raise ValueError(f"ROC period must be positive, got {period}")

        self.name = name
        self.period = period
        self._window: deque = deque(maxlen=period + 1)
        self._samples = 0
        self._current = 0.0
        self._last_time: Optional[datetime] = None

    def update(self, timestamp: datetime, value: float) -> float:
        """
        Process one sample

        Args:
            timestamp: Sample end time
            value: Sample value (typically the bar close)

        Returns:
            Updated indicator value
        """
        value = float(value)
        if not math.isfinite(value):
            raise MalformedDataError(
                f"Non-finite input to {self.name}: {value!r}",
                expected_format="finite number",
                context={"indicator": self.name, "timestamp": str(timestamp)}
            )

        self._window.append(value)
        self._samples += 1
        self._last_time = timestamp
        self._current = calculate_roc(value, self._window[0])
        return self._current

    @property
    def current(self) -> float:
        return self._current

    @property
    def samples(self) -> int:
        return self._samples

    @property
    def is_ready(self) -> bool:
        return self._samples > self.period

    @property
    def last_time(self) -> Optional[datetime]:
        return self._last_time

    def reset(self) -> None:
        self._window.clear()
        self._samples = 0
        self._current = 0.0
        self._last_time = None

    def __repr__(self) -> str:
        return (f"RateOfChange(name={self.name!r}, period={self.period}, "
                f"samples={self._samples}, current={self._current})")
