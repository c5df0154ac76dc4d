"""Indicator capability consumed by the signal model"""

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class Indicator(Protocol):
    """
    Rolling indicator fed one (timestamp, value) sample at a time.

    `samples` never decreases; `is_ready` turns true once enough samples
    have been seen and stays true until `reset()`.
    """

    name: str

    def update(self, timestamp: datetime, value: float) -> float:
        ...

    @property
    def current(self) -> float:
        ...

    @property
    def samples(self) -> int:
        ...

    @property
    def is_ready(self) -> bool:
        ...

    def reset(self) -> None:
        ...
