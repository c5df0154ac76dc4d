"""
Lifecycle model for per-instrument state.
"""

from enum import Enum


class InstrumentPhase(str, Enum):
    """
    Readiness of an instrument's indicator.

    UNSEEDED -> WARMING_UP -> READY. READY is permanent for the lifetime
    of the state.
    """
    UNSEEDED = "unseeded"
    WARMING_UP = "warming_up"
    READY = "ready"
