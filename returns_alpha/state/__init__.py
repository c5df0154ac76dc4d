"""
Per-instrument state: indicator ownership, warm-up and emission gating.
"""
from .instrument import InstrumentState
from .models import InstrumentPhase

__all__ = ["InstrumentState", "InstrumentPhase"]
