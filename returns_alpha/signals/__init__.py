"""
Signal value objects emitted by the signal model.
"""
from .models import Signal, SignalDirection, SignalType

__all__ = ["Signal", "SignalDirection", "SignalType"]
