"""Indicators driven by consolidated bars"""

from .base import Indicator
from .roc import RateOfChange

__all__ = [
    "Indicator",
    "RateOfChange",
]
