"""
Host collaborators consumed by the signal model.

The model only talks to the host through the AlgorithmHost protocol; the
in-memory implementation here backs examples and integration tests.
"""
from .base import AggregatorHandle, AlgorithmHost
from .memory import InMemoryHost, TimeBarAggregator

__all__ = ["AggregatorHandle", "AlgorithmHost", "InMemoryHost", "TimeBarAggregator"]
