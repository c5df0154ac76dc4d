"""
System failure error classifications.

These abort the operation in progress and are propagated to the caller
rather than absorbed by the model.
"""

from typing import Any, Dict, Optional


class SystemFailureError(Exception):
    """Base class for unrecoverable failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class AggregatorResolutionError(SystemFailureError):
    """The host could not resolve a bar aggregator for an instrument."""

    def __init__(self, message: str, instrument: Optional[Any] = None,
                 resolution: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.instrument = instrument
        self.resolution = resolution


class ConfigurationError(SystemFailureError):
    """Model parameters failed validation."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
