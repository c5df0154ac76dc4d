"""
Error classification for the signal model.

Separates recoverable data quality issues from failures that abort the
operation in progress (configuration, aggregator resolution).
"""

from .data_quality import (
    DataQualityError,
    MalformedDataError,
)
from .system_failures import (
    SystemFailureError,
    AggregatorResolutionError,
    ConfigurationError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MalformedDataError",
    # System Failures
    "SystemFailureError",
    "AggregatorResolutionError",
    "ConfigurationError",
]
