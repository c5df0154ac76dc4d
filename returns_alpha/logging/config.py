"""
Centralized logging configuration for the signal model.

All components log through structlog so membership changes, warm-ups and
emitted signals end up in one structured audit trail.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                       structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_membership_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for universe membership changes.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for membership auditing
    """
    return get_logger(name).bind(
        subsystem="membership",
        audit_trail=True
    )


def log_membership_change(
    logger: FilteringBoundLogger,
    instrument: Any,
    action: str,
    model: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log an instrument being added to or removed from the tracked set.

    Args:
        logger: Structlog logger instance
        instrument: Instrument identifier
        action: "added" or "removed"
        model: Name of the signal model
        context: Additional context data
    """
    bound_logger = logger.bind(
        instrument=str(instrument),
        action=action,
        model=model,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Membership changed")


def log_signal_emission(
    logger: FilteringBoundLogger,
    instrument: Any,
    direction: str,
    magnitude: float,
    model: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log an emitted signal with standardized fields.

    Args:
        logger: Structlog logger instance
        instrument: Instrument the signal is for
        direction: Signal direction name
        magnitude: Rate-of-change value carried by the signal
        model: Name of the emitting model
        context: Additional context data
    """
    bound_logger = logger.bind(
        instrument=str(instrument),
        direction=direction,
        magnitude=magnitude,
        model=model,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Signal emitted")
