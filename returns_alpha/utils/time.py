"""
Time semantics utilities for market vs wall-clock time handling.
"""

from datetime import datetime, timezone
from typing import Optional, Union


def get_market_time(market_ts: Optional[datetime] = None) -> datetime:
    """
    Get the current market time, preferring market timestamp over wall-clock time.

    Args:
        market_ts: Optional market timestamp from data feed

    Returns:
        Market time as UTC datetime, falling back to wall-clock time if unavailable
    """
    if market_ts is not None:
        return market_ts

    return datetime.now(timezone.utc)


def ensure_utc(ts: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def to_market_time(raw: Union[int, float, str, datetime]) -> datetime:
    """
    Convert a raw timestamp into a UTC datetime.

    Accepts datetimes, epoch milliseconds (int, float or numeric string)
    and ISO-8601 strings.

    Raises:
        ValueError: If the value cannot be interpreted as a timestamp
    """
    if isinstance(raw, datetime):
        return ensure_utc(raw)

    if isinstance(raw, bool):
        raise ValueError(f"Invalid timestamp: {raw!r}")

    if isinstance(raw, (int, float)):
        return datetime.fromtimestamp(raw / 1000.0, tz=timezone.utc)

    if isinstance(raw, str):
        text = raw.strip()
        try:
            return datetime.fromtimestamp(float(text) / 1000.0, tz=timezone.utc)
        except ValueError:
            pass
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return ensure_utc(datetime.fromisoformat(text))

    raise ValueError(f"Invalid timestamp type: {type(raw).__name__}")


def format_market_time(market_ts: datetime) -> str:
    """
    Format market timestamp for signal output and logging.

    Args:
        market_ts: Market timestamp to format

    Returns:
        ISO8601 formatted string
    """
    return market_ts.isoformat()
