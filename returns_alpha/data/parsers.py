"""
Parsers converting raw history rows into Bar objects.

Two row shapes are accepted:
- mappings with a timestamp key ("timestamp", "ts", "time" or "end_time")
  and a "close" key, plus optional open/high/low/volume
- sequences in exchange order: [ts, open, high, low, close, volume?]
"""

import math
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..errors import MalformedDataError
from ..utils.time import to_market_time
from .models import Bar

TIMESTAMP_KEYS = ("timestamp", "ts", "time", "end_time")


def _to_price(value: Any, field_name: str, raw: Any) -> float:
    try:
        price = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedDataError(
            f"Invalid {field_name}: {value!r}",
            raw_data=str(raw)[:100],
            expected_format="number"
        ) from e

    if not math.isfinite(price):
        raise MalformedDataError(
            f"Non-finite {field_name}: {value!r}",
            raw_data=str(raw)[:100],
            expected_format="finite number"
        )
    return price


def _optional_price(value: Any, field_name: str, raw: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return _to_price(value, field_name, raw)


def _parse_timestamp(value: Any, raw: Any):
    try:
        return to_market_time(value)
    except (TypeError, ValueError, OverflowError, OSError) as e:
        raise MalformedDataError(
            f"Invalid timestamp: {value!r}",
            raw_data=str(raw)[:100],
            expected_format="epoch milliseconds or ISO-8601"
        ) from e


def _parse_mapping(row: Mapping[str, Any]) -> Bar:
    ts_value = next((row[key] for key in TIMESTAMP_KEYS if key in row), None)
    if ts_value is None:
        raise MalformedDataError(
            "Bar row missing timestamp",
            raw_data=str(row)[:100],
            expected_format=f"one of {', '.join(TIMESTAMP_KEYS)}"
        )
    if "close" not in row:
        raise MalformedDataError(
            "Bar row missing close",
            raw_data=str(row)[:100],
            expected_format="close"
        )

    return Bar(
        timestamp=_parse_timestamp(ts_value, row),
        close=_to_price(row["close"], "close", row),
        open=_optional_price(row.get("open"), "open", row),
        high=_optional_price(row.get("high"), "high", row),
        low=_optional_price(row.get("low"), "low", row),
        volume=_optional_price(row.get("volume"), "volume", row) or 0.0,
    )


def _parse_sequence(row: Sequence[Any]) -> Bar:
    if len(row) < 5:
        raise MalformedDataError(
            f"Bar row has {len(row)} fields, expected at least 5",
            raw_data=str(row)[:100],
            expected_format="[ts, open, high, low, close, volume?]"
        )

    volume = _optional_price(row[5], "volume", row) if len(row) > 5 else None
    return Bar(
        timestamp=_parse_timestamp(row[0], row),
        open=_optional_price(row[1], "open", row),
        high=_optional_price(row[2], "high", row),
        low=_optional_price(row[3], "low", row),
        close=_to_price(row[4], "close", row),
        volume=volume or 0.0,
    )


def parse_bar(row: Any) -> Bar:
    """
    Parse a single raw row into a Bar.

    Raises:
        MalformedDataError: If the row shape or any field is invalid
    """
    if isinstance(row, Bar):
        return row
    if isinstance(row, Mapping):
        return _parse_mapping(row)
    if isinstance(row, Sequence) and not isinstance(row, (str, bytes)):
        return _parse_sequence(row)

    raise MalformedDataError(
        f"Unsupported bar row type: {type(row).__name__}",
        raw_data=str(row)[:100],
        expected_format="mapping or sequence"
    )


def parse_bars(rows: Iterable[Any]) -> list[Bar]:
    """Parse rows in the order given."""
    return [parse_bar(row) for row in rows]
