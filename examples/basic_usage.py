#!/usr/bin/env python3
"""
Basic Usage Example - Historical Returns Signal Model

Shows how to:
- Build the model against the in-memory host
- Add instruments (history is replayed to warm up the indicators)
- Feed daily bars and collect the emitted signals
- Remove an instrument

Run: python examples/basic_usage.py
"""

import json
from datetime import datetime, timedelta, timezone

from returns_alpha.data.models import Bar, Resolution, Slice
from returns_alpha.host.memory import InMemoryHost
from returns_alpha.logging.config import configure_logging
from returns_alpha.model import HistoricalReturnsSignalModel


def daily_rows(start: datetime, closes: list[float]) -> list[dict]:
    """Build raw history rows (epoch ms timestamps) for consecutive days."""
    return [
        {"timestamp": int((start + timedelta(days=i)).timestamp() * 1000), "close": close}
        for i, close in enumerate(closes)
    ]


def main():
    """Main demonstration function."""
    configure_logging(level="WARNING")

    print("🚀 Historical Returns Signal Model - Basic Usage Demo")
    print("=" * 60)

    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    host = InMemoryHost()
    host.load_history("BTC-USDT", daily_rows(start, [42000.0, 42500.0, 41800.0]))
    host.load_history("ETH-USDT", daily_rows(start, [2300.0, 2280.0, 2310.0]))

    model = HistoricalReturnsSignalModel(host, lookback=2, resolution=Resolution.DAILY)
    print(f"1. Created {model.name}, prediction period {model.prediction_interval}")

    model.on_membership_changed(added=["BTC-USDT", "ETH-USDT"])
    print(f"2. Tracking {model.tracked_instruments}")
    print(f"   Stats: {model.get_runtime_stats()}")
    print()

    live = {
        "BTC-USDT": [43000.0, 43000.0, 42000.0],
        "ETH-USDT": [2350.0, 2200.0, 2200.0],
    }
    last_day = start + timedelta(days=2)
    for day in range(3):
        now = last_day + timedelta(days=day + 1)
        data = Slice(
            time=now,
            bars={
                instrument: Bar(timestamp=now, close=closes[day])
                for instrument, closes in live.items()
            },
        )
        host.push(data)
        signals = model.update(data)

        print(f"3.{day + 1} {now.date()}: {len(signals)} signal(s)")
        for signal in signals:
            print("    " + json.dumps(signal.to_dict()))

        # Without a new bar close nothing is emitted
        assert model.update(data) == []

    model.on_membership_changed(removed=["ETH-USDT"])
    print()
    print(f"4. After removal tracking {model.tracked_instruments}")
    print(f"   Host aggregators: {host.active_instruments()}")


if __name__ == "__main__":
    main()
