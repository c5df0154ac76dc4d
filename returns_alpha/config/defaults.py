"""Default configuration parameters for the historical returns signal model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelParams:
    """Signal model parameters."""
    lookback: int = 1                  # Bars in the rate-of-change window
    resolution: str = "daily"          # Bar resolution (tick/second/minute/hour/daily)


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    model: ModelParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        model=ModelParams(),
    )
