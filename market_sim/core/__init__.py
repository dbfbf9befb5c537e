"""Core: config, types, logging."""

from market_sim.core.config import load_config, Config
from market_sim.core.types import (
    Direction,
    Instrument,
    MarketRegime,
    Position,
    ClosedPosition,
    MarketIndicators,
    NEUTRAL_INDICATORS,
)
from market_sim.core.logger import setup_logging

__all__ = [
    "load_config",
    "Config",
    "Direction",
    "Instrument",
    "MarketRegime",
    "Position",
    "ClosedPosition",
    "MarketIndicators",
    "NEUTRAL_INDICATORS",
    "setup_logging",
]
