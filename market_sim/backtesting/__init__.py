"""Backtesting: tick records and the tick-by-tick simulation engine."""

from market_sim.backtesting.tick import (
    BacktestTick,
    CandlePattern,
    create_backtest_tick,
    detect_candle_pattern,
    return_to_slope,
)
from market_sim.backtesting.engine import SimulationEngine

__all__ = [
    "BacktestTick",
    "CandlePattern",
    "create_backtest_tick",
    "detect_candle_pattern",
    "return_to_slope",
    "SimulationEngine",
]
