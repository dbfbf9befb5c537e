"""
Per-tick snapshot handed to the rendering layer, plus the candle-derived
scalars it consumes (snapped slope, candle pattern). Nothing here feeds
back into the ledger.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from market_sim.core.types import MarketIndicators
from market_sim.portfolio.ledger import PortfolioState

RETURN_TO_HEIGHT_SCALE = 10
MAX_SLOPE_RETURN_PCT = 4.0
MAX_SLOPE = 32
SLOPE_BUCKETS = (-32, -16, 0, 16, 32)


class CandlePattern(str, Enum):
    NEUTRAL = "neutral"
    DOJI = "doji"
    MARUBOZU_BULL = "marubozu_bull"
    MARUBOZU_BEAR = "marubozu_bear"
    HAMMER = "hammer"
    SHOOTING_STAR = "shooting_star"
    BULLISH_ENGULFING = "bullish_engulfing"
    BEARISH_ENGULFING = "bearish_engulfing"


@dataclass(frozen=True)
class BacktestTick:
    """Immutable record of one processed tick."""
    index: int
    timestamp: str
    price: float
    portfolio_value: float
    accumulated_return: float
    road_height: float
    slope: int
    pattern: CandlePattern
    indicators: MarketIndicators


def return_to_slope(daily_return: float) -> int:
    """Daily return (percent) -> nearest bucket in SLOPE_BUCKETS."""
    normalized = max(-1.0, min(1.0, daily_return / MAX_SLOPE_RETURN_PCT))
    # halves round up, not to even
    slope = math.floor(normalized * MAX_SLOPE + 0.5)
    closest = SLOPE_BUCKETS[0]
    for bucket in SLOPE_BUCKETS:
        if abs(slope - bucket) < abs(slope - closest):
            closest = bucket
    return closest


def detect_candle_pattern(candle: Mapping[str, Any], prev_candle: Optional[Mapping[str, Any]] = None) -> CandlePattern:
    """Classify a single candle (engulfing patterns need the previous one)."""
    o, h, l, c = float(candle["open"]), float(candle["high"]), float(candle["low"]), float(candle["close"])
    body = c - o
    rng = h - l
    if rng == 0:
        return CandlePattern.NEUTRAL

    body_ratio = abs(body) / rng
    upper_ratio = (h - max(o, c)) / rng
    lower_ratio = (min(o, c) - l) / rng

    if body_ratio < 0.1:
        return CandlePattern.DOJI
    if upper_ratio < 0.05 and lower_ratio < 0.05:
        return CandlePattern.MARUBOZU_BULL if body > 0 else CandlePattern.MARUBOZU_BEAR
    if lower_ratio > 0.6 and upper_ratio < 0.1 and body_ratio < 0.3:
        return CandlePattern.HAMMER
    if upper_ratio > 0.6 and lower_ratio < 0.1 and body_ratio < 0.3:
        return CandlePattern.SHOOTING_STAR

    if prev_candle is not None:
        po, pc = float(prev_candle["open"]), float(prev_candle["close"])
        prev_body = pc - po
        if prev_body < 0 and body > 0 and o < pc and c > po:
            return CandlePattern.BULLISH_ENGULFING
        if prev_body > 0 and body < 0 and o > pc and c < po:
            return CandlePattern.BEARISH_ENGULFING

    return CandlePattern.NEUTRAL


def create_backtest_tick(
    index: int,
    timestamp: str,
    price: float,
    portfolio: PortfolioState,
    indicators: MarketIndicators,
    candle: Optional[Mapping[str, Any]] = None,
    prev_candle: Optional[Mapping[str, Any]] = None,
) -> BacktestTick:
    """Package the portfolio after tick `index`. 1% accumulated return = 10 height units."""
    if candle is not None:
        slope = return_to_slope(float(candle["daily_return"]))
        pattern = detect_candle_pattern(candle, prev_candle)
    else:
        slope, pattern = 0, CandlePattern.NEUTRAL
    return BacktestTick(
        index=index,
        timestamp=timestamp,
        price=price,
        portfolio_value=portfolio.equity,
        accumulated_return=portfolio.accumulated_return,
        road_height=portfolio.accumulated_return * RETURN_TO_HEIGHT_SCALE,
        slope=slope,
        pattern=pattern,
        indicators=indicators,
    )
