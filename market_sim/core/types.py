"""
Core data types for positions, closed trades, and market indicators.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Direction(str, Enum):
    LONG = "long"
    SHORT = "short"

    @property
    def sign(self) -> int:
        return 1 if self is Direction.LONG else -1


class Instrument(str, Enum):
    """asset = the traded market, index = the instrument hedges are shorted on."""
    ASSET = "asset"
    INDEX = "index"


class MarketRegime(str, Enum):
    BULL = "BULL"
    BEAR = "BEAR"
    CRASH = "CRASH"
    CHOP = "CHOP"
    RECOVERY = "RECOVERY"


@dataclass(frozen=True)
class Position:
    """Open leveraged exposure. size_in_dollars is fixed at entry."""
    id: str
    direction: Direction
    entry_price: float
    entry_index: int
    entry_time: str
    size: float
    size_in_dollars: float
    current_price: float
    unrealized_pnl: float = 0.0
    unrealized_pnl_percent: float = 0.0
    leverage: float = 1.0
    instrument: Instrument = Instrument.ASSET
    is_hedge: bool = False
    beta: Optional[float] = None
    hedges_position_id: Optional[str] = None


@dataclass(frozen=True)
class ClosedPosition:
    """Closed position for history and analytics."""
    id: str
    direction: Direction
    entry_price: float
    entry_index: int
    entry_time: str
    exit_price: float
    exit_index: int
    size: float
    size_in_dollars: float
    leverage: float
    realized_pnl: float
    realized_pnl_percent: float
    holding_period: int
    instrument: Instrument = Instrument.ASSET
    is_hedge: bool = False
    beta: Optional[float] = None
    hedges_position_id: Optional[str] = None


@dataclass(frozen=True)
class MarketIndicators:
    """Indicator snapshot at one candle. drawdown and trend are in percent."""
    rsi: float = 50.0
    atr: float = 0.0
    volatility: float = 0.0
    trend: float = 0.0
    drawdown: float = 0.0
    regime: MarketRegime = MarketRegime.CHOP


NEUTRAL_INDICATORS = MarketIndicators()
