"""
Simulation engine: tick-by-tick replay of preprocessed candles with player
commands (open / close / hedge) applied between ticks.

Per tick: indicators -> mark portfolio -> count down hedges -> close
expired hedge positions -> re-mark -> tick record. Skipped ticks are
always processed one by one in increasing order.
"""

from __future__ import annotations
import logging
from typing import List, Optional

import pandas as pd

from market_sim.analytics.indicators import calculate_indicators
from market_sim.analytics.metrics import PerformanceMetrics, SessionStatistics, compute_metrics, session_statistics
from market_sim.core.config import Config
from market_sim.core.types import NEUTRAL_INDICATORS, Direction, MarketIndicators
from market_sim.hedging.configs import HedgeExpiredEvent, HedgeResult, HedgeType, SkillState
from market_sim.hedging.hedge import activate_hedge, process_hedges
from market_sim.portfolio.ledger import (
    PortfolioState,
    add_hedge_position,
    close_all_positions,
    close_position_by_id,
    create_portfolio,
    hedgeable_value,
    largest_position_id,
    open_position,
    position_pnl,
    update_portfolio,
)
from market_sim.backtesting.tick import BacktestTick, create_backtest_tick

logger = logging.getLogger("market_sim.backtest")


class SimulationEngine:
    """
    Holds the current PortfolioState / SkillState values for one timeline.
    Every call replaces them with new values; single writer only.
    """

    def __init__(self, candles: pd.DataFrame, config: Optional[Config] = None):
        if candles is None or len(candles) == 0:
            raise ValueError("SimulationEngine needs at least one candle")
        self.candles = candles.reset_index(drop=True)
        self.config = config or Config()
        self.reset()

    def reset(self) -> None:
        """Back to tick 0 with a fresh portfolio and skill state."""
        cfg = self.config
        self.portfolio: PortfolioState = create_portfolio(cfg.initial_capital)
        self.skill_state = SkillState(
            max_hedges=cfg.max_hedges,
            player_level=cfg.player_level,
            hedge_cost_reduction=cfg.hedge_cost_reduction,
            hedge_cooldown_reduction=cfg.hedge_cooldown_reduction,
        )
        self.current_index = 0
        self.indicators: MarketIndicators = NEUTRAL_INDICATORS
        self.tick_history: List[BacktestTick] = []
        self.hedge_events: List[HedgeExpiredEvent] = []
        self._process_tick(0)

    # Timeline

    @property
    def total_ticks(self) -> int:
        return len(self.candles)

    def is_at_end(self) -> bool:
        return self.current_index >= self.total_ticks - 1

    @property
    def current_price(self) -> float:
        return float(self.candles.iloc[self.current_index]["close"])

    @property
    def current_timestamp(self) -> str:
        return str(self.candles.iloc[self.current_index]["date"])

    def tick(self) -> Optional[BacktestTick]:
        """Advance one candle. None at end of data."""
        if self.is_at_end():
            return None
        self._process_tick(self.current_index + 1)
        return self.tick_history[-1]

    def advance_to(self, index: int) -> List[BacktestTick]:
        """Process every tick up to index (clamped to the data). Returns the new records."""
        target = min(index, self.total_ticks - 1)
        produced: List[BacktestTick] = []
        while self.current_index < target:
            self._process_tick(self.current_index + 1)
            produced.append(self.tick_history[-1])
        return produced

    def run_to_end(self) -> List[BacktestTick]:
        return self.advance_to(self.total_ticks - 1)

    def _process_tick(self, index: int) -> None:
        self.current_index = index
        price = self.current_price
        timestamp = self.current_timestamp
        self.indicators = calculate_indicators(self.candles, index)

        self.portfolio = self._mark(price, index, timestamp)
        marked = self.portfolio
        result = process_hedges(index, price, self.skill_state, lambda pid: position_pnl(marked, pid))
        self.skill_state = result.new_state
        self.hedge_events.extend(result.events)
        if result.hedges_to_close:
            for position_id in result.hedges_to_close:
                self.portfolio = close_position_by_id(self.portfolio, position_id, price, index)
            self.portfolio = self._mark(price, index, timestamp)

        candle = self.candles.iloc[index]
        prev = self.candles.iloc[index - 1] if index > 0 else None
        self.tick_history.append(
            create_backtest_tick(index, timestamp, price, self.portfolio, self.indicators, candle, prev)
        )

    def _mark(self, price: float, index: int, timestamp: str) -> PortfolioState:
        return update_portfolio(
            self.portfolio, price, index, timestamp,
            market=self.indicators, max_leverage=self.config.max_leverage,
        )

    # Commands

    def _clamp_leverage(self, leverage: Optional[float]) -> float:
        lev = self.config.default_leverage if leverage is None else leverage
        return max(self.config.min_leverage, min(self.config.max_leverage, lev))

    def _open(self, direction: Direction, size: float, leverage: Optional[float]) -> PortfolioState:
        self.portfolio = open_position(
            self.portfolio, direction, min(size, 1.0), self.current_price,
            self.current_index, self.current_timestamp, self._clamp_leverage(leverage),
        )
        self.portfolio = self._mark(self.current_price, self.current_index, self.current_timestamp)
        return self.portfolio

    def open_long(self, size: float, leverage: Optional[float] = None) -> PortfolioState:
        return self._open(Direction.LONG, size, leverage)

    def open_short(self, size: float, leverage: Optional[float] = None) -> PortfolioState:
        return self._open(Direction.SHORT, size, leverage)

    def close_position_by_id(self, position_id: str) -> PortfolioState:
        self.portfolio = close_position_by_id(self.portfolio, position_id, self.current_price, self.current_index)
        self.portfolio = self._mark(self.current_price, self.current_index, self.current_timestamp)
        return self.portfolio

    def close_all_positions(self) -> PortfolioState:
        self.portfolio = close_all_positions(self.portfolio, self.current_price, self.current_index)
        self.portfolio = self._mark(self.current_price, self.current_index, self.current_timestamp)
        return self.portfolio

    def activate_hedge(self, hedge_type: HedgeType = HedgeType.BASIC) -> HedgeResult:
        """Short the index against current holdings. Rejections leave all state unchanged."""
        result = activate_hedge(
            hedge_type,
            self.current_price,
            hedgeable_value(self.portfolio),
            self.portfolio.equity,
            self.current_index,
            self.skill_state,
            timestamp=self.current_timestamp,
            hedges_position_id=largest_position_id(self.portfolio),
        )
        if not result.success:
            return result
        self.skill_state = result.new_state
        self.portfolio = add_hedge_position(self.portfolio, result.new_position, result.event.cost_paid)
        self.portfolio = self._mark(self.current_price, self.current_index, self.current_timestamp)
        return result

    # Reporting

    def statistics(self) -> SessionStatistics:
        return session_statistics(self.portfolio)

    def equity_curve(self) -> List[float]:
        return [t.portfolio_value for t in self.tick_history]

    def performance(self) -> PerformanceMetrics:
        """Risk-adjusted metrics over realized trades and the per-tick equity curve."""
        pnls = [c.realized_pnl for c in self.portfolio.closed_positions]
        return compute_metrics(pnls, self.equity_curve())
