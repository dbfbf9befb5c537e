"""
Portfolio ledger: cash, open positions, realized history and risk metrics.

Every function takes a PortfolioState and returns a new one; nothing is
mutated in place. Invalid requests (non-positive size, unknown id) return
the input state unchanged rather than raising.

Equity accounting: opening a position moves size_in_dollars out of cash
(margin reservation), so equity = cash + sum(size_in_dollars) + sum(unrealized).
"""

from __future__ import annotations
import logging
import math
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

from market_sim.core.types import (
    ClosedPosition,
    Direction,
    Instrument,
    MarketIndicators,
    MarketRegime,
    Position,
)
from market_sim.portfolio.position import close_record, mark_to_market

logger = logging.getLogger("market_sim.portfolio")

LOSS_AVERSION_MULTIPLIER = 2.25
DEFAULT_MAX_LEVERAGE = 3.0
EXPOSURE_STRESS_WEIGHT = 0.3
DRAWDOWN_STRESS_WEIGHT = 2.0


@dataclass(frozen=True)
class PortfolioState:
    """Snapshot of the portfolio after the last ledger operation."""
    initial_capital: float
    cash: float
    equity: float
    positions: Tuple[Position, ...] = ()
    closed_positions: Tuple[ClosedPosition, ...] = ()
    total_exposure: float = 0.0
    total_unrealized_pnl: float = 0.0
    total_realized_pnl: float = 0.0
    accumulated_return: float = 0.0
    accumulated_return_dollar: float = 0.0
    peak_equity: float = 0.0
    drawdown: float = 0.0
    max_drawdown: float = 0.0
    recovery_needed: float = 0.0
    margin_usage: float = 0.0
    stress_level: float = 0.0
    raw_stress: float = 0.0
    total_hedge_cost: float = 0.0
    regime: MarketRegime = MarketRegime.CHOP
    next_position_seq: int = 1


@dataclass(frozen=True)
class OpenPositionOptions:
    """Extra attributes for open_position (hedge bookkeeping, explicit id)."""
    instrument: Instrument = Instrument.ASSET
    is_hedge: bool = False
    beta: Optional[float] = None
    hedges_position_id: Optional[str] = None
    position_id: Optional[str] = None


def create_portfolio(initial_capital: float = 10000.0) -> PortfolioState:
    """Fresh portfolio: all capital in cash, peak at starting equity."""
    return PortfolioState(
        initial_capital=initial_capital,
        cash=initial_capital,
        equity=initial_capital,
        peak_equity=initial_capital,
    )


def calculate_recovery_needed(loss_pct: float) -> float:
    """
    Gain in percent required to recover from a loss of loss_pct percent.
    A loss of L requires L / (1 - L); total loss can never be recovered.
    """
    loss = abs(loss_pct) / 100
    if loss >= 1:
        return math.inf
    return loss / (1 - loss) * 100


def get_position(portfolio: PortfolioState, position_id: str) -> Optional[Position]:
    for pos in portfolio.positions:
        if pos.id == position_id:
            return pos
    return None


def position_pnl(portfolio: PortfolioState, position_id: str) -> float:
    """Unrealized P&L of an open position as last marked; 0 if not open."""
    pos = get_position(portfolio, position_id)
    return pos.unrealized_pnl if pos is not None else 0.0


def hedgeable_value(portfolio: PortfolioState) -> float:
    """Marked dollar value of all non-hedge positions."""
    return sum(p.size_in_dollars + p.unrealized_pnl for p in portfolio.positions if not p.is_hedge)


def largest_position_id(portfolio: PortfolioState) -> Optional[str]:
    """Id of the non-hedge position with the largest marked value, None if there is none."""
    candidates = [p for p in portfolio.positions if not p.is_hedge]
    if not candidates:
        return None
    return max(candidates, key=lambda p: p.size_in_dollars + p.unrealized_pnl).id


def open_position(
    portfolio: PortfolioState,
    direction: Direction,
    size: float,
    current_price: float,
    current_index: int,
    timestamp: str,
    leverage: float = 1.0,
    options: Optional[OpenPositionOptions] = None,
) -> PortfolioState:
    """
    Open a position worth size * cash (size is a fraction of cash, not equity).
    The dollar value leaves cash immediately.
    """
    options = options or OpenPositionOptions()
    position_value = portfolio.cash * size
    if position_value <= 0:
        logger.debug("Open ignored: position value %.2f <= 0 (size=%s, cash=%.2f)", position_value, size, portfolio.cash)
        return portfolio
    if current_price <= 0:
        logger.debug("Open ignored: non-positive price %s", current_price)
        return portfolio

    seq = portfolio.next_position_seq
    position = Position(
        id=options.position_id or f"pos_{seq}",
        direction=direction,
        entry_price=current_price,
        entry_index=current_index,
        entry_time=timestamp,
        size=size,
        size_in_dollars=position_value,
        current_price=current_price,
        leverage=max(0.0, leverage),
        instrument=options.instrument,
        is_hedge=options.is_hedge,
        beta=options.beta,
        hedges_position_id=options.hedges_position_id,
    )
    logger.info(
        "Opened %s %s $%.2f @ %.4f (lev=%.2fx, tick=%d)",
        position.id, direction.value, position_value, current_price, position.leverage, current_index,
    )
    return replace(
        portfolio,
        positions=portfolio.positions + (position,),
        cash=portfolio.cash - position_value,
        total_exposure=portfolio.total_exposure + size,
        next_position_seq=seq + 1,
    )


def add_hedge_position(portfolio: PortfolioState, position: Position, cost_paid: float) -> PortfolioState:
    """
    Book a hedge position sized by the hedge subsystem.
    Its dollar value and the transaction cost both leave cash.
    """
    if position.size_in_dollars <= 0 or position.entry_price <= 0:
        logger.debug("Hedge position %s ignored: nothing to book", position.id)
        return portfolio
    return replace(
        portfolio,
        positions=portfolio.positions + (position,),
        cash=portfolio.cash - position.size_in_dollars - cost_paid,
        total_exposure=portfolio.total_exposure + position.size,
        total_hedge_cost=portfolio.total_hedge_cost + cost_paid,
    )


def close_position_by_id(
    portfolio: PortfolioState,
    position_id: str,
    current_price: float,
    current_index: int,
) -> PortfolioState:
    """Realize one position at current_price. Unknown id returns portfolio unchanged."""
    position = get_position(portfolio, position_id)
    if position is None:
        logger.debug("Close ignored: no open position %s", position_id)
        return portfolio

    closed = close_record(position, current_price, current_index)
    logger.info(
        "Closed %s %s @ %.4f pnl=%.2f (%.2f%%) held=%d",
        position.id, position.direction.value, current_price,
        closed.realized_pnl, closed.realized_pnl_percent, closed.holding_period,
    )
    return replace(
        portfolio,
        positions=tuple(p for p in portfolio.positions if p.id != position_id),
        closed_positions=portfolio.closed_positions + (closed,),
        cash=portfolio.cash + position.size_in_dollars + closed.realized_pnl,
        total_exposure=portfolio.total_exposure - position.size,
        total_realized_pnl=portfolio.total_realized_pnl + closed.realized_pnl,
    )


def close_all_positions(portfolio: PortfolioState, current_price: float, current_index: int) -> PortfolioState:
    """Close every open position, iterating a snapshot of the pre-close list."""
    updated = portfolio
    for position in portfolio.positions:
        updated = close_position_by_id(updated, position.id, current_price, current_index)
    return updated


def update_portfolio(
    portfolio: PortfolioState,
    current_price: float,
    current_index: int,
    timestamp: str,
    market: Optional[MarketIndicators] = None,
    max_leverage: float = DEFAULT_MAX_LEVERAGE,
) -> PortfolioState:
    """
    Mark every position to current_price and recompute aggregate metrics.
    Order: unrealized -> exposure -> equity -> return -> peak -> drawdown
    -> max drawdown -> recovery -> raw stress -> stress -> margin usage.
    """
    positions = tuple(mark_to_market(p, current_price) for p in portfolio.positions)

    total_unrealized = sum(p.unrealized_pnl for p in positions)
    total_exposure = sum(p.size for p in positions)
    total_position_value = sum(p.size_in_dollars for p in positions)
    equity = portfolio.cash + total_position_value + total_unrealized

    # Realized P&L is already in cash
    return_dollar = equity - portfolio.initial_capital
    return_pct = return_dollar / portfolio.initial_capital * 100 if portfolio.initial_capital else 0.0

    peak_equity = max(portfolio.peak_equity, equity)
    drawdown = (peak_equity - equity) / peak_equity if peak_equity > 0 else 0.0
    max_drawdown = max(portfolio.max_drawdown, drawdown)
    recovery_needed = calculate_recovery_needed(drawdown * 100) if drawdown > 0 else 0.0

    raw_stress = min(1.0, total_exposure * EXPOSURE_STRESS_WEIGHT + drawdown * DRAWDOWN_STRESS_WEIGHT)
    if total_unrealized < 0:
        stress_level = min(1.0, raw_stress * LOSS_AVERSION_MULTIPLIER)
    else:
        stress_level = raw_stress

    margin_usage = total_exposure / max_leverage if max_leverage > 0 else 0.0

    return replace(
        portfolio,
        positions=positions,
        equity=equity,
        total_exposure=total_exposure,
        total_unrealized_pnl=total_unrealized,
        accumulated_return=return_pct,
        accumulated_return_dollar=return_dollar,
        peak_equity=peak_equity,
        drawdown=drawdown,
        max_drawdown=max_drawdown,
        recovery_needed=recovery_needed,
        margin_usage=margin_usage,
        raw_stress=raw_stress,
        stress_level=stress_level,
        regime=market.regime if market is not None else portfolio.regime,
    )
