"""
Position model: mark-to-market and conversion to a closed record.
"""

from __future__ import annotations
from dataclasses import replace

from market_sim.core.types import ClosedPosition, Position


def mark_to_market(position: Position, current_price: float) -> Position:
    """
    Return a copy of the position valued at current_price.
    P&L% = price change % * direction * leverage, applied to size_in_dollars.
    """
    price_diff_pct = (current_price - position.entry_price) / position.entry_price
    pnl_pct = price_diff_pct * 100 * position.direction.sign * position.leverage
    return replace(
        position,
        current_price=current_price,
        unrealized_pnl=position.size_in_dollars * pnl_pct / 100,
        unrealized_pnl_percent=pnl_pct,
    )


def close_record(position: Position, exit_price: float, exit_index: int) -> ClosedPosition:
    """Mark the position at exit_price and freeze it into a ClosedPosition."""
    marked = mark_to_market(position, exit_price)
    return ClosedPosition(
        id=position.id,
        direction=position.direction,
        entry_price=position.entry_price,
        entry_index=position.entry_index,
        entry_time=position.entry_time,
        exit_price=exit_price,
        exit_index=exit_index,
        size=position.size,
        size_in_dollars=position.size_in_dollars,
        leverage=position.leverage,
        realized_pnl=marked.unrealized_pnl,
        realized_pnl_percent=marked.unrealized_pnl_percent,
        holding_period=exit_index - position.entry_index,
        instrument=position.instrument,
        is_hedge=position.is_hedge,
        beta=position.beta,
        hedges_position_id=position.hedges_position_id,
    )
