"""Portfolio: position model and ledger."""

from market_sim.portfolio.position import mark_to_market, close_record
from market_sim.portfolio.ledger import (
    LOSS_AVERSION_MULTIPLIER,
    OpenPositionOptions,
    PortfolioState,
    add_hedge_position,
    calculate_recovery_needed,
    close_all_positions,
    close_position_by_id,
    create_portfolio,
    get_position,
    hedgeable_value,
    largest_position_id,
    open_position,
    position_pnl,
    update_portfolio,
)

__all__ = [
    "mark_to_market",
    "close_record",
    "LOSS_AVERSION_MULTIPLIER",
    "OpenPositionOptions",
    "PortfolioState",
    "add_hedge_position",
    "calculate_recovery_needed",
    "close_all_positions",
    "close_position_by_id",
    "create_portfolio",
    "get_position",
    "hedgeable_value",
    "largest_position_id",
    "open_position",
    "position_pnl",
    "update_portfolio",
]
