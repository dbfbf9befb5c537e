"""Hedging: time-boxed protective short positions."""

from market_sim.hedging.configs import (
    HEDGE_CONFIGS,
    HedgeActivatedEvent,
    HedgeConfig,
    HedgeExpiredEvent,
    HedgeFailedEvent,
    HedgeFailureReason,
    HedgeResult,
    HedgeState,
    HedgeType,
    ProcessHedgeResult,
    SkillState,
)
from market_sim.hedging.hedge import (
    activate_hedge,
    can_activate_hedge,
    get_active_hedge_coverage,
    get_available_hedge_types,
    get_effective_hedge_ratio,
    get_total_hedge_cost,
    get_total_hedge_size,
    process_hedges,
)

__all__ = [
    "HEDGE_CONFIGS",
    "HedgeActivatedEvent",
    "HedgeConfig",
    "HedgeExpiredEvent",
    "HedgeFailedEvent",
    "HedgeFailureReason",
    "HedgeResult",
    "HedgeState",
    "HedgeType",
    "ProcessHedgeResult",
    "SkillState",
    "activate_hedge",
    "can_activate_hedge",
    "get_active_hedge_coverage",
    "get_available_hedge_types",
    "get_effective_hedge_ratio",
    "get_total_hedge_cost",
    "get_total_hedge_size",
    "process_hedges",
]
