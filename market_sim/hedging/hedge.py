"""
Hedge skill: a hedge is a real SHORT position on the index instrument.

Its P&L comes from the same mark-to-market as every other position; this
module only sizes the short, charges the transaction cost, counts down its
duration and enforces cooldown / concurrency / unlock rules.
"""

from __future__ import annotations
import logging
from dataclasses import replace
from typing import Callable, List, Optional

from market_sim.core.types import Direction, Instrument, Position
from market_sim.hedging.configs import (
    HEDGE_CONFIGS,
    MAX_COST_FRACTION_OF_PORTFOLIO,
    MIN_COST_RATE,
    MIN_HEDGEABLE_VALUE,
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

logger = logging.getLogger("market_sim.hedging")


def _failed(skill_state: SkillState, reason: HedgeFailureReason, message: str) -> HedgeResult:
    logger.info("Hedge rejected (%s): %s", reason.value, message)
    return HedgeResult(
        success=False,
        event=HedgeFailedEvent(reason=reason, message=message),
        new_state=skill_state,
    )


def effective_cost_rate(config: HedgeConfig, cost_reduction: float) -> float:
    """Base cost minus upgrades, never below the 0.1% floor."""
    return max(MIN_COST_RATE, config.cost - cost_reduction)


def effective_cooldown(config: HedgeConfig, cooldown_reduction: int) -> int:
    return max(1, config.cooldown - cooldown_reduction)


def activate_hedge(
    hedge_type: HedgeType,
    current_price: float,
    position_value: float,
    portfolio_value: float,
    current_tick: int,
    skill_state: SkillState,
    timestamp: str = "",
    hedges_position_id: Optional[str] = None,
) -> HedgeResult:
    """
    Size a short index position at abs(position_value) * beta.
    Checks run in a fixed order (locked, cooldown, max hedges, no position,
    insufficient funds); the first failing check is reported.
    """
    config = HEDGE_CONFIGS[HedgeType(hedge_type)]

    if skill_state.player_level < config.unlock_level:
        return _failed(
            skill_state, HedgeFailureReason.LOCKED,
            f"{config.name} unlocks at level {config.unlock_level}",
        )
    if skill_state.hedge_cooldown > 0:
        return _failed(
            skill_state, HedgeFailureReason.COOLDOWN,
            f"Hedge on cooldown: {skill_state.hedge_cooldown} candles remaining",
        )
    if len(skill_state.active_hedges) >= skill_state.max_hedges:
        return _failed(
            skill_state, HedgeFailureReason.MAX_HEDGES,
            f"Maximum {skill_state.max_hedges} hedges active",
        )
    if abs(position_value) < MIN_HEDGEABLE_VALUE:
        return _failed(skill_state, HedgeFailureReason.NO_POSITION, "No significant position to hedge")

    hedge_size = abs(position_value) * config.beta
    cost_paid = hedge_size * effective_cost_rate(config, skill_state.hedge_cost_reduction)
    if cost_paid > portfolio_value * MAX_COST_FRACTION_OF_PORTFOLIO:
        return _failed(
            skill_state, HedgeFailureReason.INSUFFICIENT_FUNDS,
            f"Hedge cost ${cost_paid:.0f} exceeds 5% of portfolio",
        )

    seq = skill_state.hedges_activated + 1
    position_id = f"hedge_{seq}"
    hedge = HedgeState(
        is_active=True,
        type=config.type,
        position_id=position_id,
        beta=config.beta,
        hedge_size=hedge_size,
        entry_price=current_price,
        cost_paid=cost_paid,
        remaining_candles=config.duration,
        activated_at=current_tick,
        hedges_position_id=hedges_position_id,
    )
    position = Position(
        id=position_id,
        direction=Direction.SHORT,
        entry_price=current_price,
        entry_index=current_tick,
        entry_time=timestamp,
        size=hedge_size / portfolio_value if portfolio_value > 0 else 0.0,
        size_in_dollars=hedge_size,
        current_price=current_price,
        instrument=Instrument.INDEX,
        is_hedge=True,
        beta=config.beta,
        hedges_position_id=hedges_position_id,
    )
    message = (
        f"{config.name} activated! SHORT ${hedge_size:.0f} on index (beta={config.beta}) "
        f"| Cost: ${cost_paid:.0f} | Duration: {config.duration} candles"
    )
    logger.info(message)
    return HedgeResult(
        success=True,
        event=HedgeActivatedEvent(hedge=hedge, cost_paid=cost_paid, message=message),
        new_state=replace(
            skill_state,
            active_hedges=skill_state.active_hedges + (hedge,),
            last_message=message,
            hedges_activated=seq,
        ),
        new_position=position,
    )


def _expiry_message(realized_pnl: float, cost_paid: float) -> str:
    if realized_pnl > 0:
        return (
            f"Hedge closed with profit: ${realized_pnl:.0f} | Cost: ${cost_paid:.0f} "
            f"| Net: ${realized_pnl - cost_paid:.0f}"
        )
    return (
        f"Hedge closed with loss: ${realized_pnl:.0f} | Cost: ${cost_paid:.0f} "
        f"| Total cost: ${cost_paid - realized_pnl:.0f}"
    )


def process_hedges(
    current_tick: int,
    current_price: float,
    skill_state: SkillState,
    get_position_pnl: Optional[Callable[[str], float]] = None,
) -> ProcessHedgeResult:
    """
    Count down every active hedge by one candle. Expired hedges are returned
    in hedges_to_close; the caller must close those positions in the ledger.
    """
    hedges_to_close: List[str] = []
    expired: List[HedgeState] = []
    events: List[HedgeExpiredEvent] = []
    remaining: List[HedgeState] = []
    cooldown = skill_state.hedge_cooldown

    for hedge in skill_state.active_hedges:
        updated = replace(hedge, remaining_candles=hedge.remaining_candles - 1)
        if updated.remaining_candles > 0:
            remaining.append(updated)
            continue
        updated = replace(updated, is_active=False)
        expired.append(updated)
        hedges_to_close.append(hedge.position_id)
        realized_pnl = get_position_pnl(hedge.position_id) if get_position_pnl else 0.0
        events.append(HedgeExpiredEvent(
            hedge=updated,
            position_id=hedge.position_id,
            realized_pnl=realized_pnl,
            was_useful=realized_pnl > 0,
            message=_expiry_message(realized_pnl, hedge.cost_paid),
        ))
        cooldown = max(cooldown, effective_cooldown(HEDGE_CONFIGS[hedge.type], skill_state.hedge_cooldown_reduction))
        logger.info("Hedge %s expired at tick %d (pnl=%.2f)", hedge.position_id, current_tick, realized_pnl)

    if not expired and cooldown > 0:
        cooldown -= 1

    return ProcessHedgeResult(
        hedges_to_close=hedges_to_close,
        hedges_expired=expired,
        events=events,
        new_state=replace(
            skill_state,
            active_hedges=tuple(remaining),
            hedge_cooldown=cooldown,
            last_message=events[-1].message if events else skill_state.last_message,
        ),
    )


def get_available_hedge_types(player_level: int) -> List[HedgeConfig]:
    return [c for c in HEDGE_CONFIGS.values() if c.unlock_level <= player_level]


def can_activate_hedge(skill_state: SkillState) -> bool:
    return skill_state.hedge_cooldown <= 0 and len(skill_state.active_hedges) < skill_state.max_hedges


def get_active_hedge_coverage(skill_state: SkillState) -> float:
    """Highest beta among active hedges."""
    if not skill_state.active_hedges:
        return 0.0
    return max(h.beta for h in skill_state.active_hedges)


def get_total_hedge_size(skill_state: SkillState) -> float:
    return sum(h.hedge_size for h in skill_state.active_hedges)


def get_total_hedge_cost(skill_state: SkillState) -> float:
    return sum(h.cost_paid for h in skill_state.active_hedges)


def get_effective_hedge_ratio(skill_state: SkillState) -> float:
    """Sum of active betas. Above 1 means over-hedged."""
    return sum(h.beta for h in skill_state.active_hedges)
