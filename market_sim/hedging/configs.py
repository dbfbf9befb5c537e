"""
Hedge types, their fixed parameters, and the skill/hedge state records.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from market_sim.core.types import Position


class HedgeType(str, Enum):
    BASIC = "basic"
    TIGHT = "tight"
    TAIL = "tail"
    DYNAMIC = "dynamic"


class HedgeFailureReason(str, Enum):
    LOCKED = "locked"
    COOLDOWN = "cooldown"
    MAX_HEDGES = "max_hedges"
    NO_POSITION = "no_position"
    INSUFFICIENT_FUNDS = "insufficient_funds"


@dataclass(frozen=True)
class HedgeConfig:
    """
    beta: fraction of position value shorted (hedge_size = value * beta)
    cost: transaction cost as a fraction of hedge size
    duration / cooldown: in candles
    """
    type: HedgeType
    name: str
    description: str
    beta: float
    cost: float
    duration: int
    cooldown: int
    unlock_level: int


HEDGE_CONFIGS: Dict[HedgeType, HedgeConfig] = {
    HedgeType.BASIC: HedgeConfig(
        type=HedgeType.BASIC,
        name="Basic Hedge",
        description="Short index at 70% of position - moderate protection",
        beta=0.70, cost=0.005, duration=5, cooldown=5, unlock_level=1,
    ),
    HedgeType.TIGHT: HedgeConfig(
        type=HedgeType.TIGHT,
        name="Tight Hedge",
        description="Short index at 90% - near-full protection",
        beta=0.90, cost=0.008, duration=3, cooldown=4, unlock_level=5,
    ),
    HedgeType.TAIL: HedgeConfig(
        type=HedgeType.TAIL,
        name="Tail Hedge",
        description="Short index at 50% - cheap partial protection",
        beta=0.50, cost=0.003, duration=10, cooldown=8, unlock_level=10,
    ),
    HedgeType.DYNAMIC: HedgeConfig(
        type=HedgeType.DYNAMIC,
        name="Dynamic Hedge",
        description="Short index at 75% - balanced protection",
        beta=0.75, cost=0.006, duration=7, cooldown=3, unlock_level=15,
    ),
}

MIN_COST_RATE = 0.001
MIN_HEDGEABLE_VALUE = 100.0
MAX_COST_FRACTION_OF_PORTFOLIO = 0.05


@dataclass(frozen=True)
class HedgeState:
    """One active protective short, backed by a real position (position_id)."""
    is_active: bool
    type: HedgeType
    position_id: str
    beta: float
    hedge_size: float
    entry_price: float
    cost_paid: float
    remaining_candles: int
    activated_at: int
    hedges_position_id: Optional[str] = None


@dataclass(frozen=True)
class SkillState:
    """Hedge governance: cooldown, concurrency cap, level gates, upgrades."""
    active_hedges: Tuple[HedgeState, ...] = ()
    hedge_cooldown: int = 0
    max_hedges: int = 2
    player_level: int = 1
    skill_points: int = 0
    hedge_cost_reduction: float = 0.0
    hedge_cooldown_reduction: int = 0
    last_message: Optional[str] = None
    hedges_activated: int = 0


# Events


@dataclass(frozen=True)
class HedgeActivatedEvent:
    hedge: HedgeState
    cost_paid: float
    message: str


@dataclass(frozen=True)
class HedgeExpiredEvent:
    hedge: HedgeState
    position_id: str
    realized_pnl: float
    was_useful: bool
    message: str


@dataclass(frozen=True)
class HedgeFailedEvent:
    reason: HedgeFailureReason
    message: str


@dataclass(frozen=True)
class HedgeResult:
    """Outcome of an activation attempt. new_state is unchanged on failure."""
    success: bool
    event: object
    new_state: SkillState
    new_position: Optional[Position] = None

    @property
    def reason(self) -> Optional[HedgeFailureReason]:
        return self.event.reason if isinstance(self.event, HedgeFailedEvent) else None


@dataclass(frozen=True)
class ProcessHedgeResult:
    """Per-tick hedge countdown outcome. The caller closes hedges_to_close."""
    hedges_to_close: List[str]
    hedges_expired: List[HedgeState]
    events: List[HedgeExpiredEvent]
    new_state: SkillState
