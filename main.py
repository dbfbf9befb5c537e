#!/usr/bin/env python3
"""
Market simulation CLI: replay a preprocessed candle file with scripted commands.
Usage:
  python main.py replay [--config config.yaml] [--candles data.csv] [--commands commands.yaml]
"""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict

# Project root
ROOT = Path(__file__).resolve().parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from market_sim.core.config import load_config
from market_sim.core.logger import setup_logging
from market_sim.backtesting.engine import SimulationEngine
from market_sim.data.loader import load_candles, load_commands
from market_sim.hedging.configs import HedgeType

logger = logging.getLogger("market_sim")


def apply_command(engine: SimulationEngine, cmd: Dict[str, Any]) -> None:
    """Apply one scripted command at the engine's current tick."""
    action = cmd["action"]
    if action == "open_long":
        engine.open_long(float(cmd.get("size", 0.5)), cmd.get("leverage"))
    elif action == "open_short":
        engine.open_short(float(cmd.get("size", 0.5)), cmd.get("leverage"))
    elif action == "close":
        engine.close_position_by_id(str(cmd["id"]))
    elif action == "close_all":
        engine.close_all_positions()
    elif action == "hedge":
        result = engine.activate_hedge(HedgeType(cmd.get("type", "basic")))
        if not result.success:
            logger.warning("Tick %d: hedge rejected: %s", engine.current_index, result.event.message)


def run_replay(config_path: Path | None, candles_path: Path | None, commands_path: Path | None) -> int:
    """Replay candles to the end, applying commands at their ticks."""
    config = load_config(config_path, ROOT)
    setup_logging(config.log_level, config.log_dir, config.log_file)
    candles_path = candles_path or config.candles_path
    commands_path = commands_path or config.commands_path
    if candles_path is None:
        logger.error("No candle file given. Use --candles or set CANDLES_PATH")
        return 1
    try:
        candles = load_candles(candles_path)
        commands = load_commands(commands_path) if commands_path else []
        engine = SimulationEngine(candles, config)
    except (OSError, ValueError) as e:
        logger.error("Cannot start replay: %s", e)
        return 1

    for cmd in commands:
        engine.advance_to(int(cmd["tick"]))
        apply_command(engine, cmd)
    engine.run_to_end()

    s = engine.statistics()
    m = engine.performance()
    p = engine.portfolio
    print("\n--- Replay Results ---")
    print(f"Ticks processed: {len(engine.tick_history)}")
    print(f"Total trades: {s.total_trades} (wins: {s.winning_trades}, losses: {s.losing_trades})")
    print(f"Final equity: {s.final_equity:.2f}")
    print(f"Total return: {s.total_return_pct:.2f}%")
    print(f"Realized P&L: {s.total_pnl:.2f} ({s.total_pnl_pct:.2f}%)")
    print(f"Max drawdown: {s.max_drawdown_pct:.2f}%")
    print(f"Win rate: {s.win_rate*100:.1f}%")
    print(f"Profit factor: {s.profit_factor:.2f}")
    print(f"Sharpe: {m.sharpe_ratio:.2f} | Sortino: {m.sortino_ratio:.2f}")
    print(f"Hedge costs paid: {s.hedge_cost_paid:.2f}")
    print(f"Open positions: {len(p.positions)} | Stress: {p.stress_level:.2f} | Regime: {p.regime.value}")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Market simulation CLI")
    parser.add_argument("mode", choices=["replay"], help="Replay a candle file")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.yaml")
    parser.add_argument("--candles", type=Path, default=None, help="Preprocessed candle file (.csv/.json)")
    parser.add_argument("--commands", type=Path, default=None, help="YAML command script")
    args = parser.parse_args()
    return run_replay(args.config, args.candles, args.commands)


if __name__ == "__main__":
    exit(main())
