"""
Load simulation settings from config.yaml, overlaid with .env / environment.
"""

from __future__ import annotations
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv


def _env_path(project_root: Optional[Path] = None) -> Path:
    root = project_root or Path(__file__).resolve().parents[2]
    return root / ".env"


def load_dotenv_if_exists(project_root: Optional[Path] = None) -> None:
    """Load .env from project root if present."""
    path = _env_path(project_root)
    if path.exists():
        load_dotenv(path)


def load_config(config_path: Optional[Path] = None, project_root: Optional[Path] = None) -> "Config":
    """Load config.yaml and overlay with env. Returns Config."""
    load_dotenv_if_exists(project_root)
    root = project_root or Path(__file__).resolve().parents[2]
    path = config_path or root / "config.yaml"
    data: dict[str, Any] = {}
    if path.exists():
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

    def env(key: str, default: str = "") -> str:
        return os.getenv(key, default or "").strip()

    def env_int(key: str, default: int = 0) -> int:
        try:
            return int(os.getenv(key, str(default)))
        except ValueError:
            return default

    def env_float(key: str, default: float = 0.0) -> float:
        try:
            return float(os.getenv(key, str(default)))
        except ValueError:
            return default

    portfolio = data.get("portfolio", {})
    hedging = data.get("hedging", {})
    replay = data.get("replay", {})
    logging_cfg = data.get("logging", {})

    candles_path = env("CANDLES_PATH", replay.get("candles_path", ""))
    commands_path = env("COMMANDS_PATH", replay.get("commands_path", ""))

    return Config(
        # Portfolio
        initial_capital=env_float("INITIAL_CAPITAL", portfolio.get("initial_capital", 10000.0)),
        max_leverage=env_float("MAX_LEVERAGE", portfolio.get("max_leverage", 3.0)),
        min_leverage=env_float("MIN_LEVERAGE", portfolio.get("min_leverage", 0.5)),
        default_leverage=env_float("DEFAULT_LEVERAGE", portfolio.get("default_leverage", 1.0)),
        # Hedging / player progression
        max_hedges=env_int("MAX_HEDGES", hedging.get("max_hedges", 2)),
        player_level=env_int("PLAYER_LEVEL", hedging.get("player_level", 1)),
        hedge_cost_reduction=env_float("HEDGE_COST_REDUCTION", hedging.get("cost_reduction", 0.0)),
        hedge_cooldown_reduction=env_int("HEDGE_COOLDOWN_REDUCTION", hedging.get("cooldown_reduction", 0)),
        # Replay inputs
        candles_path=Path(candles_path) if candles_path else None,
        commands_path=Path(commands_path) if commands_path else None,
        # Logging
        log_level=env("LOG_LEVEL", logging_cfg.get("level", "INFO")),
        log_dir=Path(logging_cfg.get("log_dir", "logs")),
        log_file=logging_cfg.get("log_file", "market_sim.log"),
    )


class Config:
    """Runtime configuration. Paths are resolved by the caller."""

    def __init__(
        self,
        initial_capital: float = 10000.0,
        max_leverage: float = 3.0,
        min_leverage: float = 0.5,
        default_leverage: float = 1.0,
        max_hedges: int = 2,
        player_level: int = 1,
        hedge_cost_reduction: float = 0.0,
        hedge_cooldown_reduction: int = 0,
        candles_path: Optional[Path] = None,
        commands_path: Optional[Path] = None,
        log_level: str = "INFO",
        log_dir: Optional[Path] = None,
        log_file: str = "market_sim.log",
    ):
        self.initial_capital = initial_capital
        self.max_leverage = max_leverage
        self.min_leverage = min_leverage
        self.default_leverage = default_leverage
        self.max_hedges = max_hedges
        self.player_level = player_level
        self.hedge_cost_reduction = hedge_cost_reduction
        self.hedge_cooldown_reduction = hedge_cooldown_reduction
        self.candles_path = candles_path
        self.commands_path = commands_path
        self.log_level = log_level
        self.log_dir = Path(log_dir) if log_dir else Path("logs")
        self.log_file = log_file
