"""
Load preprocessed candle files (CSV / JSON) and replay command scripts (YAML).
Candles must already carry daily_return, intraday_volatility, true_range
and rolling_volatility; nothing is derived here.
"""

from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd
import yaml

from market_sim.hedging.configs import HedgeType

logger = logging.getLogger("market_sim.data")

REQUIRED_COLUMNS = (
    "date", "open", "high", "low", "close", "volume",
    "daily_return", "intraday_volatility", "true_range", "rolling_volatility",
)

# Datasets exported by the data pipeline use camelCase keys
COLUMN_ALIASES = {
    "dailyReturn": "daily_return",
    "intradayVolatility": "intraday_volatility",
    "trueRange": "true_range",
    "rollingVolatility": "rolling_volatility",
}

COMMAND_ACTIONS = ("open_long", "open_short", "close", "close_all", "hedge")
HEDGE_TYPES = tuple(t.value for t in HedgeType)


def _read_json(path: Path) -> pd.DataFrame:
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    # Either a bare list of candles or a dataset object with a "data" list
    if isinstance(payload, dict):
        payload = payload.get("data", [])
    return pd.DataFrame(payload)


def load_candles(path: Union[str, Path]) -> pd.DataFrame:
    """Read a preprocessed candle file into a DataFrame sorted by index."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Candle file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".csv":
        df = pd.read_csv(path)
    elif suffix == ".json":
        df = _read_json(path)
    else:
        raise ValueError(f"Unsupported candle file type: {suffix}")

    df = df.rename(columns=COLUMN_ALIASES)
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Candle file {path.name} missing columns: {', '.join(missing)}")
    if "index" not in df.columns:
        df["index"] = range(len(df))
    df["date"] = df["date"].astype(str)
    df = df.sort_values("index").reset_index(drop=True)
    logger.info("Loaded %d candles from %s", len(df), path)
    return df


def load_commands(path: Union[str, Path]) -> List[Dict[str, Any]]:
    """
    Read a YAML list of player commands, e.g.
      - {tick: 5, action: open_long, size: 0.5, leverage: 2}
      - {tick: 9, action: hedge, type: basic}
    Returned sorted by tick (stable, so same-tick order is kept).
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        commands = yaml.safe_load(f) or []
    if not isinstance(commands, list):
        raise ValueError(f"Command file {path.name} must contain a list")
    for cmd in commands:
        if cmd.get("action") not in COMMAND_ACTIONS:
            raise ValueError(f"Unknown command action: {cmd.get('action')!r}")
        if "tick" not in cmd:
            raise ValueError(f"Command without tick: {cmd}")
        if cmd["action"] == "hedge" and cmd.get("type", HedgeType.BASIC.value) not in HEDGE_TYPES:
            raise ValueError(f"Unknown hedge type: {cmd.get('type')!r}")
    return sorted(commands, key=lambda c: int(c["tick"]))
