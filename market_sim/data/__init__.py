"""Data: preprocessed candle and command-script loading."""

from market_sim.data.loader import load_candles, load_commands, REQUIRED_COLUMNS

__all__ = ["load_candles", "load_commands", "REQUIRED_COLUMNS"]
