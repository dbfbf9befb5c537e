"""
Market indicators and regime classification from preprocessed candles.

Input DataFrame columns: date, open, high, low, close, volume, daily_return,
intraday_volatility, true_range, rolling_volatility, index. Values at row i
use only rows 0..i (no lookahead).
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from market_sim.core.types import NEUTRAL_INDICATORS, MarketIndicators, MarketRegime

RSI_LOOKBACK = 14
MA_LOOKBACK = 20
RS_WHEN_NO_LOSSES = 100.0


def classify_regime(trend: float, rsi: float, drawdown: float) -> MarketRegime:
    """First match wins: BULL, BEAR, CRASH, RECOVERY, else CHOP."""
    if trend > 5 and rsi > 50:
        return MarketRegime.BULL
    if trend < -5 and rsi < 50:
        return MarketRegime.BEAR
    if drawdown > 20:
        return MarketRegime.CRASH
    if trend > 0 and drawdown > 10:
        return MarketRegime.RECOVERY
    return MarketRegime.CHOP


def rsi_from_returns(window_returns: np.ndarray, lookback: int) -> float:
    """
    RSI over a window of daily returns (percent). The first return in the
    window is the anchor and is not counted; averages divide by lookback.
    """
    changes = window_returns[1:]
    gains = changes[changes > 0].sum()
    losses = -changes[changes < 0].sum()
    avg_gain = gains / lookback
    avg_loss = losses / lookback
    rs = RS_WHEN_NO_LOSSES if avg_loss == 0 else avg_gain / avg_loss
    return float(100 - 100 / (1 + rs))


def calculate_indicators(candles: pd.DataFrame, index: int) -> MarketIndicators:
    """Indicators at row `index`. Out-of-range index returns neutral defaults."""
    if index < 0 or index >= len(candles):
        return NEUTRAL_INDICATORS

    close = candles["close"].to_numpy(dtype=float)
    current_close = close[index]

    lookback = min(RSI_LOOKBACK, index + 1)
    start = index - lookback + 1
    rsi = rsi_from_returns(candles["daily_return"].to_numpy(dtype=float)[start: index + 1], lookback)
    atr = float(candles["true_range"].to_numpy(dtype=float)[start: index + 1].mean())

    volatility = float(candles["rolling_volatility"].iloc[index])

    ma_lookback = min(MA_LOOKBACK, index + 1)
    ma = close[index - ma_lookback + 1: index + 1].mean()
    trend = float((current_close - ma) / ma * 100) if ma else 0.0

    max_high = candles["high"].to_numpy(dtype=float)[: index + 1].max()
    drawdown = float((max_high - current_close) / max_high * 100) if max_high else 0.0

    return MarketIndicators(
        rsi=rsi,
        atr=atr,
        volatility=volatility,
        trend=trend,
        drawdown=drawdown,
        regime=classify_regime(trend, rsi, drawdown),
    )
