"""Unit tests for analytics.indicators."""

import pandas as pd
import pytest
from market_sim.analytics.indicators import calculate_indicators, classify_regime
from market_sim.core.types import NEUTRAL_INDICATORS, MarketRegime


def _candles(closes, returns=None, true_range=None):
    """Candles with high == low == open == close unless a true_range is supplied."""
    n = len(closes)
    if returns is None:
        returns = [0.0] + [(closes[i] / closes[i - 1] - 1) * 100 for i in range(1, n)]
    return pd.DataFrame({
        "date": [f"2020-01-{i + 1:02d}" for i in range(n)],
        "open": closes,
        "high": closes,
        "low": closes,
        "close": closes,
        "volume": [1000.0] * n,
        "daily_return": returns,
        "intraday_volatility": [0.0] * n,
        "true_range": true_range if true_range is not None else [1.0] * n,
        "rolling_volatility": [0.02] * n,
        "index": list(range(n)),
    })


def test_out_of_range_index_is_neutral():
    df = _candles([100.0, 101.0])
    assert calculate_indicators(df, -1) == NEUTRAL_INDICATORS
    assert calculate_indicators(df, 2) == NEUTRAL_INDICATORS
    assert NEUTRAL_INDICATORS.rsi == 50.0
    assert NEUTRAL_INDICATORS.regime == MarketRegime.CHOP


def test_first_candle_has_no_losses():
    ind = calculate_indicators(_candles([100.0, 101.0]), 0)
    assert ind.rsi == pytest.approx(100 - 100 / 101)
    assert ind.trend == 0.0
    assert ind.drawdown == 0.0


def test_rising_market_is_bull():
    closes = [100 * 1.05 ** i for i in range(20)]
    ind = calculate_indicators(_candles(closes, returns=[5.0] * 20), 19)
    assert ind.rsi > 99
    assert ind.trend > 5
    assert ind.regime == MarketRegime.BULL


def test_falling_market_is_bear():
    closes = [100 * 0.95 ** i for i in range(20)]
    ind = calculate_indicators(_candles(closes, returns=[-5.0] * 20), 19)
    assert ind.rsi == pytest.approx(0.0)
    assert ind.trend < -5
    assert ind.regime == MarketRegime.BEAR


def test_flat_after_gap_down_is_crash():
    df = _candles([100.0] * 10 + [70.0] * 20)
    ind = calculate_indicators(df, 29)
    assert ind.trend == pytest.approx(0.0)
    assert ind.drawdown == pytest.approx(30.0)
    assert ind.regime == MarketRegime.CRASH


def test_bounce_in_moderate_drawdown_is_recovery():
    df = _candles([100.0] * 10 + [85.0] * 20 + [86.0])
    ind = calculate_indicators(df, 30)
    assert 0 < ind.trend < 5
    assert ind.drawdown == pytest.approx(14.0)
    assert ind.regime == MarketRegime.RECOVERY


def test_rsi_skips_first_return_and_divides_by_lookback():
    df = _candles([100.0, 101.0, 100.0, 102.0], returns=[9.0, 1.0, -1.0, 2.0])
    # gains 3 / losses 1 over the same lookback -> rs 3
    assert calculate_indicators(df, 3).rsi == pytest.approx(75.0)


def test_atr_is_mean_true_range():
    df = _candles([100.0] * 4, true_range=[1.0, 2.0, 3.0, 6.0])
    assert calculate_indicators(df, 3).atr == pytest.approx(3.0)
    assert calculate_indicators(df, 1).atr == pytest.approx(1.5)


def test_no_lookahead():
    closes = [100.0, 102.0, 101.0, 103.0, 104.0]
    full = _candles(closes)
    prefix = _candles(closes[:3])
    assert calculate_indicators(full, 2) == calculate_indicators(prefix, 2)


def test_classify_regime_precedence():
    assert classify_regime(6, 60, 30) == MarketRegime.BULL
    assert classify_regime(-6, 40, 30) == MarketRegime.BEAR
    assert classify_regime(-6, 60, 25) == MarketRegime.CRASH
    assert classify_regime(2, 40, 15) == MarketRegime.RECOVERY
    assert classify_regime(0, 50, 15) == MarketRegime.CHOP
    assert classify_regime(6, 50, 5) == MarketRegime.CHOP
