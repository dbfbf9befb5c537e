"""Unit tests for backtesting.tick."""

import pytest
from market_sim.backtesting.tick import (
    CandlePattern,
    create_backtest_tick,
    detect_candle_pattern,
    return_to_slope,
)
from market_sim.core.types import Direction, MarketIndicators, MarketRegime
from market_sim.portfolio.ledger import create_portfolio, open_position, update_portfolio


def _candle(o, h, l, c, daily_return=0.0):
    return {"open": o, "high": h, "low": l, "close": c, "daily_return": daily_return}


@pytest.mark.parametrize(
    "daily_return, slope",
    [
        (0.0, 0), (4.0, 32), (10.0, 32), (-2.0, -16), (1.0, 0), (1.5, 16), (-4.0, -32), (-9.0, -32),
        # half-way slopes (8.5, 24.5) round up
        (1.0625, 16), (3.0625, 32),
    ],
)
def test_return_to_slope(daily_return, slope):
    assert return_to_slope(daily_return) == slope


def test_zero_range_candle_is_neutral():
    assert detect_candle_pattern(_candle(100, 100, 100, 100)) == CandlePattern.NEUTRAL


def test_doji():
    assert detect_candle_pattern(_candle(100, 105, 95, 100.5)) == CandlePattern.DOJI


def test_marubozu():
    assert detect_candle_pattern(_candle(100, 110, 100, 110)) == CandlePattern.MARUBOZU_BULL
    assert detect_candle_pattern(_candle(110, 110, 100, 100)) == CandlePattern.MARUBOZU_BEAR


def test_hammer_and_shooting_star():
    assert detect_candle_pattern(_candle(108, 110.5, 100, 110)) == CandlePattern.HAMMER
    assert detect_candle_pattern(_candle(102, 110, 99.5, 100)) == CandlePattern.SHOOTING_STAR


def test_engulfing_needs_previous_candle():
    prev = _candle(105, 106, 99, 100)
    cur = _candle(99, 108, 97, 106)
    assert detect_candle_pattern(cur, prev) == CandlePattern.BULLISH_ENGULFING
    assert detect_candle_pattern(cur) == CandlePattern.NEUTRAL

    prev = _candle(100, 106, 99, 105)
    cur = _candle(106, 108, 97, 99)
    assert detect_candle_pattern(cur, prev) == CandlePattern.BEARISH_ENGULFING


def test_create_backtest_tick():
    p = open_position(create_portfolio(10000.0), Direction.LONG, 0.5, 100.0, 0, "2020-01-01")
    p = update_portfolio(p, 110.0, 1, "2020-01-02")
    ind = MarketIndicators(rsi=70.0, regime=MarketRegime.BULL)
    tick = create_backtest_tick(1, "2020-01-02", 110.0, p, ind, _candle(100, 110, 100, 110, daily_return=4.0))
    assert tick.index == 1
    assert tick.price == 110.0
    assert tick.portfolio_value == pytest.approx(10500.0)
    assert tick.accumulated_return == pytest.approx(5.0)
    assert tick.road_height == pytest.approx(50.0)
    assert tick.slope == 32
    assert tick.pattern == CandlePattern.MARUBOZU_BULL
    assert tick.indicators is ind


def test_create_backtest_tick_without_candle():
    tick = create_backtest_tick(0, "t", 100.0, create_portfolio(), MarketIndicators())
    assert tick.slope == 0
    assert tick.pattern == CandlePattern.NEUTRAL
    assert tick.road_height == 0.0
