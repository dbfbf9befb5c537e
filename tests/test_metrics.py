"""Unit tests for analytics.metrics."""

import pytest
from market_sim.analytics.metrics import (
    compute_metrics,
    expectancy,
    max_drawdown,
    period_returns,
    profit_factor,
    session_statistics,
    sharpe_ratio,
    sortino_ratio,
    win_rate,
)
from market_sim.core.types import Direction
from market_sim.portfolio.ledger import close_position_by_id, create_portfolio, open_position, update_portfolio


def test_sharpe_ratio_empty():
    assert sharpe_ratio([]) == 0.0


def test_sharpe_ratio_constant():
    assert sharpe_ratio([0.01] * 10) == 0.0  # zero std


def test_sortino_without_downside_falls_back_to_sharpe():
    rets = [0.01, 0.02, 0.03]
    assert sortino_ratio(rets) == pytest.approx(sharpe_ratio(rets))
    assert sortino_ratio([]) == 0.0


def test_period_returns():
    assert period_returns([100.0, 110.0, 99.0]) == pytest.approx([0.1, -0.1])
    assert period_returns([100.0]) == []


def test_win_rate():
    assert win_rate([1, -1, 1, 1]) == 0.75
    assert win_rate([]) == 0.0


def test_profit_factor():
    assert profit_factor([10, -5, 10, -5]) == 2.0
    assert profit_factor([10, 10]) == float("inf")
    assert profit_factor([-5, -5]) == 0.0
    assert profit_factor([]) == 0.0


def test_expectancy():
    assert expectancy([10, -5, 5]) == pytest.approx(10 / 3)
    assert expectancy([]) == 0.0


def test_max_drawdown():
    # peak 1.2, trough 1.0
    assert max_drawdown([1.0, 1.2, 1.0, 1.1]) == pytest.approx(1 / 6)
    assert max_drawdown([]) == 0.0
    assert max_drawdown([1.0, 2.0, 3.0]) == 0.0


def test_compute_metrics():
    m = compute_metrics([10.0, -5.0, 15.0, -3.0])
    assert m.total_trades == 4
    assert m.winning_trades == 2
    assert m.losing_trades == 2
    assert m.expectancy == pytest.approx(4.25)
    assert m.win_rate == 0.5
    assert m.avg_win == pytest.approx(12.5)
    assert m.avg_loss == pytest.approx(-4.0)


def test_compute_metrics_with_equity_curve():
    m = compute_metrics([500.0], equity_curve=[10000.0, 9000.0, 10500.0])
    assert m.total_return_pct == pytest.approx(5.0)
    assert m.max_drawdown_pct == pytest.approx(10.0)


def test_session_statistics_from_ledger():
    p = create_portfolio(10000.0)
    p = open_position(p, Direction.LONG, 0.5, 100.0, 0, "t")
    p = open_position(p, Direction.SHORT, 0.5, 100.0, 0, "t")
    p = close_position_by_id(p, "pos_1", 110.0, 2)   # +500
    p = close_position_by_id(p, "pos_2", 110.0, 2)   # -250
    p = update_portfolio(p, 110.0, 2, "t")
    s = session_statistics(p)
    assert s.total_trades == 2
    assert s.winning_trades == 1
    assert s.losing_trades == 1
    assert s.total_pnl == pytest.approx(250.0)
    assert s.total_pnl_pct == pytest.approx(2.5)
    assert s.gross_profit == pytest.approx(500.0)
    assert s.gross_loss == pytest.approx(250.0)
    assert s.profit_factor == pytest.approx(2.0)
    assert s.final_equity == pytest.approx(10250.0)
    assert s.total_return_pct == pytest.approx(2.5)
    assert s.hedge_cost_paid == 0.0


def test_session_statistics_empty():
    s = session_statistics(create_portfolio())
    assert s.total_trades == 0
    assert s.win_rate == 0.0
    assert s.profit_factor == 0.0
