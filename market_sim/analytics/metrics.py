"""
Session performance metrics: trade statistics from closed positions and
risk-adjusted ratios from the per-tick equity curve.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Sequence

import numpy as np

if TYPE_CHECKING:
    from market_sim.portfolio.ledger import PortfolioState


@dataclass
class PerformanceMetrics:
    """Aggregate metrics over an equity curve and its realized trades."""
    total_return_pct: float
    sharpe_ratio: float
    sortino_ratio: float
    max_drawdown_pct: float
    win_rate: float
    profit_factor: float
    expectancy: float
    total_trades: int
    winning_trades: int
    losing_trades: int
    avg_win: float
    avg_loss: float


@dataclass
class SessionStatistics:
    """Summary of a play session, computed from the ledger alone."""
    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float
    total_pnl: float
    total_pnl_pct: float
    gross_profit: float
    gross_loss: float
    profit_factor: float
    max_drawdown_pct: float
    final_equity: float
    total_return_pct: float
    hedge_cost_paid: float


def period_returns(equity_curve: Sequence[float]) -> List[float]:
    """Simple returns between consecutive equity values."""
    arr = np.asarray(equity_curve, dtype=float)
    if len(arr) < 2:
        return []
    prev = np.where(arr[:-1] != 0, arr[:-1], 1.0)
    return (np.diff(arr) / prev).tolist()


def sharpe_ratio(returns: Sequence[float], risk_free_rate: float = 0.0, periods_per_year: float = 252.0) -> float:
    """Annualized Sharpe of per-tick returns (one tick = one daily candle by default)."""
    if len(returns) == 0:
        return 0.0
    excess = np.asarray(returns, dtype=float) - risk_free_rate / periods_per_year
    if excess.std() <= 1e-12:
        return 0.0
    return float(np.sqrt(periods_per_year) * excess.mean() / excess.std())


def sortino_ratio(returns: Sequence[float], risk_free_rate: float = 0.0, periods_per_year: float = 252.0) -> float:
    """Annualized Sortino; falls back to Sharpe when there is no downside."""
    if len(returns) == 0:
        return 0.0
    arr = np.asarray(returns, dtype=float)
    excess = arr - risk_free_rate / periods_per_year
    downside = arr[arr < 0]
    if len(downside) == 0 or downside.std() <= 1e-12:
        return sharpe_ratio(returns, risk_free_rate, periods_per_year)
    return float(np.sqrt(periods_per_year) * excess.mean() / downside.std())


def max_drawdown(equity_curve: Sequence[float]) -> float:
    """Largest peak-to-trough decline as a positive fraction (0.15 = 15%)."""
    if len(equity_curve) == 0:
        return 0.0
    arr = np.asarray(equity_curve, dtype=float)
    peak = np.maximum.accumulate(arr)
    dd = (peak - arr) / np.where(peak > 0, peak, 1.0)
    return float(dd.max())


def win_rate(pnls: Sequence[float]) -> float:
    if len(pnls) == 0:
        return 0.0
    return sum(1 for p in pnls if p > 0) / len(pnls)


def profit_factor(pnls: Sequence[float]) -> float:
    """Gross profit / gross loss; inf with profits and no losses, 0 with neither."""
    wins = sum(p for p in pnls if p > 0)
    losses = sum(-p for p in pnls if p < 0)
    if losses <= 0:
        return float("inf") if wins > 0 else 0.0
    return wins / losses


def expectancy(pnls: Sequence[float]) -> float:
    if len(pnls) == 0:
        return 0.0
    return sum(pnls) / len(pnls)


def compute_metrics(
    pnls: Sequence[float],
    equity_curve: Optional[Sequence[float]] = None,
    risk_free_rate: float = 0.0,
    periods_per_year: float = 252.0,
) -> PerformanceMetrics:
    """
    pnls: realized P&L per closed position.
    equity_curve: per-tick equity; if None, built from pnls starting at 1.0.
    """
    pnls = list(pnls)
    if equity_curve is None:
        equity_curve = list(np.cumsum([1.0] + pnls))
    equity_curve = list(equity_curve)
    rets = period_returns(equity_curve)
    start = equity_curve[0] if equity_curve else 0.0
    total_return_pct = (equity_curve[-1] / start - 1.0) * 100.0 if start else 0.0
    wins = [p for p in pnls if p > 0]
    losses = [p for p in pnls if p < 0]
    return PerformanceMetrics(
        total_return_pct=total_return_pct,
        sharpe_ratio=sharpe_ratio(rets, risk_free_rate, periods_per_year),
        sortino_ratio=sortino_ratio(rets, risk_free_rate, periods_per_year),
        max_drawdown_pct=max_drawdown(equity_curve) * 100.0,
        win_rate=win_rate(pnls),
        profit_factor=profit_factor(pnls),
        expectancy=expectancy(pnls),
        total_trades=len(pnls),
        winning_trades=len(wins),
        losing_trades=len(losses),
        avg_win=sum(wins) / len(wins) if wins else 0.0,
        avg_loss=sum(losses) / len(losses) if losses else 0.0,
    )


def session_statistics(portfolio: "PortfolioState") -> SessionStatistics:
    """Trade statistics over every closed position, hedges included."""
    pnls = [c.realized_pnl for c in portfolio.closed_positions]
    winners = [p for p in pnls if p > 0]
    losers = [p for p in pnls if p < 0]
    total_pnl = sum(pnls)
    return SessionStatistics(
        total_trades=len(pnls),
        winning_trades=len(winners),
        losing_trades=len(losers),
        win_rate=win_rate(pnls),
        total_pnl=total_pnl,
        total_pnl_pct=total_pnl / portfolio.initial_capital * 100 if portfolio.initial_capital else 0.0,
        gross_profit=sum(winners),
        gross_loss=abs(sum(losers)),
        profit_factor=profit_factor(pnls),
        max_drawdown_pct=portfolio.max_drawdown * 100,
        final_equity=portfolio.equity,
        total_return_pct=portfolio.accumulated_return,
        hedge_cost_paid=portfolio.total_hedge_cost,
    )
