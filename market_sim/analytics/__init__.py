"""Analytics: market indicators, regime classification, session metrics."""

from market_sim.analytics.indicators import calculate_indicators, classify_regime
from market_sim.analytics.metrics import (
    PerformanceMetrics,
    SessionStatistics,
    compute_metrics,
    session_statistics,
    sharpe_ratio,
    sortino_ratio,
    max_drawdown,
    win_rate,
    profit_factor,
    expectancy,
)

__all__ = [
    "calculate_indicators",
    "classify_regime",
    "PerformanceMetrics",
    "SessionStatistics",
    "compute_metrics",
    "session_statistics",
    "sharpe_ratio",
    "sortino_ratio",
    "max_drawdown",
    "win_rate",
    "profit_factor",
    "expectancy",
]
