"""Arbitrage economics: per-pair calculator and portfolio summary."""

from polyarb.economics.calculator import (
    ArbEconomics,
    ShareSummary,
    annualized_yield,
    compute_economics,
    holding_days,
    holding_label,
    is_sell_signal,
)
from polyarb.economics.portfolio import PortfolioSummary, summarize_portfolio

__all__ = [
    "ArbEconomics",
    "ShareSummary",
    "compute_economics",
    "annualized_yield",
    "holding_days",
    "holding_label",
    "is_sell_signal",
    "PortfolioSummary",
    "summarize_portfolio",
]
