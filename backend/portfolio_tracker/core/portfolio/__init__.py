"""
Portfolio Valuation Module

- Derived position / summary types
- Portfolio valuator (holdings -> priced summary in a display currency)
"""
from portfolio_tracker.core.portfolio.positions import (
    ExchangeRateInfo,
    PortfolioSummary,
    Position,
    PriceStatus,
)
from portfolio_tracker.core.portfolio.service import PortfolioValuator

__all__ = [
    "ExchangeRateInfo",
    "PortfolioSummary",
    "Position",
    "PriceStatus",
    "PortfolioValuator",
]
