"""
Portfolio Tracker - Services
"""
from portfolio_tracker.services.exchange_rate_cache import (
    ExchangeRateCache,
    RateResult,
)

__all__ = ["ExchangeRateCache", "RateResult"]
