"""
Portfolio Tracker - Data Repositories

Repository pattern implementations for database operations.
"""
from portfolio_tracker.db.repositories.user import UserRepository, UserSettings
from portfolio_tracker.db.repositories.holding import HoldingRepository, HoldingRow
from portfolio_tracker.db.repositories.exchange_rate import ExchangeRateRepository, ExchangeRateStore

__all__ = [
    "UserRepository",
    "UserSettings",
    "HoldingRepository",
    "HoldingRow",
    "ExchangeRateRepository",
    "ExchangeRateStore",
]
