"""
Portfolio Tracker - Database Models
"""
from portfolio_tracker.db.models.user import User
from portfolio_tracker.db.models.asset import Asset, AssetCategory
from portfolio_tracker.db.models.holding import Holding
from portfolio_tracker.db.models.exchange_rate import ExchangeRate

__all__ = [
    "User",
    "Asset",
    "AssetCategory",
    "Holding",
    "ExchangeRate",
]
