"""
External rate provider adapters.
"""
from portfolio_tracker.data_providers.adapters.bluelytics import BluelyticsAdapter

__all__ = ["BluelyticsAdapter"]
