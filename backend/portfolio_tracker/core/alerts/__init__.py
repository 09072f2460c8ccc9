"""
Portfolio Tracker - Dashboard Alerts
Threshold-driven alerts over a valued portfolio
"""
from portfolio_tracker.core.alerts.models import (
    Alert,
    AlertSeverity,
    AlertType,
    Dashboard,
    DashboardPosition,
    ThresholdOverrides,
    Thresholds,
)
from portfolio_tracker.core.alerts.generator import AlertGenerator

__all__ = [
    "Alert",
    "AlertSeverity",
    "AlertType",
    "Dashboard",
    "DashboardPosition",
    "ThresholdOverrides",
    "Thresholds",
    "AlertGenerator",
]
