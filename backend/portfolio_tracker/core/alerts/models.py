"""
Dashboard Alert Types
"""
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from portfolio_tracker.core.portfolio.positions import ExchangeRateInfo, Position
from portfolio_tracker.utils.currency import Currency, format_money


class AlertType(str, Enum):
    """Type of dashboard alert."""
    STALE_PRICE = "stale_price"
    MISSING_PRICE = "missing_price"
    REBALANCE_NEEDED = "rebalance_needed"


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Thresholds:
    """Effective alert thresholds for one dashboard evaluation."""
    deviation_pct: Decimal
    stale_days: int


@dataclass(frozen=True)
class ThresholdOverrides:
    """Caller-supplied thresholds; None fields fall back to user settings."""
    deviation_pct: Optional[Decimal] = None
    stale_days: Optional[int] = None

    @property
    def is_complete(self) -> bool:
        return self.deviation_pct is not None and self.stale_days is not None


@dataclass
class Alert:
    """
    A single dashboard alert.

    asset_id is None for alerts about the exchange rate itself; ticker
    then carries the pair (e.g. 'USD/ARS').
    """
    type: AlertType
    asset_id: Optional[int]
    ticker: str
    message: str
    severity: AlertSeverity
    data: Optional[dict[str, Any]] = None

    def to_dict(self) -> dict:
        payload = {
            "type": self.type.value,
            "assetId": self.asset_id,
            "ticker": self.ticker,
            "message": self.message,
            "severity": self.severity.value,
        }
        if self.data is not None:
            payload["data"] = self.data
        return payload


@dataclass
class DashboardPosition:
    """Valued position plus its share of the portfolio."""
    position: Position
    actual_percentage: Optional[Decimal]
    deviation: Optional[Decimal]

    def to_dict(self) -> dict:
        data = self.position.to_dict()
        data["actualPercentage"] = format_money(self.actual_percentage) if self.actual_percentage is not None else None
        data["deviation"] = format_money(self.deviation) if self.deviation is not None else None
        return data


@dataclass
class Dashboard:
    total_value: Decimal
    display_currency: Currency
    exchange_rate_info: Optional[ExchangeRateInfo]
    thresholds: Thresholds
    positions: list[DashboardPosition] = field(default_factory=list)
    alerts: list[Alert] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalValue": format_money(self.total_value),
            "displayCurrency": self.display_currency.value,
            "exchangeRateInfo": self.exchange_rate_info.to_dict() if self.exchange_rate_info else None,
            "thresholds": {
                "deviationPct": str(self.thresholds.deviation_pct),
                "staleDays": self.thresholds.stale_days,
            },
            "positions": [p.to_dict() for p in self.positions],
            "alerts": [a.to_dict() for a in self.alerts],
        }
