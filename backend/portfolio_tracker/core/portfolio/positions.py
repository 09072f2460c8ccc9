"""
Valuation Types

Derived (never persisted) structures produced by the portfolio
valuator. Values are Decimal internally; to_dict() is the API boundary
where money is rendered as 2-decimal strings.
"""
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from portfolio_tracker.services.exchange_rate_cache import RateResult
from portfolio_tracker.utils.currency import Currency, format_money


class PriceStatus(str, Enum):
    """Whether a position has a price to value it with."""
    SET = "set"
    MISSING = "missing"


def format_quantity(value: Decimal) -> str:
    """Render a quantity without trailing zeros or exponent notation."""
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal("1")))
    return format(normalized, "f")


def _money_or_none(value: Optional[Decimal]) -> Optional[str]:
    return format_money(value) if value is not None else None


@dataclass
class Position:
    """One holding valued in its own currency and in the display currency."""
    asset_id: int
    ticker: str
    name: str
    category: str
    quantity: Decimal
    current_price: Optional[Decimal]
    original_value: Optional[Decimal]
    original_currency: Currency
    display_value: Optional[Decimal]
    display_currency: Currency
    target_percentage: Optional[Decimal]
    price_updated_at: Optional[datetime]
    price_status: PriceStatus

    @property
    def is_priced(self) -> bool:
        return self.price_status == PriceStatus.SET

    def to_dict(self) -> dict:
        return {
            "assetId": self.asset_id,
            "ticker": self.ticker,
            "name": self.name,
            "category": self.category,
            "quantity": format_quantity(self.quantity),
            "currentPrice": _money_or_none(self.current_price),
            "originalValue": _money_or_none(self.original_value),
            "originalCurrency": self.original_currency.value,
            "displayValue": _money_or_none(self.display_value),
            "displayCurrency": self.display_currency.value,
            "targetPercentage": _money_or_none(self.target_percentage),
            "priceUpdatedAt": self.price_updated_at.isoformat() if self.price_updated_at else None,
            "priceStatus": self.price_status.value,
        }


@dataclass(frozen=True)
class ExchangeRateInfo:
    """The pair rate shared by every position of one valuation."""
    usd_to_ars: Decimal
    fetched_at: datetime
    is_stale: bool

    @classmethod
    def from_rate(cls, result: RateResult) -> "ExchangeRateInfo":
        return cls(usd_to_ars=result.rate, fetched_at=result.fetched_at, is_stale=result.is_stale)

    def to_dict(self) -> dict:
        return {
            "usdToArs": str(self.usd_to_ars),
            "fetchedAt": self.fetched_at.isoformat(),
            "isStale": self.is_stale,
        }


@dataclass
class PortfolioSummary:
    """Priced portfolio in a single display currency."""
    total_value: Decimal
    display_currency: Currency
    exchange_rate_info: Optional[ExchangeRateInfo]
    positions: list[Position] = field(default_factory=list)
    excluded_count: int = 0

    def to_dict(self) -> dict:
        data = {
            "totalValue": format_money(self.total_value),
            "displayCurrency": self.display_currency.value,
            "exchangeRateInfo": self.exchange_rate_info.to_dict() if self.exchange_rate_info else None,
            "positions": [p.to_dict() for p in self.positions],
        }
        if self.excluded_count:
            data["excludedCount"] = self.excluded_count
        return data
