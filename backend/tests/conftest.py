"""
Portfolio Tracker - Test Configuration
Shared fixtures and test configuration.
"""
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional
import pytest
from unittest.mock import AsyncMock, MagicMock

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Set test environment
os.environ["APP_ENV"] = "testing"
os.environ["LOG_TO_FILE"] = "false"
os.environ["PRELOAD_EXCHANGE_RATES"] = "false"
os.environ["POSTGRES_HOST"] = "localhost"
os.environ["POSTGRES_DB"] = "portfolio_tracker_test"


NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


# =========================
# Exchange Rate Fakes
# =========================

@dataclass
class StoredRate:
    """In-memory stand-in for an exchange_rates row."""
    rate: Decimal
    fetched_at: datetime
    source: str = "bluelytics"


class InMemoryRateStore:
    """RateStore keeping rows in a dict, counting reads and writes."""

    def __init__(self):
        self.rows: dict[tuple[str, str], StoredRate] = {}
        self.reads = 0
        self.writes = 0

    def put(self, base: str, quote: str, rate: str, fetched_at: datetime, source: str = "bluelytics"):
        self.rows[(base, quote)] = StoredRate(Decimal(rate), fetched_at, source)

    async def get_rate(self, base_currency: str, quote_currency: str) -> Optional[StoredRate]:
        self.reads += 1
        return self.rows.get((base_currency, quote_currency))

    async def upsert_rate(self, base_currency, quote_currency, rate, source, fetched_at) -> StoredRate:
        self.writes += 1
        row = StoredRate(rate, fetched_at, source)
        self.rows[(base_currency, quote_currency)] = row
        return row


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock()


@pytest.fixture
def rate_store() -> InMemoryRateStore:
    return InMemoryRateStore()


@pytest.fixture
def rate_provider():
    """Provider mock returning 1000 ARS per USD."""
    provider = MagicMock()
    provider.name = "bluelytics"
    provider.fetch_rate = AsyncMock(return_value=Decimal("1000"))
    return provider


@pytest.fixture
def rate_cache(rate_store, rate_provider, clock):
    from portfolio_tracker.services.exchange_rate_cache import ExchangeRateCache
    return ExchangeRateCache(store=rate_store, provider=rate_provider, clock=clock)


# =========================
# Holding Fixtures
# =========================

def _make_row(
    asset_id: int,
    ticker: str,
    quantity: str,
    price: Optional[str],
    currency: str = "USD",
    target: Optional[str] = None,
    updated_at: Optional[datetime] = NOW,
    category: str = "ETF",
):
    """Build a HoldingRow from string literals."""
    from portfolio_tracker.db.repositories.holding import HoldingRow
    from portfolio_tracker.utils.currency import Currency
    return HoldingRow(
        asset_id=asset_id,
        ticker=ticker,
        name=f"{ticker} name",
        category=category,
        currency=Currency(currency),
        quantity=Decimal(quantity),
        current_price=Decimal(price) if price is not None else None,
        price_updated_at=updated_at,
        target_percentage=Decimal(target) if target is not None else None,
    )


@pytest.fixture
def make_row():
    """Factory for HoldingRow test data."""
    return _make_row


@pytest.fixture
def holding_repo():
    """HoldingRepository mock; tests set get_holdings_with_assets.return_value."""
    repo = MagicMock()
    repo.get_holdings_with_assets = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def settings_repo():
    """UserRepository mock with default thresholds (5%, 7 days)."""
    from portfolio_tracker.db.repositories.user import UserSettings
    repo = MagicMock()
    repo.get_settings = AsyncMock(
        return_value=UserSettings(rebalance_threshold=Decimal("5.00"), price_alert_days=7)
    )
    return repo
