"""
Unit Tests - Portfolio Valuator
Tests for position valuation, currency conversion and totals.
"""
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from portfolio_tracker.core.portfolio import PortfolioValuator, PriceStatus
from portfolio_tracker.services.exchange_rate_cache import RateResult
from portfolio_tracker.utils.currency import Currency, CurrencyConverter
from portfolio_tracker.utils.exceptions import ExchangeRateUnavailableError, ValidationError


FETCHED_AT = datetime(2026, 10, 19, 11, 30, tzinfo=timezone.utc)


@pytest.fixture
def mock_cache():
    """Rate cache mock returning 1 USD = 1000 ARS."""
    cache = MagicMock()
    cache.get_rate = AsyncMock(return_value=RateResult(
        rate=Decimal("1000"),
        fetched_at=FETCHED_AT,
        is_stale=False,
        source="bluelytics",
    ))
    return cache


@pytest.fixture
def valuator(holding_repo, mock_cache):
    return PortfolioValuator(holding_repo, CurrencyConverter(mock_cache))


@pytest.fixture
def mixed_rows(make_row):
    """Two USD ETFs and one ARS fund; 4507.50 + 4265.00 + 1260.00 USD."""
    return [
        make_row(3, "FCI1", "1000", "1260", currency="ARS", category="FCI", target="10"),
        make_row(2, "QQQ", "10", "426.50", target="40"),
        make_row(1, "SPY", "10", "450.75", target="50"),
    ]


class TestPortfolioValuator:
    """Tests for PortfolioValuator.get_summary."""

    @pytest.mark.asyncio
    async def test_total_is_exact_sum_of_display_values(self, valuator, holding_repo, mixed_rows):
        holding_repo.get_holdings_with_assets.return_value = mixed_rows

        summary = await valuator.get_summary(1, "USD")

        values = [p.display_value for p in summary.positions]
        assert values == [Decimal("1260.00"), Decimal("4265.00"), Decimal("4507.50")]
        assert summary.total_value == Decimal("10032.50")
        assert summary.to_dict()["totalValue"] == "10032.50"

    @pytest.mark.asyncio
    async def test_display_in_quote_currency(self, valuator, holding_repo, mixed_rows):
        holding_repo.get_holdings_with_assets.return_value = mixed_rows

        summary = await valuator.get_summary(1, Currency.ARS)

        spy = summary.positions[2]
        assert spy.original_value == Decimal("4507.50")
        assert spy.original_currency == Currency.USD
        assert spy.display_value == Decimal("4507500.00")
        assert spy.display_currency == Currency.ARS
        assert summary.positions[0].display_value == Decimal("1260000.00")
        assert summary.total_value == Decimal("10032500.00")

    @pytest.mark.asyncio
    async def test_rate_resolved_once_per_summary(self, valuator, holding_repo, mock_cache, make_row):
        holding_repo.get_holdings_with_assets.return_value = [
            make_row(1, "A", "1", "100", currency="ARS"),
            make_row(2, "B", "1", "200", currency="ARS"),
            make_row(3, "C", "1", "300", currency="ARS"),
        ]

        summary = await valuator.get_summary(1, "USD")

        mock_cache.get_rate.assert_awaited_once_with("USD", "ARS")
        assert summary.exchange_rate_info.usd_to_ars == Decimal("1000")
        assert summary.exchange_rate_info.fetched_at == FETCHED_AT

    @pytest.mark.asyncio
    async def test_no_rate_lookup_when_all_in_display_currency(self, valuator, holding_repo, mock_cache, make_row):
        holding_repo.get_holdings_with_assets.return_value = [make_row(1, "SPY", "2", "500")]

        summary = await valuator.get_summary(1, "USD")

        mock_cache.get_rate.assert_not_called()
        assert summary.exchange_rate_info is None
        assert summary.total_value == Decimal("1000.00")

    @pytest.mark.asyncio
    async def test_zero_price_is_priced(self, valuator, holding_repo, make_row):
        """currentPrice = 0 is a real price, distinct from no price."""
        holding_repo.get_holdings_with_assets.return_value = [
            make_row(1, "FREE", "10", "0"),
            make_row(2, "NOPX", "10", None),
        ]

        summary = await valuator.get_summary(1, "USD")

        free, nopx = summary.positions
        assert free.price_status == PriceStatus.SET
        assert free.original_value == Decimal("0.00")
        assert free.display_value == Decimal("0.00")
        assert nopx.price_status == PriceStatus.MISSING
        assert nopx.original_value is None
        assert nopx.display_value is None

    @pytest.mark.asyncio
    async def test_missing_prices_excluded_from_total(self, valuator, holding_repo, make_row):
        holding_repo.get_holdings_with_assets.return_value = [
            make_row(1, "SPY", "1", "100"),
            make_row(2, "NOPX", "5", None),
        ]

        summary = await valuator.get_summary(1, "USD")

        assert summary.total_value == Decimal("100.00")
        assert summary.excluded_count == 1
        assert summary.to_dict()["excludedCount"] == 1

    @pytest.mark.asyncio
    async def test_excluded_count_omitted_when_zero(self, valuator, holding_repo, make_row):
        holding_repo.get_holdings_with_assets.return_value = [make_row(1, "SPY", "1", "100")]

        summary = await valuator.get_summary(1, "USD")

        assert "excludedCount" not in summary.to_dict()

    @pytest.mark.asyncio
    async def test_empty_portfolio(self, valuator, holding_repo):
        summary = await valuator.get_summary(1, "USD")

        assert summary.positions == []
        assert summary.total_value == Decimal("0.00")
        assert summary.to_dict()["totalValue"] == "0.00"

    @pytest.mark.asyncio
    async def test_unavailable_rate_degrades(self, valuator, holding_repo, mock_cache, mixed_rows):
        """Without a rate the summary is still built and foreign values stay unconverted."""
        mock_cache.get_rate.side_effect = ExchangeRateUnavailableError()
        holding_repo.get_holdings_with_assets.return_value = mixed_rows

        summary = await valuator.get_summary(1, "USD")

        assert summary.exchange_rate_info is None
        fci = summary.positions[0]
        assert fci.original_value == Decimal("1260000.00")
        assert fci.display_value == Decimal("1260000.00")
        assert fci.display_currency == Currency.ARS
        assert summary.positions[2].display_currency == Currency.USD

    @pytest.mark.asyncio
    async def test_stale_rate_reported(self, valuator, holding_repo, mock_cache, mixed_rows):
        mock_cache.get_rate.return_value = RateResult(
            rate=Decimal("1000"), fetched_at=FETCHED_AT, is_stale=True, source="bluelytics",
        )
        holding_repo.get_holdings_with_assets.return_value = mixed_rows

        summary = await valuator.get_summary(1, "USD")

        assert summary.exchange_rate_info.is_stale is True
        assert summary.to_dict()["exchangeRateInfo"] == {
            "usdToArs": "1000",
            "fetchedAt": "2026-10-19T11:30:00+00:00",
            "isStale": True,
        }

    @pytest.mark.asyncio
    async def test_value_rounded_half_up(self, valuator, holding_repo, make_row):
        holding_repo.get_holdings_with_assets.return_value = [make_row(1, "BTC", "0.005", "1.00")]

        summary = await valuator.get_summary(1, "USD")

        assert summary.positions[0].original_value == Decimal("0.01")

    @pytest.mark.asyncio
    async def test_unknown_display_currency(self, valuator, holding_repo):
        with pytest.raises(ValidationError):
            await valuator.get_summary(1, "EUR")

        holding_repo.get_holdings_with_assets.assert_not_called()

    @pytest.mark.asyncio
    async def test_position_to_dict(self, valuator, holding_repo, make_row):
        holding_repo.get_holdings_with_assets.return_value = [
            make_row(7, "SPY", "10.50000000", "450.75", target="50"),
        ]

        summary = await valuator.get_summary(1, "USD")

        assert summary.positions[0].to_dict() == {
            "assetId": 7,
            "ticker": "SPY",
            "name": "SPY name",
            "category": "ETF",
            "quantity": "10.5",
            "currentPrice": "450.75",
            "originalValue": "4732.88",
            "originalCurrency": "USD",
            "displayValue": "4732.88",
            "displayCurrency": "USD",
            "targetPercentage": "50.00",
            "priceUpdatedAt": "2026-10-19T12:00:00+00:00",
            "priceStatus": "set",
        }
