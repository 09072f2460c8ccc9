"""
Unit Tests - Currency Converter
Tests for pair routing, identity conversion and money helpers.
"""
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from portfolio_tracker.services.exchange_rate_cache import RateResult
from portfolio_tracker.utils.currency import (
    Currency,
    CurrencyConverter,
    format_money,
    get_supported_currencies,
    parse_currency,
    round2,
)
from portfolio_tracker.utils.exceptions import (
    ExchangeRateUnavailableError,
    UnsupportedCurrencyPairError,
    ValidationError,
)


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
def converter(mock_cache):
    return CurrencyConverter(mock_cache)


class TestCurrencyConverter:
    """Tests for CurrencyConverter.convert."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("code", ["USD", "ARS"])
    async def test_identity_conversion_skips_cache(self, converter, mock_cache, code):
        """Same-currency conversion returns the amount unchanged with rate 1."""
        result = await converter.convert(Decimal("123.456"), code, code)

        assert result.converted == Decimal("123.456")
        assert result.rate == Decimal("1")
        assert result.is_stale is False
        mock_cache.get_rate.assert_not_called()

    @pytest.mark.asyncio
    async def test_identity_conversion_survives_unavailable_cache(self, converter, mock_cache):
        mock_cache.get_rate.side_effect = ExchangeRateUnavailableError()

        result = await converter.convert(Decimal("10"), "ARS", "ars")

        assert result.converted == Decimal("10")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("source,target", [("EUR", "EUR"), ("eur", "EUR "), ("BTC", "btc")])
    async def test_identity_conversion_any_code(self, converter, mock_cache, source, target):
        result = await converter.convert(Decimal("5"), source, target)

        assert result.converted == Decimal("5")
        assert result.rate == Decimal("1")
        mock_cache.get_rate.assert_not_called()

    @pytest.mark.asyncio
    async def test_base_to_quote_multiplies(self, converter, mock_cache):
        result = await converter.convert(Decimal("4.5075"), "USD", "ARS")

        assert result.converted == Decimal("4507.5000")
        assert result.rate == Decimal("1000")
        mock_cache.get_rate.assert_awaited_once_with("USD", "ARS")

    @pytest.mark.asyncio
    async def test_quote_to_base_divides(self, converter, mock_cache):
        result = await converter.convert(Decimal("4265000"), "ARS", "USD")

        assert result.converted == Decimal("4265")
        assert result.rate == Decimal("0.001")
        mock_cache.get_rate.assert_awaited_once_with("USD", "ARS")

    @pytest.mark.asyncio
    async def test_stale_rate_is_propagated(self, converter, mock_cache):
        mock_cache.get_rate.return_value = RateResult(
            rate=Decimal("950"), fetched_at=FETCHED_AT, is_stale=True, source="bluelytics",
        )

        result = await converter.convert(Decimal("2"), "USD", "ARS")

        assert result.converted == Decimal("1900")
        assert result.is_stale is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("source,target", [("EUR", "USD"), ("USD", "EUR"), ("BTC", "ARS")])
    async def test_unsupported_pair_rejected_before_io(self, converter, mock_cache, source, target):
        with pytest.raises(UnsupportedCurrencyPairError) as exc_info:
            await converter.convert(Decimal("1"), source, target)

        assert isinstance(exc_info.value, ValidationError)
        assert exc_info.value.status_code == 400
        assert f"{source} -> {target}" in exc_info.value.message
        mock_cache.get_rate.assert_not_called()

    @pytest.mark.asyncio
    async def test_unavailable_rate_propagates(self, converter, mock_cache):
        mock_cache.get_rate.side_effect = ExchangeRateUnavailableError()

        with pytest.raises(ExchangeRateUnavailableError):
            await converter.convert(Decimal("1"), "USD", "ARS")

    def test_convert_with_rate_does_not_touch_cache(self, converter, mock_cache):
        rate = RateResult(rate=Decimal("1000"), fetched_at=FETCHED_AT, is_stale=False, source="bluelytics")

        result = converter.convert_with_rate(Decimal("1260000.00"), Currency.ARS, Currency.USD, rate)

        assert result.converted == Decimal("1260")
        mock_cache.get_rate.assert_not_called()

    @pytest.mark.asyncio
    async def test_get_pair_rate(self, converter, mock_cache):
        result = await converter.get_pair_rate()

        assert result.rate == Decimal("1000")
        mock_cache.get_rate.assert_awaited_once_with("USD", "ARS")


class TestMoneyHelpers:
    """Tests for rounding, formatting and parsing helpers."""

    def test_round2_half_up(self):
        assert round2(Decimal("0.125")) == Decimal("0.13")
        assert round2(Decimal("2.675")) == Decimal("2.68")
        assert round2(Decimal("-1.005")) == Decimal("-1.01")

    def test_format_money(self):
        assert format_money(Decimal("10032.5")) == "10032.50"
        assert format_money(Decimal("0")) == "0.00"

    def test_parse_currency(self):
        assert parse_currency("usd") is Currency.USD
        assert parse_currency(" ARS ") is Currency.ARS
        assert parse_currency(Currency.USD) is Currency.USD

    def test_parse_currency_unknown(self):
        with pytest.raises(ValueError):
            parse_currency("EUR")

    def test_supported_currencies(self):
        codes = [c["code"] for c in get_supported_currencies()]
        assert codes == ["USD", "ARS"]
