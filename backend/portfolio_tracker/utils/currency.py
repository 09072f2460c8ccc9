"""
Currency Conversion Service

Converts amounts between the supported currencies using the exchange
rate cache.

The system has exactly one live pair (USD/ARS). Every conversion is
routed through it, either as base -> quote (multiply by the rate) or
quote -> base (divide by the rate). Anything else is rejected before
touching the cache.

All arithmetic is Decimal; monetary values are rounded half-up to two
places where they are produced and only formatted as strings at the
API boundary.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Union

from portfolio_tracker.services.exchange_rate_cache import ExchangeRateCache, RateResult
from portfolio_tracker.utils.exceptions import UnsupportedCurrencyPairError


CENTS = Decimal("0.01")
ONE = Decimal("1")


class Currency(str, Enum):
    """Supported currencies."""
    USD = "USD"
    ARS = "ARS"


CurrencyLike = Union[Currency, str]


def round2(value: Decimal) -> Decimal:
    """Round a monetary value to 2 decimal places, half-up."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_money(value: Decimal) -> str:
    """Format a monetary value as a 2-decimal string (no float on the way)."""
    return str(round2(value))


def currency_code(value: CurrencyLike) -> str:
    """Upper-cased code for any currency, supported or not."""
    if isinstance(value, Currency):
        return value.value
    return str(value).strip().upper()


def parse_currency(value: CurrencyLike) -> Currency:
    """Normalize a currency code; raises ValueError for unknown codes."""
    if isinstance(value, Currency):
        return value
    return Currency(currency_code(value))


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of a conversion; rate is the from -> to multiplier applied."""
    converted: Decimal
    rate: Decimal
    is_stale: bool

    def to_dict(self) -> dict:
        return {
            "converted": format_money(self.converted),
            "rate": str(self.rate),
            "isStale": self.is_stale,
        }


class CurrencyConverter:
    """
    Converts amounts over the single supported pair.

    Usage:
        converter = CurrencyConverter(rate_cache)
        result = await converter.convert(Decimal("100"), "USD", "ARS")
        # result.converted == 100 * rate
    """

    def __init__(
        self,
        rate_cache: ExchangeRateCache,
        base_currency: CurrencyLike = Currency.USD,
        quote_currency: CurrencyLike = Currency.ARS,
    ):
        self.rate_cache = rate_cache
        self.base_currency = parse_currency(base_currency)
        self.quote_currency = parse_currency(quote_currency)

    def _normalize_pair(self, from_currency: CurrencyLike, to_currency: CurrencyLike) -> tuple[Currency, Currency]:
        try:
            source = parse_currency(from_currency)
            target = parse_currency(to_currency)
        except ValueError:
            raise UnsupportedCurrencyPairError(str(from_currency), str(to_currency))

        if {source, target} != {self.base_currency, self.quote_currency}:
            raise UnsupportedCurrencyPairError(source.value, target.value)
        return source, target

    async def get_pair_rate(self) -> RateResult:
        """Resolve the canonical pair rate once."""
        return await self.rate_cache.get_rate(self.base_currency.value, self.quote_currency.value)

    async def convert(
        self,
        amount: Decimal,
        from_currency: CurrencyLike,
        to_currency: CurrencyLike,
    ) -> ConversionResult:
        """
        Convert an amount between currencies.

        Identity conversions return the amount unchanged with rate 1 and
        never consult the cache.

        Raises:
            UnsupportedCurrencyPairError: pair not reducible to the live pair
            ExchangeRateUnavailableError: no rate could be resolved
        """
        if currency_code(from_currency) == currency_code(to_currency):
            return ConversionResult(converted=amount, rate=ONE, is_stale=False)

        source, target = self._normalize_pair(from_currency, to_currency)
        rate_result = await self.get_pair_rate()
        return self.convert_with_rate(amount, source, target, rate_result)

    def convert_with_rate(
        self,
        amount: Decimal,
        from_currency: CurrencyLike,
        to_currency: CurrencyLike,
        rate_result: RateResult,
    ) -> ConversionResult:
        """
        Convert using an already resolved pair rate (no cache access).

        Lets a caller valuing many positions resolve the rate once and
        share it. The converted amount is not rounded here.
        """
        if currency_code(from_currency) == currency_code(to_currency):
            return ConversionResult(converted=amount, rate=ONE, is_stale=False)

        source, target = self._normalize_pair(from_currency, to_currency)

        amount = Decimal(amount)
        rate = Decimal(rate_result.rate)
        if source == self.base_currency:
            return ConversionResult(converted=amount * rate, rate=rate, is_stale=rate_result.is_stale)

        return ConversionResult(converted=amount / rate, rate=ONE / rate, is_stale=rate_result.is_stale)


def get_supported_currencies() -> list[dict]:
    """Get list of supported currencies with metadata."""
    return [
        {"code": "USD", "name": "US Dollar", "symbol": "US$"},
        {"code": "ARS", "name": "Argentine Peso", "symbol": "$"},
    ]
