"""
Portfolio Tracker - Exchange Rate Schemas
"""

from portfolio_tracker.schemas.common import CamelModel


class ExchangeRateData(CamelModel):
    """Current rate for the live pair. Timestamps are ISO 8601 strings."""
    base_currency: str
    quote_currency: str
    rate: str
    fetched_at: str
    is_stale: bool
    source: str


class ExchangeRateResponse(CamelModel):
    data: ExchangeRateData


class ConversionData(CamelModel):
    amount: str
    from_currency: str
    to_currency: str
    converted: str
    rate: str
    is_stale: bool


class ConversionResponse(CamelModel):
    data: ConversionData


class SupportedCurrency(CamelModel):
    code: str
    name: str
    symbol: str


class SupportedCurrenciesResponse(CamelModel):
    data: list[SupportedCurrency]
