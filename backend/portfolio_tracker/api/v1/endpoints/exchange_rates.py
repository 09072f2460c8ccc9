"""
Portfolio Tracker - Exchange Rate Endpoints
"""
from decimal import Decimal
from typing import Annotated
from fastapi import APIRouter, Depends, Query

from portfolio_tracker.dependencies import get_currency_converter, get_rate_cache
from portfolio_tracker.schemas.exchange_rate import (
    ConversionResponse,
    ExchangeRateResponse,
    SupportedCurrenciesResponse,
)
from portfolio_tracker.services.exchange_rate_cache import ExchangeRateCache
from portfolio_tracker.utils.currency import CurrencyConverter, format_money, get_supported_currencies

router = APIRouter()


@router.get("/current", response_model=ExchangeRateResponse)
async def get_current_rate(
    rate_cache: Annotated[ExchangeRateCache, Depends(get_rate_cache)],
):
    """
    Get the current rate for the live pair (USD/ARS).

    Served from cache when fresh; refreshed from the provider otherwise.
    isStale is true when the provider failed and the last known rate
    was returned instead.
    """
    result = await rate_cache.get_pair_rate()
    return {
        "data": {
            "baseCurrency": rate_cache.base_currency,
            "quoteCurrency": rate_cache.quote_currency,
            **result.to_dict(),
        }
    }


@router.get("/convert", response_model=ConversionResponse)
async def convert_amount(
    converter: Annotated[CurrencyConverter, Depends(get_currency_converter)],
    amount: Decimal = Query(..., ge=0),
    from_currency: str = Query(..., alias="from", min_length=3, max_length=3),
    to_currency: str = Query(..., alias="to", min_length=3, max_length=3),
):
    """Convert an amount between the supported currencies."""
    result = await converter.convert(amount, from_currency, to_currency)
    return {
        "data": {
            "amount": format_money(amount),
            "fromCurrency": from_currency.upper(),
            "toCurrency": to_currency.upper(),
            **result.to_dict(),
        }
    }


@router.get("/currencies", response_model=SupportedCurrenciesResponse)
async def list_supported_currencies():
    """Get list of supported currencies."""
    return {"data": get_supported_currencies()}
