"""
Portfolio Tracker - Dependencies
Dependency injection for FastAPI endpoints
"""
from typing import AsyncGenerator

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_tracker.core.alerts import AlertGenerator
from portfolio_tracker.core.portfolio import PortfolioValuator
from portfolio_tracker.db.database import async_session_maker
from portfolio_tracker.db.repositories import HoldingRepository, UserRepository
from portfolio_tracker.services.exchange_rate_cache import ExchangeRateCache
from portfolio_tracker.utils.currency import CurrencyConverter


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Yields:
        AsyncSession: Database session
    """
    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.close()


async def get_current_user_id(
    x_user_id: str = Header(..., alias="X-User-Id"),
) -> int:
    """
    Identify the caller.

    Authentication happens upstream; this service only trusts the
    user id forwarded in the X-User-Id header.
    """
    try:
        user_id = int(x_user_id)
    except (TypeError, ValueError):
        user_id = 0

    if user_id <= 0:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not identify user",
        )
    return user_id


def get_rate_cache(request: Request) -> ExchangeRateCache:
    """The process-wide exchange rate cache built in the app lifespan."""
    return request.app.state.rate_cache


def get_currency_converter(
    rate_cache: ExchangeRateCache = Depends(get_rate_cache),
) -> CurrencyConverter:
    return CurrencyConverter(rate_cache, rate_cache.base_currency, rate_cache.quote_currency)


def get_portfolio_valuator(
    db: AsyncSession = Depends(get_db),
    converter: CurrencyConverter = Depends(get_currency_converter),
) -> PortfolioValuator:
    return PortfolioValuator(HoldingRepository(db), converter)


def get_alert_generator(
    db: AsyncSession = Depends(get_db),
    valuator: PortfolioValuator = Depends(get_portfolio_valuator),
    rate_cache: ExchangeRateCache = Depends(get_rate_cache),
) -> AlertGenerator:
    return AlertGenerator(
        valuator,
        UserRepository(db),
        rate_pair=f"{rate_cache.base_currency}/{rate_cache.quote_currency}",
    )
