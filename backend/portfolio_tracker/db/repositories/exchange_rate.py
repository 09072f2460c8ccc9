"""
Exchange Rate Repository

Database operations for the persisted rate cache (the RateStore seen
by ExchangeRateCache).
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy import select
from loguru import logger

from portfolio_tracker.db.models.exchange_rate import ExchangeRate


class ExchangeRateRepository:
    """
    Repository for ExchangeRate database operations.

    Provides low-level read/upsert operations for exchange rates.
    For freshness and fallback policy, use ExchangeRateCache instead.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_rate(
        self,
        base_currency: str,
        quote_currency: str,
    ) -> Optional[ExchangeRate]:
        """
        Get the cached exchange rate for a currency pair.

        Args:
            base_currency: Base currency code (e.g., 'USD')
            quote_currency: Quote currency code (e.g., 'ARS')

        Returns:
            ExchangeRate or None if not found
        """
        result = await self.db.execute(
            select(ExchangeRate).where(
                ExchangeRate.base_currency == base_currency.upper(),
                ExchangeRate.quote_currency == quote_currency.upper(),
            )
        )
        return result.scalar_one_or_none()

    async def upsert_rate(
        self,
        base_currency: str,
        quote_currency: str,
        rate: Decimal,
        source: str = "bluelytics",
        fetched_at: Optional[datetime] = None,
    ) -> ExchangeRate:
        """
        Insert or update an exchange rate.

        The row is replaced as a whole (rate, source and fetched_at), so
        concurrent writers for the same pair resolve as last write wins.

        Args:
            base_currency: Base currency code
            quote_currency: Quote currency code
            rate: The exchange rate value
            source: Source identifier
            fetched_at: When the rate was fetched (defaults to now)

        Returns:
            The created or updated ExchangeRate
        """
        if fetched_at is None:
            fetched_at = datetime.now(timezone.utc)

        base = base_currency.upper()
        quote = quote_currency.upper()

        existing = await self.get_rate(base, quote)

        if existing:
            existing.rate = rate
            existing.source = source
            existing.fetched_at = fetched_at
            existing.updated_at = datetime.now(timezone.utc)

            await self.db.commit()
            await self.db.refresh(existing)

            logger.debug(f"Updated rate: {base}/{quote} = {rate}")
            return existing

        new_rate = ExchangeRate(
            base_currency=base,
            quote_currency=quote,
            rate=rate,
            source=source,
            fetched_at=fetched_at,
        )

        self.db.add(new_rate)
        await self.db.commit()
        await self.db.refresh(new_rate)

        logger.info(f"Created rate: {base}/{quote} = {rate}")
        return new_rate


class ExchangeRateStore:
    """
    Session-per-call RateStore.

    ExchangeRateCache outlives any single request, so it cannot hold a
    request-scoped session; each read or write opens its own.
    """

    def __init__(self, session_maker: async_sessionmaker):
        self._session_maker = session_maker

    async def get_rate(self, base_currency: str, quote_currency: str) -> Optional[ExchangeRate]:
        async with self._session_maker() as session:
            return await ExchangeRateRepository(session).get_rate(base_currency, quote_currency)

    async def upsert_rate(
        self,
        base_currency: str,
        quote_currency: str,
        rate: Decimal,
        source: str,
        fetched_at: datetime,
    ) -> ExchangeRate:
        async with self._session_maker() as session:
            return await ExchangeRateRepository(session).upsert_rate(
                base_currency, quote_currency, rate, source=source, fetched_at=fetched_at,
            )
