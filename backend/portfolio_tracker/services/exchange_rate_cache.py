"""
Exchange Rate Cache

Resolves the current rate for a currency pair on top of the persisted
exchange_rates table.

Policy:
- Fresh (fetched within TTL): return the stored row, no provider call
- Stale or missing: fetch from the provider and upsert the row
- Provider failure with a stored row: serve it with is_stale=True
- Provider failure without a stored row: ExchangeRateUnavailableError

Refreshes for the same pair are collapsed within the process: the first
caller starts a refresh task, concurrent callers await that same task and
share its outcome (fresh rate, stale fallback or unavailable error).
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, Dict, Optional, Protocol, Tuple
from loguru import logger

from portfolio_tracker.utils.exceptions import (
    ExchangeRateProviderError,
    ExchangeRateUnavailableError,
)


DEFAULT_TTL = timedelta(hours=1)


class RateEntry(Protocol):
    """Stored row shape (ExchangeRate model or any equivalent)."""
    rate: Decimal
    fetched_at: datetime
    source: str


class RateStore(Protocol):
    async def get_rate(self, base_currency: str, quote_currency: str) -> Optional[RateEntry]:
        ...

    async def upsert_rate(
        self,
        base_currency: str,
        quote_currency: str,
        rate: Decimal,
        source: str,
        fetched_at: datetime,
    ) -> RateEntry:
        ...


class RateProvider(Protocol):
    name: str

    async def fetch_rate(self) -> Decimal:
        ...


@dataclass(frozen=True)
class RateResult:
    """Resolved rate for a pair (1 base = rate quote)."""
    rate: Decimal
    fetched_at: datetime
    is_stale: bool
    source: str

    def to_dict(self) -> dict:
        return {
            "rate": str(self.rate),
            "fetchedAt": self.fetched_at.isoformat(),
            "isStale": self.is_stale,
            "source": self.source,
        }


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive timestamps from the store as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ExchangeRateCache:
    """
    TTL cache over a RateStore with degraded-mode fallback.

    Constructed once per process and injected into the converter; it
    holds no rates itself, only the in-flight refresh per pair.

    Usage:
        cache = ExchangeRateCache(
            store=ExchangeRateStore(async_session_maker),
            provider=BluelyticsAdapter(),
        )
        result = await cache.get_rate("USD", "ARS")
    """

    def __init__(
        self,
        store: RateStore,
        provider: RateProvider,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], datetime] = utcnow,
        base_currency: str = "USD",
        quote_currency: str = "ARS",
    ):
        self.store = store
        self.provider = provider
        self.ttl = ttl
        self.clock = clock
        self.base_currency = base_currency.upper()
        self.quote_currency = quote_currency.upper()
        self._inflight: Dict[Tuple[str, str], asyncio.Task] = {}

    def is_fresh(self, entry: Optional[RateEntry], now: datetime) -> bool:
        """An entry is fresh when present and at most TTL old."""
        if entry is None:
            return False
        return now - as_utc(entry.fetched_at) <= self.ttl

    @staticmethod
    def _from_entry(entry: RateEntry, is_stale: bool) -> RateResult:
        return RateResult(
            rate=Decimal(entry.rate),
            fetched_at=as_utc(entry.fetched_at),
            is_stale=is_stale,
            source=entry.source,
        )

    async def get_rate(self, base_currency: str, quote_currency: str) -> RateResult:
        """
        Get the current rate for a pair, refreshing when stale.

        Args:
            base_currency: Base currency code (e.g., 'USD')
            quote_currency: Quote currency code (e.g., 'ARS')

        Returns:
            RateResult; is_stale is True only when a refresh failed and
            the stored row was served instead.

        Raises:
            ExchangeRateUnavailableError: refresh failed and nothing is stored
        """
        base = base_currency.upper()
        quote = quote_currency.upper()

        cached = await self.store.get_rate(base, quote)
        if self.is_fresh(cached, self.clock()):
            logger.debug(f"Exchange rate cache hit: {base}/{quote}")
            return self._from_entry(cached, is_stale=False)

        key = (base, quote)
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.create_task(self._refresh(base, quote))
            self._inflight[key] = task
        else:
            logger.debug(f"Joining in-flight exchange rate refresh: {base}/{quote}")

        # Shielded so one cancelled caller does not cancel the shared refresh
        return await asyncio.shield(task)

    async def _refresh(self, base: str, quote: str) -> RateResult:
        try:
            # A refresh may have finished between the caller's read and now
            cached = await self.store.get_rate(base, quote)
            if self.is_fresh(cached, self.clock()):
                return self._from_entry(cached, is_stale=False)

            try:
                fresh_rate = await self.provider.fetch_rate()
            except (ExchangeRateProviderError, asyncio.TimeoutError) as e:
                return self._fallback(base, quote, cached, e)

            fetched_at = await self.save_rate(base, quote, fresh_rate)
            logger.info(f"Exchange rate refreshed: {base}/{quote} = {fresh_rate} ({self.provider.name})")
            return RateResult(
                rate=fresh_rate,
                fetched_at=fetched_at,
                is_stale=False,
                source=self.provider.name,
            )
        finally:
            # Cleared before any waiter resumes, so the next call retries
            self._inflight.pop((base, quote), None)

    def _fallback(
        self,
        base: str,
        quote: str,
        cached: Optional[RateEntry],
        error: Exception,
    ) -> RateResult:
        if cached is not None:
            logger.warning(f"Exchange rate API failed, using cached rate for {base}/{quote}: {error}")
            return self._from_entry(cached, is_stale=True)

        logger.error(f"Exchange rate API failed and no cache available for {base}/{quote}: {error}")
        raise ExchangeRateUnavailableError() from error

    async def save_rate(
        self,
        base_currency: str,
        quote_currency: str,
        rate: Decimal,
        source: Optional[str] = None,
    ) -> datetime:
        """
        Upsert a rate for a pair, stamping fetched_at with the current time.

        Returns:
            The fetched_at timestamp written
        """
        fetched_at = self.clock()
        await self.store.upsert_rate(
            base_currency.upper(),
            quote_currency.upper(),
            rate,
            source=source or self.provider.name,
            fetched_at=fetched_at,
        )
        return fetched_at

    async def get_pair_rate(self) -> RateResult:
        """Resolve the canonical pair (the only live pair)."""
        return await self.get_rate(self.base_currency, self.quote_currency)

    async def preload_rates(self) -> bool:
        """
        Warm the cache for the canonical pair.

        Best effort: failures are logged and reported as False, never
        raised, so callers can run it from a startup hook.
        """
        try:
            result = await self.get_pair_rate()
        except ExchangeRateUnavailableError as e:
            logger.warning(f"Failed to preload exchange rates: {e.message}")
            return False

        logger.info(
            f"Exchange rates preloaded: {self.base_currency}/{self.quote_currency} = "
            f"{result.rate} (stale={result.is_stale})"
        )
        return True
