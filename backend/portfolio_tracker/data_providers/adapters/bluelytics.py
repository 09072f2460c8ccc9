"""
Bluelytics Adapter

Provides the official USD/ARS rate from the Bluelytics aggregator.
Free, no API key required.

Endpoint:
- GET /v2/latest - {"oficial": {"value_avg", "value_sell", "value_buy"},
                    "blue": {...}, "last_update": "..."}

Only oficial.value_avg (ARS per 1 USD) is consumed.
"""
from decimal import Decimal, InvalidOperation
from typing import Optional
import httpx
from loguru import logger

from portfolio_tracker.utils.exceptions import ExchangeRateProviderError


BASE_URL = "https://api.bluelytics.com.ar/v2/latest"
PROVIDER_NAME = "bluelytics"


class BluelyticsAdapter:
    """Adapter for the Bluelytics rate API."""

    name = PROVIDER_NAME

    def __init__(self, url: str = BASE_URL, timeout: float = 10.0):
        self.url = url
        self.timeout = timeout

    async def fetch_rate(self) -> Decimal:
        """
        Fetch the latest rate (units of ARS per 1 USD).

        Raises:
            ExchangeRateProviderError: on non-2xx status, transport error,
                invalid URL, timeout or a payload without a usable rate.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(self.url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ExchangeRateProviderError(PROVIDER_NAME, f"Request failed: {e!r}") from e

        if not response.is_success:
            raise ExchangeRateProviderError(PROVIDER_NAME, f"API error {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ExchangeRateProviderError(PROVIDER_NAME, "Invalid JSON payload") from e

        rate = self._parse_rate(data)
        logger.debug(f"Bluelytics: oficial value_avg = {rate}")
        return rate

    @staticmethod
    def _parse_rate(data: dict) -> Decimal:
        value: Optional[object] = None
        if isinstance(data, dict):
            oficial = data.get("oficial")
            if isinstance(oficial, dict):
                value = oficial.get("value_avg")

        if value is None or isinstance(value, bool):
            raise ExchangeRateProviderError(PROVIDER_NAME, "Missing oficial.value_avg")

        try:
            rate = Decimal(str(value))
        except InvalidOperation as e:
            raise ExchangeRateProviderError(PROVIDER_NAME, f"Non-numeric rate: {value!r}") from e

        if not rate.is_finite() or rate <= 0:
            raise ExchangeRateProviderError(PROVIDER_NAME, f"Non-positive rate: {rate}")
        return rate
