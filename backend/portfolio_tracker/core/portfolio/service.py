"""
Portfolio Valuation Service

Aggregates a user's holdings into priced positions and a portfolio
total in one display currency.
"""
from decimal import Decimal
from typing import Optional
from loguru import logger

from portfolio_tracker.core.portfolio.positions import (
    ExchangeRateInfo,
    PortfolioSummary,
    Position,
    PriceStatus,
)
from portfolio_tracker.db.repositories.holding import HoldingRepository, HoldingRow
from portfolio_tracker.services.exchange_rate_cache import RateResult
from portfolio_tracker.utils.currency import (
    Currency,
    CurrencyConverter,
    CurrencyLike,
    parse_currency,
    round2,
)
from portfolio_tracker.utils.exceptions import ExchangeRateUnavailableError, ValidationError


class PortfolioValuator:
    """
    Values holdings as quantity x price and converts to a display currency.

    The pair rate is resolved at most once per call, and only when some
    holding is quoted in a currency other than the display currency. If
    it cannot be resolved the summary is still produced: exchange rate
    info is None and foreign positions keep their original value.

    Rounding happens where values are produced (price x quantity and
    conversion), so the total is the exact sum of the displayed values.

    Usage:
        valuator = PortfolioValuator(HoldingRepository(db), converter)
        summary = await valuator.get_summary(user_id=1, display_currency="ARS")
    """

    def __init__(self, holdings: HoldingRepository, converter: CurrencyConverter):
        self.holdings = holdings
        self.converter = converter

    async def get_summary(self, user_id: int, display_currency: CurrencyLike = Currency.USD) -> PortfolioSummary:
        """
        Get the portfolio summary for a user.

        Args:
            user_id: Owner user ID
            display_currency: Currency every display value is expressed in

        Returns:
            PortfolioSummary with positions ordered by ticker
        """
        try:
            display = parse_currency(display_currency)
        except ValueError:
            raise ValidationError(
                f"Unsupported display currency: {display_currency}",
                details={"currency": str(display_currency)},
            )

        rows = await self.holdings.get_holdings_with_assets(user_id)

        rate_result = None
        if any(row.currency != display for row in rows):
            rate_result = await self._resolve_rate(user_id)

        positions = [self._value_row(row, display, rate_result) for row in rows]

        priced = [p for p in positions if p.is_priced]
        total_value = sum((p.display_value for p in priced), Decimal("0.00"))

        summary = PortfolioSummary(
            total_value=total_value,
            display_currency=display,
            exchange_rate_info=ExchangeRateInfo.from_rate(rate_result) if rate_result else None,
            positions=positions,
            excluded_count=len(positions) - len(priced),
        )

        logger.debug(
            f"Valued portfolio for user {user_id}: {len(positions)} positions, "
            f"total {total_value} {display.value}"
        )
        return summary

    async def _resolve_rate(self, user_id: int) -> Optional[RateResult]:
        try:
            return await self.converter.get_pair_rate()
        except ExchangeRateUnavailableError as e:
            logger.warning(
                f"Exchange rate unavailable while valuing portfolio for user {user_id}; "
                f"foreign positions left unconverted: {e.message}"
            )
            return None

    def _value_row(
        self,
        row: HoldingRow,
        display: Currency,
        rate_result: Optional[RateResult],
    ) -> Position:
        if row.current_price is None:
            original_value = None
            display_value = None
            display_currency = display
            status = PriceStatus.MISSING
        else:
            original_value = round2(row.quantity * row.current_price)
            status = PriceStatus.SET
            display_currency = display
            if row.currency == display:
                display_value = original_value
            elif rate_result is not None:
                conversion = self.converter.convert_with_rate(original_value, row.currency, display, rate_result)
                display_value = round2(conversion.converted)
            else:
                # No rate: left in its own currency
                display_value = original_value
                display_currency = row.currency

        return Position(
            asset_id=row.asset_id,
            ticker=row.ticker,
            name=row.name,
            category=row.category,
            quantity=row.quantity,
            current_price=row.current_price,
            original_value=original_value,
            original_currency=row.currency,
            display_value=display_value,
            display_currency=display_currency,
            target_percentage=row.target_percentage,
            price_updated_at=row.price_updated_at,
            price_status=status,
        )
