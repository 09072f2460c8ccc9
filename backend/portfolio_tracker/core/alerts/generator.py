"""
Dashboard Alert Generator

Evaluates a portfolio summary against the user's thresholds and
produces stale-price, missing-price and rebalance alerts.

Rules:
- Stale exchange rate: one warning for the pair, emitted first
- No price: info alert, no percentage or deviation
- Price older than stale_days (inclusive) or without an update date: warning
- |deviation| strictly greater than deviation_pct, only with a target: warning

Alerts keep encounter order (rate alert, then positions by ticker).
"""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Optional
from loguru import logger

from portfolio_tracker.core.alerts.models import (
    Alert,
    AlertSeverity,
    AlertType,
    Dashboard,
    DashboardPosition,
    ThresholdOverrides,
    Thresholds,
)
from portfolio_tracker.core.portfolio.positions import ExchangeRateInfo, PortfolioSummary, Position
from portfolio_tracker.core.portfolio.service import PortfolioValuator
from portfolio_tracker.db.repositories.user import UserRepository
from portfolio_tracker.services.exchange_rate_cache import as_utc, utcnow
from portfolio_tracker.utils.currency import Currency, CurrencyLike, round2


HUNDRED = Decimal("100")
ZERO = Decimal("0.00")


class AlertGenerator:
    """
    Builds the dashboard: positions with allocation percentages and alerts.

    Usage:
        generator = AlertGenerator(valuator, UserRepository(db))
        dashboard = await generator.get_dashboard(
            user_id=1,
            thresholds=ThresholdOverrides(deviation_pct=Decimal("5")),
        )
    """

    def __init__(
        self,
        valuator: PortfolioValuator,
        settings_repo: UserRepository,
        clock: Callable[[], datetime] = utcnow,
        rate_pair: str = "USD/ARS",
    ):
        self.valuator = valuator
        self.settings_repo = settings_repo
        self.clock = clock
        self.rate_pair = rate_pair

    async def resolve_thresholds(
        self,
        user_id: int,
        overrides: Optional[ThresholdOverrides] = None,
    ) -> Thresholds:
        """
        Merge caller overrides with persisted settings, field by field.

        Settings are only read when some field is not overridden.
        """
        overrides = overrides or ThresholdOverrides()
        if overrides.is_complete:
            return Thresholds(deviation_pct=Decimal(overrides.deviation_pct), stale_days=overrides.stale_days)

        user_settings = await self.settings_repo.get_settings(user_id)
        return Thresholds(
            deviation_pct=Decimal(
                overrides.deviation_pct if overrides.deviation_pct is not None
                else user_settings.rebalance_threshold
            ),
            stale_days=(
                overrides.stale_days if overrides.stale_days is not None
                else user_settings.price_alert_days
            ),
        )

    async def get_dashboard(
        self,
        user_id: int,
        thresholds: Optional[ThresholdOverrides] = None,
        display_currency: CurrencyLike = Currency.USD,
    ) -> Dashboard:
        """Get the dashboard for a user."""
        effective = await self.resolve_thresholds(user_id, thresholds)
        summary = await self.valuator.get_summary(user_id, display_currency)
        dashboard = self.build_dashboard(summary, effective, self.clock())

        logger.debug(f"Dashboard for user {user_id}: {len(dashboard.alerts)} alerts")
        return dashboard

    def build_dashboard(self, summary: PortfolioSummary, thresholds: Thresholds, now: datetime) -> Dashboard:
        """Evaluate alert rules over an already computed summary."""
        alerts: list[Alert] = []

        rate_alert = self._exchange_rate_alert(summary.exchange_rate_info)
        if rate_alert:
            alerts.append(rate_alert)

        positions = []
        for position in summary.positions:
            positions.append(self._evaluate_position(position, summary.total_value, thresholds, now, alerts))

        return Dashboard(
            total_value=summary.total_value,
            display_currency=summary.display_currency,
            exchange_rate_info=summary.exchange_rate_info,
            thresholds=thresholds,
            positions=positions,
            alerts=alerts,
        )

    def _exchange_rate_alert(self, info: Optional[ExchangeRateInfo]) -> Optional[Alert]:
        if info is None or not info.is_stale:
            return None

        base, _, quote = self.rate_pair.partition("/")
        return Alert(
            type=AlertType.STALE_PRICE,
            asset_id=None,
            ticker=self.rate_pair,
            message=(
                f"{self.rate_pair} exchange rate is stale "
                f"(last updated {as_utc(info.fetched_at):%Y-%m-%d %H:%M} UTC)"
            ),
            severity=AlertSeverity.WARNING,
            data={
                "baseCurrency": base,
                "quoteCurrency": quote,
                "fetchedAt": info.fetched_at.isoformat(),
            },
        )

    def _evaluate_position(
        self,
        position: Position,
        total_value: Decimal,
        thresholds: Thresholds,
        now: datetime,
        alerts: list[Alert],
    ) -> DashboardPosition:
        if not position.is_priced:
            alerts.append(Alert(
                type=AlertType.MISSING_PRICE,
                asset_id=position.asset_id,
                ticker=position.ticker,
                message=f"{position.ticker} has no price set",
                severity=AlertSeverity.INFO,
            ))
            return DashboardPosition(position=position, actual_percentage=None, deviation=None)

        if total_value > 0:
            actual = round2(position.display_value / total_value * HUNDRED)
        else:
            actual = ZERO
        deviation = actual - (position.target_percentage if position.target_percentage is not None else ZERO)

        stale_alert = self._stale_price_alert(position, thresholds.stale_days, now)
        if stale_alert:
            alerts.append(stale_alert)

        if position.target_percentage is not None and abs(deviation) > thresholds.deviation_pct:
            direction = "overweight" if deviation > 0 else "underweight"
            magnitude = abs(deviation).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            alerts.append(Alert(
                type=AlertType.REBALANCE_NEEDED,
                asset_id=position.asset_id,
                ticker=position.ticker,
                message=f"{position.ticker} is {magnitude}% {direction}",
                severity=AlertSeverity.WARNING,
                data={
                    "deviation": str(round2(deviation)),
                    "direction": direction,
                },
            ))

        return DashboardPosition(position=position, actual_percentage=actual, deviation=deviation)

    @staticmethod
    def _stale_price_alert(position: Position, stale_days: int, now: datetime) -> Optional[Alert]:
        if position.price_updated_at is None:
            return Alert(
                type=AlertType.STALE_PRICE,
                asset_id=position.asset_id,
                ticker=position.ticker,
                message=f"{position.ticker} price has no update date",
                severity=AlertSeverity.WARNING,
            )

        # timedelta.days floors
        days_old = (as_utc(now) - as_utc(position.price_updated_at)).days
        if days_old < stale_days:
            return None

        return Alert(
            type=AlertType.STALE_PRICE,
            asset_id=position.asset_id,
            ticker=position.ticker,
            message=f"{position.ticker} price is {days_old} days old",
            severity=AlertSeverity.WARNING,
            data={"daysOld": days_old},
        )
