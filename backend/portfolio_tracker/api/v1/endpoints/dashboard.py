"""
Portfolio Tracker - Dashboard Endpoints
"""
from decimal import Decimal
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, Query

from portfolio_tracker.config import settings
from portfolio_tracker.core.alerts import AlertGenerator, ThresholdOverrides
from portfolio_tracker.dependencies import get_alert_generator, get_current_user_id
from portfolio_tracker.schemas.dashboard import DashboardResponse
from portfolio_tracker.utils.currency import Currency

router = APIRouter()


@router.get(
    "",
    response_model=DashboardResponse,
    response_model_exclude_unset=True,
)
async def get_dashboard(
    user_id: Annotated[int, Depends(get_current_user_id)],
    generator: Annotated[AlertGenerator, Depends(get_alert_generator)],
    currency: Currency = Query(
        Currency(settings.DEFAULT_DISPLAY_CURRENCY),
        description="Display currency for position values and total",
    ),
    deviation_threshold: Optional[Decimal] = Query(
        None,
        alias="deviationThreshold",
        ge=0,
        le=100,
        description="Rebalance alert threshold in percentage points (default: user setting)",
    ),
    stale_days: Optional[int] = Query(
        None,
        alias="staleDays",
        ge=1,
        description="Days after which a price is stale (default: user setting)",
    ),
):
    """
    Get dashboard data: positions with actual percentages and deviations,
    plus stale-price, missing-price and rebalance alerts.
    """
    overrides = ThresholdOverrides(deviation_pct=deviation_threshold, stale_days=stale_days)
    dashboard = await generator.get_dashboard(user_id, overrides, currency)
    return {"data": dashboard.to_dict()}
