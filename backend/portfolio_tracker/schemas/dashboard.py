"""
Portfolio Tracker - Dashboard Schemas
"""
from typing import Any, Optional

from portfolio_tracker.schemas.common import CamelModel
from portfolio_tracker.schemas.portfolio import ExchangeRateInfoSchema, PositionSchema


class DashboardPositionSchema(PositionSchema):
    actual_percentage: Optional[str] = None
    deviation: Optional[str] = None


class AlertSchema(CamelModel):
    type: str
    asset_id: Optional[int] = None
    ticker: str
    message: str
    severity: str
    data: Optional[dict[str, Any]] = None


class ThresholdsSchema(CamelModel):
    deviation_pct: str
    stale_days: int


class DashboardSchema(CamelModel):
    total_value: str
    display_currency: str
    exchange_rate_info: Optional[ExchangeRateInfoSchema] = None
    thresholds: ThresholdsSchema
    positions: list[DashboardPositionSchema]
    alerts: list[AlertSchema]


class DashboardResponse(CamelModel):
    data: DashboardSchema
