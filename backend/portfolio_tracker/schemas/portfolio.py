"""
Portfolio Tracker - Portfolio Summary Schemas
"""
from typing import Optional

from portfolio_tracker.schemas.common import CamelModel


class ExchangeRateInfoSchema(CamelModel):
    usd_to_ars: str
    fetched_at: str
    is_stale: bool


class PositionSchema(CamelModel):
    """Valued position. Money fields are 2-decimal strings."""
    asset_id: int
    ticker: str
    name: str
    category: str
    quantity: str
    current_price: Optional[str] = None
    original_value: Optional[str] = None
    original_currency: str
    display_value: Optional[str] = None
    display_currency: str
    target_percentage: Optional[str] = None
    price_updated_at: Optional[str] = None
    price_status: str


class PortfolioSummarySchema(CamelModel):
    total_value: str
    display_currency: str
    exchange_rate_info: Optional[ExchangeRateInfoSchema] = None
    positions: list[PositionSchema]
    excluded_count: Optional[int] = None


class PortfolioSummaryResponse(CamelModel):
    data: PortfolioSummarySchema
