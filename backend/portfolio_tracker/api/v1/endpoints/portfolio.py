"""
Portfolio Tracker - Portfolio Endpoints
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Query

from portfolio_tracker.config import settings
from portfolio_tracker.core.portfolio import PortfolioValuator
from portfolio_tracker.dependencies import get_current_user_id, get_portfolio_valuator
from portfolio_tracker.schemas.portfolio import PortfolioSummaryResponse
from portfolio_tracker.utils.currency import Currency

router = APIRouter()


@router.get(
    "/summary",
    response_model=PortfolioSummaryResponse,
    response_model_exclude_unset=True,
)
async def get_portfolio_summary(
    user_id: Annotated[int, Depends(get_current_user_id)],
    valuator: Annotated[PortfolioValuator, Depends(get_portfolio_valuator)],
    currency: Currency = Query(
        Currency(settings.DEFAULT_DISPLAY_CURRENCY),
        description="Display currency for position values and total",
    ),
):
    """
    Get portfolio valuation with all position details.

    Positions without a price are listed but excluded from the total
    (excludedCount). If the exchange rate cannot be resolved,
    exchangeRateInfo is null and foreign positions are left unconverted.
    """
    summary = await valuator.get_summary(user_id, currency)
    return {"data": summary.to_dict()}
