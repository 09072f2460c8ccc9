"""
Portfolio Tracker - API v1 Router
"""
from fastapi import APIRouter

from portfolio_tracker.api.v1.endpoints import dashboard, exchange_rates, portfolio

api_router = APIRouter()


# API v1 root endpoint
@api_router.get("/", tags=["API Info"])
async def api_root():
    """API v1 root - returns version info."""
    return {
        "api": "Portfolio Tracker",
        "version": "v1",
        "status": "operational"
    }


api_router.include_router(portfolio.router, prefix="/portfolio", tags=["Portfolio"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(exchange_rates.router, prefix="/exchange-rates", tags=["Exchange Rates"])
