"""
Portfolio Tracker - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from datetime import timedelta
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from portfolio_tracker import __version__
from portfolio_tracker.config import settings
from portfolio_tracker.api.v1.router import api_router
from portfolio_tracker.data_providers.adapters import BluelyticsAdapter
from portfolio_tracker.db.database import async_session_maker, engine, init_db
from portfolio_tracker.db.repositories import ExchangeRateStore
from portfolio_tracker.services.exchange_rate_cache import ExchangeRateCache
from portfolio_tracker.utils.exceptions import register_exception_handlers
from portfolio_tracker.utils.logger import setup_logging


def build_rate_cache() -> ExchangeRateCache:
    """Wire the process-wide exchange rate cache from settings."""
    return ExchangeRateCache(
        store=ExchangeRateStore(async_session_maker),
        provider=BluelyticsAdapter(
            url=settings.EXCHANGE_RATE_API_URL,
            timeout=settings.EXCHANGE_RATE_TIMEOUT_SECONDS,
        ),
        ttl=timedelta(seconds=settings.EXCHANGE_RATE_TTL_SECONDS),
        base_currency=settings.EXCHANGE_RATE_BASE,
        quote_currency=settings.EXCHANGE_RATE_QUOTE,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events handler."""
    # Startup
    setup_logging()
    logger.info("Starting Portfolio Tracker...")

    await init_db()
    logger.info("Database initialized")

    app.state.rate_cache = build_rate_cache()

    if settings.PRELOAD_EXCHANGE_RATES:
        try:
            await app.state.rate_cache.preload_rates()
        except Exception as e:
            logger.error(f"Exchange rate preload error (non-fatal): {e}")

    logger.info("Portfolio Tracker started successfully")

    yield

    # Shutdown
    logger.info("Shutting down Portfolio Tracker...")
    await engine.dispose()


def create_application() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        description="Portfolio valuation in USD/ARS with rebalance and stale price alerts",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Include API router
    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint for load balancers."""
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": __version__,
        }

    return app


# Create the application instance
app = create_application()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "portfolio_tracker.main:app",
        host=settings.BACKEND_HOST,
        port=settings.BACKEND_PORT,
        reload=settings.DEBUG,
        log_level="info"
    )
