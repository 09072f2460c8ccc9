"""
Portfolio Tracker - Configuration Settings
"""
from decimal import Decimal
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # =========================
    # Application Settings
    # =========================
    APP_NAME: str = "Portfolio Tracker"
    APP_ENV: str = "development"
    DEBUG: bool = True
    API_V1_PREFIX: str = "/api/v1"

    # =========================
    # Server Configuration
    # =========================
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 8000
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                return [origin.strip() for origin in v.split(",")]
        return v

    # =========================
    # Database - PostgreSQL
    # =========================
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "portfolio_tracker"
    POSTGRES_USER: str = "portfolio_user"
    POSTGRES_PASSWORD: str = "dev_password_123"
    # Direct DATABASE_URL from environment (for Docker - overrides individual settings)
    DATABASE_URL: str = ""

    @property
    def database_url(self) -> str:
        """Get the async database URL."""
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            # Ensure it uses asyncpg driver
            if url.startswith("postgresql://"):
                url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
            return url
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def DATABASE_URL_SYNC(self) -> str:
        """Get the sync database URL for Alembic."""
        url = self.database_url
        if "+asyncpg" in url:
            url = url.replace("postgresql+asyncpg://", "postgresql://", 1)
        return url

    # =========================
    # Exchange Rates
    # =========================
    EXCHANGE_RATE_API_URL: str = "https://api.bluelytics.com.ar/v2/latest"
    EXCHANGE_RATE_TTL_SECONDS: int = 3600  # 1 hour
    EXCHANGE_RATE_TIMEOUT_SECONDS: float = 10.0
    EXCHANGE_RATE_BASE: str = "USD"
    EXCHANGE_RATE_QUOTE: str = "ARS"
    PRELOAD_EXCHANGE_RATES: bool = True

    # =========================
    # Valuation / Dashboard defaults
    # =========================
    DEFAULT_DISPLAY_CURRENCY: str = "USD"
    DEFAULT_REBALANCE_THRESHOLD: Decimal = Decimal("5")
    DEFAULT_PRICE_ALERT_DAYS: int = 7

    # =========================
    # Logging
    # =========================
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True


# Create global settings instance
settings = Settings()
