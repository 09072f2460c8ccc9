"""
Portfolio Tracker - Exchange Rate Model

Persisted cache of the latest known rate per currency pair. Rows are
written only by the exchange rate cache after a successful provider
fetch and are superseded in place, never deleted.

Example data:
- USD/ARS: 1045.50 (1 USD = 1045.50 ARS)
"""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Numeric, DateTime, UniqueConstraint, Index

from portfolio_tracker.db.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExchangeRate(Base):
    """Foreign exchange rate model.

    Attributes:
        base_currency: The base currency code (e.g., 'USD')
        quote_currency: The quote currency code (e.g., 'ARS')
        rate: The exchange rate (1 base = rate quote)
        source: Data source identifier ('bluelytics', ...)
        fetched_at: Timestamp when rate was fetched from source
    """

    __tablename__ = "exchange_rates"

    id = Column(Integer, primary_key=True, index=True)

    # Currency pair
    base_currency = Column(String(3), nullable=False)
    quote_currency = Column(String(3), nullable=False)

    # Rate value (1 base = rate quote)
    rate = Column(Numeric(20, 10), nullable=False)

    # Source metadata
    source = Column(String(50), nullable=False, default="bluelytics")
    fetched_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        UniqueConstraint('base_currency', 'quote_currency', name='uq_exchange_rates_pair'),
        Index('ix_exchange_rates_pair', 'base_currency', 'quote_currency'),
    )

    def __repr__(self):
        return f"<ExchangeRate {self.base_currency}/{self.quote_currency}={self.rate}>"
