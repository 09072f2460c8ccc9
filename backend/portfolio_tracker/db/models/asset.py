"""
Portfolio Tracker - Asset Model

current_price is quoted in the asset's own currency. A NULL price means
the user never set one; zero is a legitimate price.
"""
from datetime import datetime, timezone
from enum import Enum
from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.orm import relationship

from portfolio_tracker.db.database import Base
from portfolio_tracker.utils.currency import Currency


class AssetCategory(str, Enum):
    """Asset classification."""
    ETF = "ETF"
    FCI = "FCI"
    CRYPTO = "CRYPTO"
    CASH = "CASH"


class Asset(Base):
    """User-defined asset with a manually maintained price."""

    __tablename__ = "assets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    ticker = Column(String(20), nullable=False)
    name = Column(String(100), nullable=False)
    category = Column(SQLEnum(AssetCategory), nullable=False)
    currency = Column(SQLEnum(Currency), nullable=False, default=Currency.USD)

    # Pricing (in asset currency)
    current_price = Column(Numeric(20, 8), nullable=True)
    price_updated_at = Column(DateTime(timezone=True), nullable=True)

    # Allocation target, 0-100
    target_percentage = Column(Numeric(5, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint('user_id', 'ticker', name='uq_assets_user_ticker'),
    )

    # Relationships
    user = relationship("User", back_populates="assets")
    holding = relationship("Holding", back_populates="asset", uselist=False)

    def __repr__(self):
        return f"<Asset {self.ticker} {self.currency}>"
