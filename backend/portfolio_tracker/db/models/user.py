"""
Portfolio Tracker - User Model

Only the columns the valuation pipeline reads are mapped here; the
per-user alert thresholds double as dashboard defaults.
"""
from datetime import datetime, timezone
from decimal import Decimal
from sqlalchemy import Column, Integer, String, Numeric, DateTime
from sqlalchemy.orm import relationship

from portfolio_tracker.db.database import Base


class User(Base):
    """Portfolio owner."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)

    # Dashboard thresholds
    rebalance_threshold = Column(Numeric(5, 2), nullable=False, default=Decimal("5.00"))
    price_alert_days = Column(Integer, nullable=False, default=7)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    assets = relationship("Asset", back_populates="user", cascade="all, delete-orphan")
    holdings = relationship("Holding", back_populates="user", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User {self.id} {self.email}>"
