"""
Portfolio Tracker - Holding Model
"""
from decimal import Decimal
from sqlalchemy import Column, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from portfolio_tracker.db.database import Base


class Holding(Base):
    """Quantity of an asset held by a user (one holding per asset)."""

    __tablename__ = "holdings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    asset_id = Column(Integer, ForeignKey("assets.id", ondelete="CASCADE"), nullable=False, unique=True)

    quantity = Column(Numeric(20, 8), nullable=False, default=Decimal("0"))

    # Relationships
    user = relationship("User", back_populates="holdings")
    asset = relationship("Asset", back_populates="holding")

    def __repr__(self):
        return f"<Holding asset={self.asset_id} qty={self.quantity}>"
