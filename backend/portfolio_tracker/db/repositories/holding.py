"""
Holding Repository

Read side of holdings joined with their assets, as consumed by the
portfolio valuator.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from portfolio_tracker.db.models.asset import Asset
from portfolio_tracker.db.models.holding import Holding
from portfolio_tracker.utils.currency import Currency


@dataclass(frozen=True)
class HoldingRow:
    """A holding flattened with the asset fields valuation needs."""
    asset_id: int
    ticker: str
    name: str
    category: str
    currency: Currency
    quantity: Decimal
    current_price: Optional[Decimal]
    price_updated_at: Optional[datetime]
    target_percentage: Optional[Decimal]


class HoldingRepository:
    """Repository for Holding read operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_holdings_with_assets(self, user_id: int) -> list[HoldingRow]:
        """
        Get all holdings for a user joined with their asset.

        Ordered by ticker ascending so valuation output is deterministic.
        """
        result = await self.db.execute(
            select(Holding, Asset)
            .join(Asset, Holding.asset_id == Asset.id)
            .where(Holding.user_id == user_id)
            .order_by(Asset.ticker.asc())
        )

        rows = []
        for holding, asset in result.all():
            category = asset.category.value if hasattr(asset.category, "value") else asset.category
            rows.append(HoldingRow(
                asset_id=asset.id,
                ticker=asset.ticker,
                name=asset.name,
                category=category,
                currency=Currency(asset.currency),
                quantity=Decimal(holding.quantity),
                current_price=Decimal(asset.current_price) if asset.current_price is not None else None,
                price_updated_at=asset.price_updated_at,
                target_percentage=(
                    Decimal(asset.target_percentage) if asset.target_percentage is not None else None
                ),
            ))
        return rows
