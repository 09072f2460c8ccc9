"""
Portfolio Tracker - User Repository
Settings reads for the dashboard threshold fallback
"""
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio_tracker.db.models.user import User
from portfolio_tracker.utils.exceptions import NotFoundError


@dataclass(frozen=True)
class UserSettings:
    """Persisted per-user alert thresholds."""
    rebalance_threshold: Decimal
    price_alert_days: int


class UserRepository:
    """Repository for User reads."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_settings(self, user_id: int) -> UserSettings:
        """
        Get the dashboard settings for a user.

        Args:
            user_id: The user's ID

        Returns:
            UserSettings with rebalance threshold and price alert days

        Raises:
            NotFoundError: If the user does not exist
        """
        result = await self.session.execute(
            select(User.rebalance_threshold, User.price_alert_days).where(User.id == user_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError("User")

        return UserSettings(
            rebalance_threshold=Decimal(row.rebalance_threshold),
            price_alert_days=int(row.price_alert_days),
        )
