"""Initial schema: users, assets, holdings and exchange_rates

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19 00:00:01.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('rebalance_threshold', sa.Numeric(precision=5, scale=2), nullable=False, server_default='5.00'),
        sa.Column('price_alert_days', sa.Integer(), nullable=False, server_default='7'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'assets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('ticker', sa.String(20), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('category', sa.Enum('ETF', 'FCI', 'CRYPTO', 'CASH', name='assetcategory'), nullable=False),
        sa.Column('currency', sa.Enum('USD', 'ARS', name='currency'), nullable=False),
        sa.Column('current_price', sa.Numeric(precision=20, scale=8), nullable=True),
        sa.Column('price_updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('target_percentage', sa.Numeric(precision=5, scale=2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('user_id', 'ticker', name='uq_assets_user_ticker'),
        sa.CheckConstraint(
            'target_percentage IS NULL OR (target_percentage >= 0 AND target_percentage <= 100)',
            name='ck_assets_target_percentage_range',
        ),
    )
    op.create_index('ix_assets_id', 'assets', ['id'])
    op.create_index('ix_assets_user_id', 'assets', ['user_id'])

    op.create_table(
        'holdings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('asset_id', sa.Integer(), sa.ForeignKey('assets.id', ondelete='CASCADE'), nullable=False),
        sa.Column('quantity', sa.Numeric(precision=20, scale=8), nullable=False, server_default='0'),
        sa.UniqueConstraint('asset_id', name='uq_holdings_asset_id'),
    )
    op.create_index('ix_holdings_id', 'holdings', ['id'])
    op.create_index('ix_holdings_user_id', 'holdings', ['user_id'])

    op.create_table(
        'exchange_rates',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('base_currency', sa.String(3), nullable=False),
        sa.Column('quote_currency', sa.String(3), nullable=False),
        sa.Column('rate', sa.Numeric(precision=20, scale=10), nullable=False),
        sa.Column('source', sa.String(50), nullable=False, server_default='bluelytics'),
        sa.Column('fetched_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('base_currency', 'quote_currency', name='uq_exchange_rates_pair'),
    )
    op.create_index('ix_exchange_rates_id', 'exchange_rates', ['id'])
    op.create_index('ix_exchange_rates_pair', 'exchange_rates', ['base_currency', 'quote_currency'])


def downgrade() -> None:
    op.drop_index('ix_exchange_rates_pair', table_name='exchange_rates')
    op.drop_index('ix_exchange_rates_id', table_name='exchange_rates')
    op.drop_table('exchange_rates')
    op.drop_index('ix_holdings_user_id', table_name='holdings')
    op.drop_index('ix_holdings_id', table_name='holdings')
    op.drop_table('holdings')
    op.drop_index('ix_assets_user_id', table_name='assets')
    op.drop_index('ix_assets_id', table_name='assets')
    op.drop_table('assets')
    sa.Enum(name='currency').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='assetcategory').drop(op.get_bind(), checkfirst=True)
    op.drop_index('ix_users_email', table_name='users')
    op.drop_index('ix_users_id', table_name='users')
    op.drop_table('users')
