"""Initial stall POS schema

Revision ID: 3f9c2a7d1b40
Revises:
Create Date: 2024-03-01 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f9c2a7d1b40'
down_revision = None
branch_labels = None
depends_on = None


def _summary_columns():
    return [
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('total_amount', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('gpay_amount', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('cash_amount', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('order_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('username', sa.String(64), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'categories',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(128), nullable=False),
        sa.Column('sub_categories', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_categories_name', 'categories', ['name'], unique=True)

    op.create_table(
        'menu_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('price', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('category', sa.String(128), nullable=False),
        sa.Column('sub_category', sa.String(128), nullable=True),
        sa.Column('image', sa.Text(), nullable=False),
        sa.Column('available', sa.Boolean(), nullable=False, server_default='1'),
    )

    op.create_table(
        'transactions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('items', sa.JSON(), nullable=False),
        sa.Column('total_amount', sa.Integer(), nullable=False),
        sa.Column('payment_method', sa.String(16), nullable=False),
        sa.Column('biller_name', sa.String(128), nullable=False),
        sa.Column('split_payment', sa.JSON(), nullable=True),
        sa.Column('extras', sa.JSON(), nullable=True),
        sa.Column('creditor', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('date', sa.String(10), nullable=False),
        sa.Column('day_name', sa.String(16), nullable=False),
        sa.Column('time', sa.String(16), nullable=False),
    )
    op.create_index('ix_transactions_created_at', 'transactions', ['created_at'])
    op.create_index('ix_transactions_date', 'transactions', ['date'])

    op.create_table('daily_summaries', sa.Column('date', sa.String(10), nullable=False),
                    *_summary_columns())
    op.create_index('ix_daily_summaries_date', 'daily_summaries', ['date'], unique=True)

    op.create_table('weekly_summaries', sa.Column('week_start', sa.String(10), nullable=False),
                    sa.Column('week_end', sa.String(10), nullable=False), *_summary_columns())
    op.create_index('ix_weekly_summaries_week_start', 'weekly_summaries', ['week_start'], unique=True)

    op.create_table('monthly_summaries', sa.Column('month', sa.String(7), nullable=False),
                    *_summary_columns())
    op.create_index('ix_monthly_summaries_month', 'monthly_summaries', ['month'], unique=True)

    op.create_table(
        'inventory_sessions',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('date', sa.String(10), nullable=False),
        sa.Column('status', sa.String(16), nullable=False),
        sa.Column('start_time', sa.DateTime(), nullable=False),
        sa.Column('end_time', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_inventory_sessions_date', 'inventory_sessions', ['date'], unique=True)

    op.create_table(
        'inventory_items',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('session_id', sa.String(36), sa.ForeignKey('inventory_sessions.id'), nullable=False),
        sa.Column('menu_item_id', sa.String(36), nullable=False),
        sa.Column('stock_in', sa.Integer(), nullable=False),
        sa.Column('stock_out', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('stock_left', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('session_id', 'menu_item_id', name='uq_inventory_item_session_menu'),
    )
    op.create_index('ix_inventory_items_session_id', 'inventory_items', ['session_id'])


def downgrade():
    op.drop_table('inventory_items')
    op.drop_table('inventory_sessions')
    op.drop_table('monthly_summaries')
    op.drop_table('weekly_summaries')
    op.drop_table('daily_summaries')
    op.drop_table('transactions')
    op.drop_table('menu_items')
    op.drop_table('categories')
    op.drop_table('users')
