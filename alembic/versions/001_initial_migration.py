"""Initial migration

Revision ID: 0001
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create trades table
    op.create_table('trades',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('trade_date', sa.Date(), nullable=False),
        sa.Column('trade_time', sa.String(length=8), nullable=False),
        sa.Column('exit_time', sa.String(length=8), nullable=True),
        sa.Column('day_of_week', sa.String(length=10), nullable=True),
        sa.Column('session', sa.String(length=20), nullable=False),
        sa.Column('news_event', sa.Boolean(), nullable=True),
        sa.Column('news_details', sa.Text(), nullable=True),
        sa.Column('h4_trend', sa.String(length=20), nullable=True),
        sa.Column('h4_poi_type', sa.String(length=30), nullable=True),
        sa.Column('h4_poi_price', sa.Float(), nullable=True),
        sa.Column('h4_target_price', sa.Float(), nullable=True),
        sa.Column('h4_notes', sa.Text(), nullable=True),
        sa.Column('m15_choch', sa.Boolean(), nullable=True),
        sa.Column('m15_choch_price', sa.Float(), nullable=True),
        sa.Column('m15_poi_type', sa.String(length=30), nullable=True),
        sa.Column('m15_poi_price', sa.Float(), nullable=True),
        sa.Column('m15_retracement', sa.Boolean(), nullable=True),
        sa.Column('m15_notes', sa.Text(), nullable=True),
        sa.Column('m1_choch', sa.Boolean(), nullable=True),
        sa.Column('m1_entry_type', sa.String(length=50), nullable=True),
        sa.Column('m1_entry_count', sa.Integer(), nullable=True),
        sa.Column('m1_notes', sa.Text(), nullable=True),
        sa.Column('direction', sa.String(length=5), nullable=False),
        sa.Column('account_balance', sa.Float(), nullable=False),
        sa.Column('entry_price', sa.Float(), nullable=False),
        sa.Column('stop_loss', sa.Float(), nullable=False),
        sa.Column('take_profit', sa.Float(), nullable=True),
        sa.Column('exit_price', sa.Float(), nullable=True),
        sa.Column('risk_percent', sa.Float(), nullable=False),
        sa.Column('risk_dollar', sa.Float(), nullable=False),
        sa.Column('position_size', sa.Float(), nullable=False),
        sa.Column('risk_reward_ratio', sa.Float(), nullable=True),
        sa.Column('break_even_applied', sa.Boolean(), nullable=True),
        sa.Column('exit_reason', sa.String(length=100), nullable=True),
        sa.Column('pl_dollar', sa.Float(), nullable=True),
        sa.Column('pl_percent', sa.Float(), nullable=True),
        sa.Column('trade_result', sa.String(length=10), nullable=True),
        sa.Column('trade_duration', sa.String(length=20), nullable=True),
        sa.Column('pre_emotion', sa.String(length=100), nullable=True),
        sa.Column('during_emotion', sa.String(length=100), nullable=True),
        sa.Column('post_feeling', sa.String(length=100), nullable=True),
        sa.Column('plan_followed', sa.String(length=20), nullable=True),
        sa.Column('mistakes_made', sa.Text(), nullable=True),
        sa.Column('lesson_learned', sa.Text(), nullable=True),
        sa.Column('screenshot_url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_trades_id'), 'trades', ['id'], unique=False)
    op.create_index(op.f('ix_trades_user_id'), 'trades', ['user_id'], unique=False)
    op.create_index(op.f('ix_trades_trade_date'), 'trades', ['trade_date'], unique=False)
    op.create_index(op.f('ix_trades_m1_entry_type'), 'trades', ['m1_entry_type'], unique=False)

    # Create user_profiles table
    op.create_table('user_profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('account_balance', sa.Float(), nullable=False),
        sa.Column('starting_balance', sa.Float(), nullable=False),
        sa.Column('default_risk_percent', sa.Float(), nullable=False),
        sa.Column('daily_risk_limit', sa.Float(), nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_user_profiles_id'), 'user_profiles', ['id'], unique=False)
    op.create_index(op.f('ix_user_profiles_user_id'), 'user_profiles', ['user_id'], unique=True)

    # Create weekly_reviews table
    op.create_table('weekly_reviews',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('week_start_date', sa.Date(), nullable=False),
        sa.Column('week_end_date', sa.Date(), nullable=False),
        sa.Column('total_trades', sa.Integer(), nullable=True),
        sa.Column('win_rate', sa.Float(), nullable=True),
        sa.Column('average_rr', sa.Float(), nullable=True),
        sa.Column('profit_factor', sa.Float(), nullable=True),
        sa.Column('best_trade_rr', sa.Float(), nullable=True),
        sa.Column('worst_trade_rr', sa.Float(), nullable=True),
        sa.Column('best_session', sa.String(length=20), nullable=True),
        sa.Column('best_entry_type', sa.String(length=50), nullable=True),
        sa.Column('insights', sa.Text(), nullable=True),
        sa.Column('reviewed_all_trades', sa.Boolean(), nullable=True),
        sa.Column('identified_improvements', sa.Text(), nullable=True),
        sa.Column('plan_updated', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'week_start_date', name='uq_weekly_reviews_user_week')
    )
    op.create_index(op.f('ix_weekly_reviews_id'), 'weekly_reviews', ['id'], unique=False)
    op.create_index(op.f('ix_weekly_reviews_user_id'), 'weekly_reviews', ['user_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_weekly_reviews_user_id'), table_name='weekly_reviews')
    op.drop_index(op.f('ix_weekly_reviews_id'), table_name='weekly_reviews')
    op.drop_table('weekly_reviews')
    op.drop_index(op.f('ix_user_profiles_user_id'), table_name='user_profiles')
    op.drop_index(op.f('ix_user_profiles_id'), table_name='user_profiles')
    op.drop_table('user_profiles')
    op.drop_index(op.f('ix_trades_m1_entry_type'), table_name='trades')
    op.drop_index(op.f('ix_trades_trade_date'), table_name='trades')
    op.drop_index(op.f('ix_trades_user_id'), table_name='trades')
    op.drop_index(op.f('ix_trades_id'), table_name='trades')
    op.drop_table('trades')
