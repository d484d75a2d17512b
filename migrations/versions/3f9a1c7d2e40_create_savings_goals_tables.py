"""create savings goals tables

Revision ID: 3f9a1c7d2e40
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision: str = '3f9a1c7d2e40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create event log, projector checkpoints and goal read models."""
    op.create_table(
        'event_log',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('event_type', sa.String(length=128), nullable=False),
        sa.Column('payload_json', JSONB, nullable=False),
        sa.Column('occurred_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('idempotency_key', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()'), nullable=False),
    )
    op.create_index('ix_event_log_event_type', 'event_log', ['event_type'])
    op.create_index('ix_event_log_occurred_at', 'event_log', ['occurred_at'])
    op.create_index('ix_event_log_idempotency_key', 'event_log', ['idempotency_key'], unique=True)

    op.create_table(
        'projector_checkpoints',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('projector_name', sa.String(128), nullable=False),
        sa.Column('last_event_id', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.func.now()),
        sa.UniqueConstraint('projector_name', name='uq_projector_name'),
    )

    op.create_table(
        'accounts',
        sa.Column('account_id', sa.String(128), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('balance', sa.Numeric(precision=20, scale=2), nullable=False, server_default='0'),
        sa.Column('account_type', sa.String(64), nullable=True),
        sa.Column('synced_at', sa.TIMESTAMP(timezone=True), nullable=False),
    )

    op.create_table(
        'goals',
        sa.Column('goal_id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('target_amount', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.Column('target_date', sa.Date(), nullable=True),
        sa.Column('starting_balance', sa.Numeric(precision=20, scale=2), nullable=False,
                  server_default='0'),
        sa.Column('icon', sa.String(32), nullable=False),
        sa.Column('color', sa.String(32), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('is_completed', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('completed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.func.now()),
    )

    op.create_table(
        'goal_allocations',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('goal_id', sa.Integer(), nullable=False, index=True),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('account_id', sa.String(128), nullable=False),
        sa.Column('allocation_type', sa.String(16), nullable=False),
        sa.Column('allocation_value', sa.Numeric(precision=20, scale=2), nullable=False),
        sa.UniqueConstraint('goal_id', 'account_id', name='uq_goal_allocation_account'),
    )


def downgrade() -> None:
    """Drop savings goals tables."""
    op.drop_table('goal_allocations')
    op.drop_table('goals')
    op.drop_table('accounts')
    op.drop_table('projector_checkpoints')
    op.drop_index('ix_event_log_idempotency_key', table_name='event_log')
    op.drop_index('ix_event_log_occurred_at', table_name='event_log')
    op.drop_index('ix_event_log_event_type', table_name='event_log')
    op.drop_table('event_log')
