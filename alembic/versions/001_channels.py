"""Create channels table with pricing fields

Revision ID: 001_channels
Revises:
Create Date: 2026-10-17

This migration adds:
- channels: gateway channels with unified model_configs and the legacy
  model_ratio / completion_ratio maps
- version: optimistic concurrency token used by pricing writes
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_channels'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'channels',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(255), nullable=False, server_default=''),
        sa.Column('type', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('model_configs', sa.Text(), nullable=True),
        sa.Column('model_ratio', sa.Text(), nullable=True),
        sa.Column('completion_ratio', sa.Text(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_channels_name', 'channels', ['name'])


def downgrade() -> None:
    op.drop_index('ix_channels_name', table_name='channels')
    op.drop_table('channels')
