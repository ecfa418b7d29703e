"""create tool_configs table

Revision ID: 3f9c1d2a7b10
Revises:
Create Date: 2025-09-02 10:12:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f9c1d2a7b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create tool_configs table for share link persistence
    op.create_table(
        'tool_configs',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('tool_key', sa.Text(), nullable=False),
        sa.Column('config', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('share_id', sa.Text(), nullable=False),
        sa.Column('owner_id', sa.Text(), nullable=False),
        sa.Column('fingerprint', sa.Text(), nullable=True),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        schema='public'
    )
    # Live share ids are unique; soft-deleted rows are excluded
    op.create_index(
        'uq_tool_configs_share_id_live',
        'tool_configs',
        ['share_id'],
        unique=True,
        schema='public',
        postgresql_where=sa.text('is_deleted = false'),
    )
    op.create_index(
        'ix_tool_configs_share_id',
        'tool_configs',
        ['share_id'],
        schema='public'
    )
    op.create_index(
        'ix_tool_configs_owner_id',
        'tool_configs',
        ['owner_id'],
        schema='public'
    )


def downgrade() -> None:
    op.drop_index('ix_tool_configs_owner_id', table_name='tool_configs', schema='public')
    op.drop_index('ix_tool_configs_share_id', table_name='tool_configs', schema='public')
    op.drop_index('uq_tool_configs_share_id_live', table_name='tool_configs', schema='public')
    op.drop_table('tool_configs', schema='public')
