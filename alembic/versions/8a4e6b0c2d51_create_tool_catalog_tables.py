"""create tool_metadata, categories and tool_categories tables

Revision ID: 8a4e6b0c2d51
Revises: 3f9c1d2a7b10
Create Date: 2025-09-05 16:40:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '8a4e6b0c2d51'
down_revision: Union[str, None] = '3f9c1d2a7b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'tool_metadata',
        sa.Column('tool_key', sa.Text(), nullable=False),
        sa.Column('tool_name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('tag', sa.Text(), nullable=True),
        sa.Column('category', sa.Text(), nullable=True),
        sa.Column('default_config', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('tool_key'),
        schema='public'
    )
    op.create_index(
        'ix_tool_metadata_active_updated',
        'tool_metadata',
        ['is_active', 'updated_at'],
        schema='public'
    )

    op.create_table(
        'categories',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sort', sa.Integer(), server_default='0', nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name', name='uq_categories_name'),
        schema='public'
    )

    op.create_table(
        'tool_categories',
        sa.Column('tool_key', sa.Text(), nullable=False),
        sa.Column('category_id', sa.Text(), nullable=False),
        sa.ForeignKeyConstraint(['tool_key'], ['public.tool_metadata.tool_key'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['category_id'], ['public.categories.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('tool_key', 'category_id'),
        schema='public'
    )


def downgrade() -> None:
    op.drop_table('tool_categories', schema='public')
    op.drop_table('categories', schema='public')
    op.drop_index('ix_tool_metadata_active_updated', table_name='tool_metadata', schema='public')
    op.drop_table('tool_metadata', schema='public')
