# loverituals/models/tool_metadata_table.py
# Tool catalog: one row per interactive tool

from sqlalchemy import Table, Column, Text, Boolean, TIMESTAMP, Index, true
from sqlalchemy.dialects.postgresql import JSONB

from loverituals.db.base import metadata


tool_metadata = Table(
    'tool_metadata',
    metadata,
    Column('tool_key', Text, primary_key=True),
    Column('tool_name', Text, nullable=False),
    Column('description', Text, nullable=True),
    Column('tag', Text, nullable=True),
    Column('category', Text, nullable=True),  # legacy free-text category
    Column('default_config', JSONB, nullable=False),
    Column('is_active', Boolean, nullable=False, server_default=true()),
    Column('created_at', TIMESTAMP(timezone=True), nullable=False),
    Column('updated_at', TIMESTAMP(timezone=True), nullable=False),
    Index('ix_tool_metadata_active_updated', 'is_active', 'updated_at'),
    schema='public',
)
