# loverituals/models/tool_config_table.py
# Saved tool configurations reachable through a public share id

from sqlalchemy import Table, Column, Text, Boolean, TIMESTAMP, Index, text, false
from sqlalchemy.dialects.postgresql import JSONB

from loverituals.db.base import metadata


tool_configs = Table(
    'tool_configs',
    metadata,
    Column('id', Text, primary_key=True),  # cfg_ + random, internal only
    Column('tool_key', Text, nullable=False),
    Column('config', JSONB, nullable=False),  # opaque per-tool payload
    Column('share_id', Text, nullable=False),  # public short id
    Column('owner_id', Text, nullable=False),
    Column('fingerprint', Text, nullable=True),
    Column('expires_at', TIMESTAMP(timezone=True), nullable=True),
    Column('is_deleted', Boolean, nullable=False, server_default=false()),
    Column('created_at', TIMESTAMP(timezone=True), nullable=False),
    Column('updated_at', TIMESTAMP(timezone=True), nullable=False),
    # share_id is unique among live rows only; deleted rows may reuse it
    Index(
        'uq_tool_configs_share_id_live',
        'share_id',
        unique=True,
        postgresql_where=text('is_deleted = false'),
    ),
    Index('ix_tool_configs_share_id', 'share_id'),
    Index('ix_tool_configs_owner_id', 'owner_id'),
    schema='public',
)
