# loverituals/models/category_table.py
# Tool categories and the tool <-> category link table

from sqlalchemy import Table, Column, Text, Integer, TIMESTAMP, ForeignKey, UniqueConstraint

from loverituals.db.base import metadata


categories = Table(
    'categories',
    metadata,
    Column('id', Text, primary_key=True),
    Column('name', Text, nullable=False),
    Column('description', Text, nullable=True),
    Column('sort', Integer, nullable=False, server_default='0'),
    Column('created_at', TIMESTAMP(timezone=True), nullable=False),
    Column('updated_at', TIMESTAMP(timezone=True), nullable=False),
    UniqueConstraint('name', name='uq_categories_name'),
    schema='public',
)


tool_categories = Table(
    'tool_categories',
    metadata,
    Column(
        'tool_key',
        Text,
        ForeignKey('public.tool_metadata.tool_key', ondelete='CASCADE'),
        primary_key=True,
    ),
    Column(
        'category_id',
        Text,
        ForeignKey('public.categories.id', ondelete='CASCADE'),
        primary_key=True,
    ),
    schema='public',
)
