from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from sqlalchemy import delete, exists, func, insert, or_, select, true, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from loverituals.db.base import Database
from loverituals.middleware.error_handler import ConflictError, InvalidArgumentError
from loverituals.models.category_table import categories, tool_categories
from loverituals.models.tool_metadata_table import tool_metadata
from loverituals.schemas.tool_metadata import (
    ToolFilter,
    ToolMetadataIn,
    ToolMetadataOut,
    ToolMetadataUpdate,
    ToolSummary,
)


SUMMARY_COLUMNS = (
    tool_metadata.c.tool_key,
    tool_metadata.c.tool_name,
    tool_metadata.c.description,
    tool_metadata.c.tag,
)


async def _replace_category_links(session: AsyncSession, tool_key: str, category_ids: Iterable[str]) -> None:
    ids = sorted(set(category_ids))
    if ids:
        found = await session.execute(
            select(func.count()).select_from(categories).where(categories.c.id.in_(ids))
        )
        if found.scalar_one() != len(ids):
            raise InvalidArgumentError("Unknown category id", details={"categoryIds": ids})
    await session.execute(delete(tool_categories).where(tool_categories.c.tool_key == tool_key))
    if ids:
        await session.execute(
            insert(tool_categories),
            [{"tool_key": tool_key, "category_id": cid} for cid in ids],
        )


class ToolMetadataRepository:
    """Data access for the tool catalog."""

    def __init__(self, database: Database):
        self._db = database

    async def get(self, tool_key: str) -> Optional[ToolMetadataOut]:
        async with self._db.session() as session:
            result = await session.execute(
                select(tool_metadata).where(tool_metadata.c.tool_key == tool_key)
            )
            row = result.mappings().first()
        return ToolMetadataOut.model_validate(dict(row)) if row else None

    async def list_active(self, filters: ToolFilter) -> List[ToolSummary]:
        """Active tools, newest first, narrowed by text search, tag and category."""
        conditions = [tool_metadata.c.is_active == true()]
        if filters.q:
            pattern = f"%{filters.q}%"
            conditions.append(
                or_(tool_metadata.c.tool_name.ilike(pattern), tool_metadata.c.description.ilike(pattern))
            )
        if filters.tag:
            conditions.append(tool_metadata.c.tag == filters.tag)
        # categoryId (link table) takes precedence over the legacy text column
        if filters.category_id:
            conditions.append(
                exists().where(
                    tool_categories.c.tool_key == tool_metadata.c.tool_key,
                    tool_categories.c.category_id == filters.category_id,
                )
            )
        elif filters.category:
            conditions.append(tool_metadata.c.category == filters.category)

        stmt = select(*SUMMARY_COLUMNS).where(*conditions).order_by(tool_metadata.c.updated_at.desc())
        async with self._db.session() as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [ToolSummary.model_validate(dict(r)) for r in rows]

    async def create(self, data: ToolMetadataIn) -> ToolMetadataOut:
        now = datetime.now(timezone.utc)
        values = data.model_dump(exclude={"category_ids"})
        values.update(is_active=True, created_at=now, updated_at=now)

        async with self._db.session() as session:
            try:
                result = await session.execute(
                    insert(tool_metadata).values(**values).returning(*tool_metadata.c)
                )
                row = result.mappings().one()
                await _replace_category_links(session, data.tool_key, data.category_ids)
                await session.commit()
            except IntegrityError as e:
                raise ConflictError(f"Tool '{data.tool_key}' already exists") from e
        return ToolMetadataOut.model_validate(dict(row))

    async def update(self, tool_key: str, patch: ToolMetadataUpdate) -> Optional[ToolMetadataOut]:
        values = patch.model_dump(exclude_unset=True, exclude={"category_ids"})
        values["updated_at"] = datetime.now(timezone.utc)

        async with self._db.session() as session:
            result = await session.execute(
                update(tool_metadata)
                .where(tool_metadata.c.tool_key == tool_key)
                .values(**values)
                .returning(*tool_metadata.c)
            )
            row = result.mappings().first()
            if row is None:
                return None
            if patch.category_ids is not None:
                await _replace_category_links(session, tool_key, patch.category_ids)
            await session.commit()
        return ToolMetadataOut.model_validate(dict(row))

    async def deactivate(self, tool_key: str) -> bool:
        async with self._db.session() as session:
            result = await session.execute(
                update(tool_metadata)
                .where(tool_metadata.c.tool_key == tool_key)
                .values(is_active=False, updated_at=datetime.now(timezone.utc))
            )
            await session.commit()
        return result.rowcount > 0
