from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Tuple

from sqlalchemy import delete, func, insert, or_, select, true, update
from sqlalchemy.exc import IntegrityError

from loverituals.constants import CATEGORY_SORT_FIELDS, CATEGORY_TOOL_SORT_FIELDS
from loverituals.db.base import Database
from loverituals.middleware.error_handler import ConflictError
from loverituals.models.category_table import categories, tool_categories
from loverituals.models.tool_metadata_table import tool_metadata
from loverituals.schemas.category import CategoryIn, CategoryOut, CategoryUpdate
from loverituals.schemas.tool_metadata import ToolSummary

NAME_CONSTRAINT = "uq_categories_name"


def _order(column, sort_order: str):
    return column.asc() if sort_order == "asc" else column.desc()


def _id_or_name(id_or_name: str):
    return or_(categories.c.id == id_or_name, categories.c.name == id_or_name)


def _is_name_conflict(error: IntegrityError) -> bool:
    return NAME_CONSTRAINT in str(error.orig)


class CategoryRepository:
    """Data access for tool categories. Lookups accept either the id or the unique name."""

    def __init__(self, database: Database):
        self._db = database

    async def create(self, category_id: str, data: CategoryIn) -> CategoryOut:
        now = datetime.now(timezone.utc)
        async with self._db.session() as session:
            try:
                result = await session.execute(
                    insert(categories)
                    .values(id=category_id, created_at=now, updated_at=now, **data.model_dump())
                    .returning(*categories.c)
                )
                row = result.mappings().one()
                await session.commit()
            except IntegrityError as e:
                # Only the name constraint is a client conflict; a clashing id is a server fault
                if not _is_name_conflict(e):
                    raise
                raise ConflictError(f"Category '{data.name}' already exists") from e
        return CategoryOut.model_validate(dict(row))

    async def get(self, id_or_name: str) -> Optional[CategoryOut]:
        # An id match wins over a name match
        stmt = (
            select(categories)
            .where(_id_or_name(id_or_name))
            .order_by((categories.c.id == id_or_name).desc())
            .limit(1)
        )
        async with self._db.session() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return CategoryOut.model_validate(dict(row)) if row else None

    async def update(self, category_id: str, patch: CategoryUpdate) -> Optional[CategoryOut]:
        values = patch.model_dump(exclude_unset=True)
        values["updated_at"] = datetime.now(timezone.utc)
        async with self._db.session() as session:
            try:
                result = await session.execute(
                    update(categories)
                    .where(categories.c.id == category_id)
                    .values(**values)
                    .returning(*categories.c)
                )
                row = result.mappings().first()
                await session.commit()
            except IntegrityError as e:
                if not _is_name_conflict(e):
                    raise
                raise ConflictError(f"Category '{patch.name}' already exists") from e
        return CategoryOut.model_validate(dict(row)) if row else None

    async def delete(self, category_id: str) -> bool:
        async with self._db.session() as session:
            result = await session.execute(delete(categories).where(categories.c.id == category_id))
            await session.commit()
        return result.rowcount > 0

    async def list_page(
        self,
        q: Optional[str],
        page: int,
        page_size: int,
        sort_by: str,
        sort_order: str,
    ) -> Tuple[List[CategoryOut], int]:
        conditions = []
        if q:
            pattern = f"%{q}%"
            conditions.append(or_(categories.c.name.ilike(pattern), categories.c.description.ilike(pattern)))

        sort_col = categories.c[CATEGORY_SORT_FIELDS[sort_by]]
        count_stmt = select(func.count()).select_from(categories).where(*conditions)
        page_stmt = (
            select(categories)
            .where(*conditions)
            .order_by(_order(sort_col, sort_order), categories.c.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        async with self._db.session() as session:
            total = (await session.execute(count_stmt)).scalar_one()
            rows = (await session.execute(page_stmt)).mappings().all()
        return [CategoryOut.model_validate(dict(r)) for r in rows], total

    async def list_tools_page(
        self,
        category_id: str,
        page: int,
        page_size: int,
        sort_by: str,
        sort_order: str,
    ) -> Tuple[List[ToolSummary], int]:
        """Active tools linked to category_id."""
        joined = tool_metadata.join(tool_categories, tool_categories.c.tool_key == tool_metadata.c.tool_key)
        conditions = (
            tool_categories.c.category_id == category_id,
            tool_metadata.c.is_active == true(),
        )

        sort_col = tool_metadata.c[CATEGORY_TOOL_SORT_FIELDS[sort_by]]
        count_stmt = select(func.count()).select_from(joined).where(*conditions)
        page_stmt = (
            select(
                tool_metadata.c.tool_key,
                tool_metadata.c.tool_name,
                tool_metadata.c.description,
                tool_metadata.c.tag,
            )
            .select_from(joined)
            .where(*conditions)
            .order_by(_order(sort_col, sort_order), tool_metadata.c.tool_key)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        async with self._db.session() as session:
            total = (await session.execute(count_stmt)).scalar_one()
            rows = (await session.execute(page_stmt)).mappings().all()
        return [ToolSummary.model_validate(dict(r)) for r in rows], total
