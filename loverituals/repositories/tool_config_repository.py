# loverituals/repositories/tool_config_repository.py
# Repository for shared tool configurations (short links)

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import and_, false, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert

from loverituals.db.base import Database
from loverituals.models.tool_config_table import tool_configs
from loverituals.schemas.tool_config import ToolConfigRecord


class InsertStatus(enum.Enum):
    CREATED = "created"
    CONFLICT = "conflict"  # share_id already held by a live record


@dataclass(frozen=True)
class InsertResult:
    status: InsertStatus
    record: Optional[ToolConfigRecord] = None

    @property
    def created(self) -> bool:
        return self.status is InsertStatus.CREATED


def _visible(now: datetime):
    """Rows readers may see: not deleted and not expired."""
    return and_(
        tool_configs.c.is_deleted == false(),
        or_(tool_configs.c.expires_at.is_(None), tool_configs.c.expires_at >= now),
    )


class ToolConfigRepository:
    """Persistence for tool configs addressed by share id.

    insert() is a compare-and-insert against the partial unique index on
    live share ids, so two concurrent inserts with the same share id end
    with exactly one CREATED and one CONFLICT.
    """

    def __init__(self, database: Database):
        self._db = database

    async def insert(self, record: ToolConfigRecord) -> InsertResult:
        stmt = (
            pg_insert(tool_configs)
            .values(
                id=record.id,
                tool_key=record.tool_key,
                config=record.config,
                share_id=record.share_id,
                owner_id=record.owner_id,
                fingerprint=record.fingerprint,
                expires_at=record.expires_at,
                is_deleted=record.is_deleted,
                created_at=record.created_at,
                updated_at=record.updated_at,
            )
            .on_conflict_do_nothing(
                index_elements=[tool_configs.c.share_id],
                index_where=tool_configs.c.is_deleted == false(),
            )
            .returning(*tool_configs.c)
        )

        async with self._db.session() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            await session.commit()

        if row is None:
            return InsertResult(status=InsertStatus.CONFLICT)
        return InsertResult(status=InsertStatus.CREATED, record=ToolConfigRecord.model_validate(dict(row)))

    async def find_by_share_id(
        self, share_id: str, now: Optional[datetime] = None
    ) -> Optional[ToolConfigRecord]:
        """Return the visible record for share_id, or None.

        Missing, deleted and expired records all come back as None.
        """
        now = now or datetime.now(timezone.utc)
        stmt = (
            select(tool_configs)
            .where(tool_configs.c.share_id == share_id)
            .where(_visible(now))
            .limit(1)
        )
        async with self._db.session() as session:
            result = await session.execute(stmt)
            row = result.mappings().first()

        if row is None:
            return None
        return ToolConfigRecord.model_validate(dict(row))

    async def soft_delete(self, share_id: str, owner_id: str) -> bool:
        """Mark the owner's live record deleted. Returns False when nothing matched."""
        now = datetime.now(timezone.utc)
        stmt = (
            update(tool_configs)
            .where(tool_configs.c.share_id == share_id)
            .where(tool_configs.c.owner_id == owner_id)
            .where(tool_configs.c.is_deleted == false())
            .values(is_deleted=True, updated_at=now)
        )
        async with self._db.session() as session:
            result = await session.execute(stmt)
            await session.commit()
        return result.rowcount > 0
