# tests/integration/test_tool_config_repository.py
# ToolConfigRepository and ShareService against a real PostgreSQL

import asyncio
from datetime import datetime, timedelta, timezone

import pytest  # type: ignore[import-not-found]

from loverituals.middleware.error_handler import DatabaseError, NotFoundError
from loverituals.repositories.tool_config_repository import InsertStatus, ToolConfigRepository
from loverituals.schemas.tool_config import ToolConfigRecord
from loverituals.services.share_service import ShareService
from loverituals.utils.ids import IdentifierGenerator


def _record(share_id: str, **overrides) -> ToolConfigRecord:
    now = datetime.now(timezone.utc)
    gen = IdentifierGenerator()
    values = dict(
        id=gen.generate_record_id(),
        tool_key="warm-text-card",
        config={"theme": "warm", "maxCards": 12},
        share_id=share_id,
        owner_id="user-42",
        created_at=now,
        updated_at=now,
    )
    values.update(overrides)
    return ToolConfigRecord(**values)


@pytest.mark.asyncio
async def test_insert_and_find(database):
    repo = ToolConfigRepository(database)

    result = await repo.insert(_record("abc123XYZ_-0"))

    assert result.created
    found = await repo.find_by_share_id("abc123XYZ_-0")
    assert found == result.record
    assert found.config == {"theme": "warm", "maxCards": 12}


@pytest.mark.asyncio
async def test_duplicate_live_share_id_is_a_conflict(database):
    repo = ToolConfigRepository(database)
    await repo.insert(_record("dup"))

    result = await repo.insert(_record("dup", config={"other": True}))

    assert result.status is InsertStatus.CONFLICT
    assert result.record is None
    assert (await repo.find_by_share_id("dup")).config == {"theme": "warm", "maxCards": 12}


@pytest.mark.asyncio
async def test_concurrent_inserts_with_same_share_id(database):
    repo = ToolConfigRepository(database)

    results = await asyncio.gather(*(repo.insert(_record("race")) for _ in range(5)))

    statuses = [r.status for r in results]
    assert statuses.count(InsertStatus.CREATED) == 1
    assert statuses.count(InsertStatus.CONFLICT) == 4


@pytest.mark.asyncio
async def test_duplicate_record_id_is_a_database_error(database):
    repo = ToolConfigRepository(database)
    first = _record("one")
    await repo.insert(first)

    with pytest.raises(DatabaseError):
        await repo.insert(_record("two", id=first.id))


@pytest.mark.asyncio
async def test_expiry_is_checked_at_read_time(database):
    repo = ToolConfigRepository(database)
    expires = datetime(2030, 6, 1, tzinfo=timezone.utc)
    await repo.insert(_record("timed", expires_at=expires))

    assert await repo.find_by_share_id("timed", now=expires - timedelta(seconds=1)) is not None
    assert await repo.find_by_share_id("timed", now=expires) is not None
    assert await repo.find_by_share_id("timed", now=expires + timedelta(seconds=1)) is None


@pytest.mark.asyncio
async def test_soft_delete_frees_the_share_id(database):
    repo = ToolConfigRepository(database)
    await repo.insert(_record("reuse", owner_id="user-1"))

    assert await repo.soft_delete("reuse", "someone-else") is False
    assert await repo.soft_delete("reuse", "user-1") is True
    assert await repo.find_by_share_id("reuse") is None
    assert await repo.soft_delete("reuse", "user-1") is False

    again = await repo.insert(_record("reuse", config={"v": 2}))
    assert again.created
    assert (await repo.find_by_share_id("reuse")).config == {"v": 2}


@pytest.mark.asyncio
async def test_share_service_end_to_end(database):
    service = ShareService(ToolConfigRepository(database), IdentifierGenerator(), max_attempts=3)

    saved = await service.save_config("warm-text-card", {"theme": "warm", "maxCards": 12}, "user-42")
    record = await service.get_by_share_id(saved.share_id)

    assert record.id == saved.record_id
    assert record.owner_id == "user-42"

    await service.delete_shared_config(saved.share_id, "user-42")
    with pytest.raises(NotFoundError):
        await service.get_by_share_id(saved.share_id)
