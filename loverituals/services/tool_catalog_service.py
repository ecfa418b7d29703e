# loverituals/services/tool_catalog_service.py

from __future__ import annotations

import logging
from typing import List

from loverituals.constants import TOOLS_CACHE_PREFIX
from loverituals.middleware.error_handler import NotFoundError
from loverituals.repositories.tool_metadata_repository import ToolMetadataRepository
from loverituals.schemas.tool_metadata import (
    ToolFilter,
    ToolMetadataIn,
    ToolMetadataOut,
    ToolMetadataUpdate,
    ToolSummary,
)
from loverituals.utils.cache import Cache

logger = logging.getLogger(__name__)


class ToolCatalogService:
    """Tool metadata reads (cached) and writes (invalidate the cache)."""

    def __init__(self, repository: ToolMetadataRepository, cache: Cache):
        self._repo = repository
        self._cache = cache

    async def list_tools(self, filters: ToolFilter) -> List[ToolSummary]:
        cache_key = Cache.build_key(f"{TOOLS_CACHE_PREFIX}:list", filters.model_dump())
        cached = await self._cache.get_json(cache_key)
        if cached is not None:
            return [ToolSummary.model_validate(item) for item in cached]

        tools = await self._repo.list_active(filters)
        await self._cache.set_json(cache_key, [t.model_dump() for t in tools])
        logger.info(f"tools.list q={filters.q!r} tag={filters.tag!r} count={len(tools)}")
        return tools

    async def get_metadata(self, tool_key: str) -> ToolMetadataOut:
        cache_key = Cache.build_key(f"{TOOLS_CACHE_PREFIX}:meta", {"tool_key": tool_key})
        cached = await self._cache.get_json(cache_key)
        if cached is not None:
            return ToolMetadataOut.model_validate(cached)

        meta = await self._repo.get(tool_key)
        if meta is None or not meta.is_active:
            raise NotFoundError(f"Tool '{tool_key}' not found")
        await self._cache.set_json(cache_key, meta.model_dump(mode="json"))
        return meta

    async def create_tool(self, data: ToolMetadataIn) -> ToolMetadataOut:
        meta = await self._repo.create(data)
        await self._cache.invalidate_prefix(TOOLS_CACHE_PREFIX)
        logger.info(f"tools.create tool_key={meta.tool_key}")
        return meta

    async def update_tool(self, tool_key: str, patch: ToolMetadataUpdate) -> ToolMetadataOut:
        meta = await self._repo.update(tool_key, patch)
        if meta is None:
            raise NotFoundError(f"Tool '{tool_key}' not found")
        await self._cache.invalidate_prefix(TOOLS_CACHE_PREFIX)
        logger.info(f"tools.update tool_key={tool_key}")
        return meta

    async def deactivate_tool(self, tool_key: str) -> None:
        if not await self._repo.deactivate(tool_key):
            raise NotFoundError(f"Tool '{tool_key}' not found")
        await self._cache.invalidate_prefix(TOOLS_CACHE_PREFIX)
        logger.info(f"tools.deactivate tool_key={tool_key}")
