# loverituals/services/category_service.py

from __future__ import annotations

import logging
from typing import Optional

from loverituals.constants import CATEGORY_SORT_FIELDS, CATEGORY_TOOL_SORT_FIELDS, TOOLS_CACHE_PREFIX
from loverituals.middleware.error_handler import InvalidArgumentError, NotFoundError
from loverituals.repositories.category_repository import CategoryRepository
from loverituals.schemas.category import (
    CategoryIn,
    CategoryOut,
    CategoryPage,
    CategoryToolsPage,
    CategoryUpdate,
)
from loverituals.utils.cache import Cache
from loverituals.utils.ids import IdentifierGenerator

logger = logging.getLogger(__name__)


def _check_sort(sort_by: str, sort_order: str, allowed: dict) -> None:
    if sort_by not in allowed:
        raise InvalidArgumentError(f"sortBy must be one of {sorted(allowed)}")
    if sort_order not in ("asc", "desc"):
        raise InvalidArgumentError("sortOrder must be 'asc' or 'desc'")


class CategoryService:
    """Category CRUD plus paginated listings. Categories are addressed by id or name.

    Deleting a category drops its tool links, so cached tool lists are invalidated.
    """

    def __init__(self, repository: CategoryRepository, id_generator: IdentifierGenerator, cache: Cache):
        self._repo = repository
        self._ids = id_generator
        self._cache = cache

    async def create_category(self, data: CategoryIn) -> CategoryOut:
        category = await self._repo.create(self._ids.generate_category_id(), data)
        logger.info(f"tool-category.create id={category.id} name={category.name}")
        return category

    async def get_category(self, id_or_name: str) -> CategoryOut:
        category = await self._repo.get(id_or_name)
        if category is None:
            raise NotFoundError(f"Category '{id_or_name}' not found")
        return category

    async def update_category(self, id_or_name: str, patch: CategoryUpdate) -> CategoryOut:
        for field in ("name", "sort"):
            if field in patch.model_fields_set and getattr(patch, field) is None:
                raise InvalidArgumentError(f"{field} cannot be null")
        current = await self.get_category(id_or_name)
        updated = await self._repo.update(current.id, patch)
        if updated is None:
            raise NotFoundError(f"Category '{id_or_name}' not found")
        return updated

    async def delete_category(self, id_or_name: str) -> None:
        current = await self.get_category(id_or_name)
        await self._repo.delete(current.id)
        await self._cache.invalidate_prefix(TOOLS_CACHE_PREFIX)
        logger.info(f"tool-category.delete id={current.id}")

    async def list_categories(
        self,
        q: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
        sort_by: str = "updatedAt",
        sort_order: str = "desc",
    ) -> CategoryPage:
        _check_sort(sort_by, sort_order, CATEGORY_SORT_FIELDS)
        items, total = await self._repo.list_page(q, page, page_size, sort_by, sort_order)
        logger.info(f"tool-category.list q={q!r} page={page} total={total}")
        return CategoryPage(items=items, total=total, page=page, page_size=page_size)

    async def list_tools_in_category(
        self,
        id_or_name: str,
        page: int = 1,
        page_size: int = 20,
        sort_by: str = "updatedAt",
        sort_order: str = "desc",
    ) -> CategoryToolsPage:
        """Tools linked to the category; an unknown category gives an empty page."""
        _check_sort(sort_by, sort_order, CATEGORY_TOOL_SORT_FIELDS)
        category = await self._repo.get(id_or_name)
        if category is None:
            return CategoryToolsPage(items=[], total=0, page=page, page_size=page_size)
        items, total = await self._repo.list_tools_page(category.id, page, page_size, sort_by, sort_order)
        return CategoryToolsPage(items=items, total=total, page=page, page_size=page_size)
