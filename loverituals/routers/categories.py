# loverituals/routers/categories.py
# FastAPI router for tool categories

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from loverituals.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from loverituals.dependencies import get_category_service, get_current_user_id
from loverituals.schemas.category import (
    CategoryIn,
    CategoryOut,
    CategoryPage,
    CategoryToolsPage,
    CategoryUpdate,
)
from loverituals.schemas.common import StatusResponse
from loverituals.services.category_service import CategoryService


router = APIRouter(prefix="/tools/tool-category", tags=["Categories"])


@router.get("", response_model=CategoryPage)
async def list_categories(
    q: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
    sort_by: str = Query("updatedAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    service: CategoryService = Depends(get_category_service),
) -> CategoryPage:
    return await service.list_categories(q or None, page, page_size, sort_by, sort_order)


@router.post("", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryIn,
    _user_id: str = Depends(get_current_user_id),
    service: CategoryService = Depends(get_category_service),
) -> CategoryOut:
    return await service.create_category(payload)


@router.get("/{id_or_name}", response_model=CategoryOut)
async def get_category(
    id_or_name: str,
    service: CategoryService = Depends(get_category_service),
) -> CategoryOut:
    return await service.get_category(id_or_name)


@router.put("/{id_or_name}", response_model=CategoryOut)
async def update_category(
    id_or_name: str,
    payload: CategoryUpdate,
    _user_id: str = Depends(get_current_user_id),
    service: CategoryService = Depends(get_category_service),
) -> CategoryOut:
    return await service.update_category(id_or_name, payload)


@router.delete("/{id_or_name}", response_model=StatusResponse)
async def delete_category(
    id_or_name: str,
    _user_id: str = Depends(get_current_user_id),
    service: CategoryService = Depends(get_category_service),
) -> StatusResponse:
    await service.delete_category(id_or_name)
    return StatusResponse(success=True, message="deleted")


@router.get("/{id_or_name}/tools", response_model=CategoryToolsPage)
async def list_category_tools(
    id_or_name: str,
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
    sort_by: str = Query("updatedAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    service: CategoryService = Depends(get_category_service),
) -> CategoryToolsPage:
    return await service.list_tools_in_category(id_or_name, page, page_size, sort_by, sort_order)
