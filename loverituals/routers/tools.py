# loverituals/routers/tools.py
# FastAPI router for the tool catalog

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from loverituals.dependencies import get_current_user_id, get_tool_catalog_service
from loverituals.schemas.common import StatusResponse
from loverituals.schemas.tool_metadata import (
    ToolFilter,
    ToolMetadataIn,
    ToolMetadataOut,
    ToolMetadataUpdate,
    ToolSummary,
)
from loverituals.services.tool_catalog_service import ToolCatalogService


router = APIRouter(tags=["Tools"])


@router.get("/tools/list", response_model=List[ToolSummary])
async def list_tools(
    q: Optional[str] = None,
    tag: Optional[str] = None,
    category: Optional[str] = None,
    category_id: Optional[str] = Query(None, alias="categoryId"),
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> List[ToolSummary]:
    filters = ToolFilter(q=q or None, tag=tag or None, category=category or None, category_id=category_id or None)
    return await service.list_tools(filters)


@router.get("/tools/meta/{tool_key}", response_model=ToolMetadataOut)
async def get_tool_metadata(
    tool_key: str,
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> ToolMetadataOut:
    return await service.get_metadata(tool_key)


@router.post("/tools/meta", response_model=ToolMetadataOut, status_code=status.HTTP_201_CREATED)
async def create_tool_metadata(
    payload: ToolMetadataIn,
    _user_id: str = Depends(get_current_user_id),
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> ToolMetadataOut:
    return await service.create_tool(payload)


@router.put("/tools/meta/{tool_key}", response_model=ToolMetadataOut)
async def update_tool_metadata(
    tool_key: str,
    payload: ToolMetadataUpdate,
    _user_id: str = Depends(get_current_user_id),
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> ToolMetadataOut:
    return await service.update_tool(tool_key, payload)


@router.delete("/tools/meta/{tool_key}", response_model=StatusResponse)
async def deactivate_tool_metadata(
    tool_key: str,
    _user_id: str = Depends(get_current_user_id),
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> StatusResponse:
    await service.deactivate_tool(tool_key)
    return StatusResponse(success=True, message="deactivated")
