from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from loverituals.schemas.common import ApiModel
from loverituals.schemas.tool_metadata import ToolSummary


class CategoryIn(ApiModel):
    name: str = Field(..., min_length=1, max_length=64)
    description: Optional[str] = None
    sort: int = 0


class CategoryUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1, max_length=64)
    description: Optional[str] = None
    sort: Optional[int] = None


class CategoryOut(ApiModel):
    id: str
    name: str
    description: Optional[str] = None
    sort: int = 0
    created_at: datetime
    updated_at: datetime


class CategoryPage(ApiModel):
    items: list[CategoryOut]
    total: int
    page: int
    page_size: int


class CategoryToolsPage(ApiModel):
    items: list[ToolSummary]
    total: int
    page: int
    page_size: int
