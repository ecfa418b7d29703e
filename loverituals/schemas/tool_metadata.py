from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from loverituals.schemas.common import ApiModel


class ToolMetadataIn(ApiModel):
    tool_key: str = Field(..., min_length=1, max_length=64)
    tool_name: str = Field(..., min_length=1)
    description: Optional[str] = None
    tag: Optional[str] = None
    category: Optional[str] = None
    default_config: dict[str, Any] = Field(default_factory=dict)
    category_ids: list[str] = Field(default_factory=list)


class ToolMetadataUpdate(ApiModel):
    tool_name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    tag: Optional[str] = None
    category: Optional[str] = None
    default_config: Optional[dict[str, Any]] = None
    is_active: Optional[bool] = None
    # None leaves links untouched, [] clears them
    category_ids: Optional[list[str]] = None


class ToolMetadataOut(ApiModel):
    tool_key: str
    tool_name: str
    description: Optional[str] = None
    tag: Optional[str] = None
    category: Optional[str] = None
    default_config: dict[str, Any]
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ToolSummary(ApiModel):
    tool_key: str
    tool_name: str
    description: Optional[str] = None
    tag: Optional[str] = None


class ToolFilter(ApiModel):
    q: Optional[str] = None
    tag: Optional[str] = None
    category: Optional[str] = None
    category_id: Optional[str] = None
