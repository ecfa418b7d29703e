from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from loverituals.schemas.common import ApiModel


class ToolConfigRecord(ApiModel):
    """A saved tool configuration as stored in tool_configs."""

    id: str
    tool_key: str
    config: dict[str, Any]
    share_id: str
    owner_id: str
    fingerprint: Optional[str] = None
    expires_at: Optional[datetime] = None
    is_deleted: bool = False
    created_at: datetime
    updated_at: datetime


class SaveConfigRequest(ApiModel):
    # Loosely typed on purpose: the share service reports bad input as INVALID_ARGUMENT
    tool_key: str = ""
    config: Any = None
    fingerprint: Optional[str] = None
    expires_at: Optional[datetime] = None


class SavedConfig(ApiModel):
    share_id: str
    record_id: str


class SharedConfigOut(ApiModel):
    """Public view of a shared config; owner and fingerprint are not exposed."""

    id: str
    tool_key: str
    config: dict[str, Any]
    share_id: str
    expires_at: Optional[datetime] = None
    created_at: datetime
