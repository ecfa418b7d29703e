# loverituals/routers/share.py
# FastAPI router for shared tool configs (short links)

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from loverituals.dependencies import get_current_user_id, get_share_service
from loverituals.schemas.common import StatusResponse
from loverituals.schemas.tool_config import SaveConfigRequest, SavedConfig, SharedConfigOut
from loverituals.services.share_service import ShareService


router = APIRouter(tags=["Share"])


@router.post("/tools/save", response_model=SavedConfig, status_code=status.HTTP_201_CREATED)
async def save_config(
    payload: SaveConfigRequest,
    owner_id: str = Depends(get_current_user_id),
    service: ShareService = Depends(get_share_service),
) -> SavedConfig:
    """Save a tool config and return its share id."""
    return await service.save_config(
        payload.tool_key,
        payload.config,
        owner_id,
        fingerprint=payload.fingerprint,
        expires_at=payload.expires_at,
    )


@router.get("/tools/share/{share_id}", response_model=SharedConfigOut)
async def get_shared_config(
    share_id: str,
    service: ShareService = Depends(get_share_service),
) -> SharedConfigOut:
    """Public lookup: the share id itself grants read access."""
    record = await service.get_by_share_id(share_id)
    return SharedConfigOut.model_validate(record.model_dump())


@router.delete("/tools/share/{share_id}", response_model=StatusResponse)
async def delete_shared_config(
    share_id: str,
    owner_id: str = Depends(get_current_user_id),
    service: ShareService = Depends(get_share_service),
) -> StatusResponse:
    await service.delete_shared_config(share_id, owner_id)
    return StatusResponse(success=True, message="deleted")
