# loverituals/services/share_service.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from loverituals.middleware.error_handler import (
    ExhaustedRetriesError,
    InvalidArgumentError,
    NotFoundError,
)
from loverituals.observability.metrics import (
    SHARE_ID_COLLISIONS,
    SHARE_LOOKUPS,
    SHARE_SAVES,
    SHARE_SAVES_EXHAUSTED,
)
from loverituals.repositories.tool_config_repository import InsertStatus, ToolConfigRepository
from loverituals.schemas.tool_config import SavedConfig, ToolConfigRecord
from loverituals.utils.ids import IdentifierGenerator

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


def _parse_expires_at(value: Union[datetime, str, None]) -> Optional[datetime]:
    """Accept a datetime or ISO-8601 string; naive values are taken as UTC."""
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidArgumentError("expiresAt must be an ISO-8601 timestamp") from exc
    if not isinstance(value, datetime):
        raise InvalidArgumentError("expiresAt must be an ISO-8601 timestamp")
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class ShareService:
    """Save tool configs behind a short share id and read them back.

    A save retries on share id collisions with fresh identifiers, up to
    max_attempts inserts. Storage failures are never retried here.
    """

    def __init__(
        self,
        repository: ToolConfigRepository,
        id_generator: IdentifierGenerator,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._repo = repository
        self._ids = id_generator
        self.max_attempts = max_attempts

    async def save_config(
        self,
        tool_key: str,
        config: Any,
        owner_id: str,
        fingerprint: Optional[str] = None,
        expires_at: Union[datetime, str, None] = None,
    ) -> SavedConfig:
        if not isinstance(tool_key, str) or not tool_key.strip():
            raise InvalidArgumentError("toolKey is required")
        if not isinstance(config, dict) or not all(isinstance(k, str) for k in config):
            raise InvalidArgumentError("config must be a JSON object")
        if not isinstance(owner_id, str) or not owner_id.strip():
            raise InvalidArgumentError("ownerId is required")
        if fingerprint is not None and not isinstance(fingerprint, str):
            raise InvalidArgumentError("fingerprint must be a string")
        expires = _parse_expires_at(expires_at)

        for attempt in range(1, self.max_attempts + 1):
            now = datetime.now(timezone.utc)
            candidate = ToolConfigRecord(
                id=self._ids.generate_record_id(),
                tool_key=tool_key,
                config=config,
                share_id=self._ids.generate_share_id(),
                owner_id=owner_id,
                fingerprint=fingerprint,
                expires_at=expires,
                is_deleted=False,
                created_at=now,
                updated_at=now,
            )
            result = await self._repo.insert(candidate)

            if result.status is InsertStatus.CONFLICT:
                SHARE_ID_COLLISIONS.inc()
                logger.warning(
                    f"share id collision for tool={tool_key} "
                    f"(attempt {attempt}/{self.max_attempts})"
                )
                continue

            SHARE_SAVES.inc()
            logger.info(f"saved config id={candidate.id} tool={tool_key} share_id={candidate.share_id}")
            return SavedConfig(share_id=candidate.share_id, record_id=candidate.id)

        SHARE_SAVES_EXHAUSTED.inc()
        logger.error(f"no free share id for tool={tool_key} after {self.max_attempts} attempts")
        raise ExhaustedRetriesError(self.max_attempts)

    async def get_by_share_id(self, share_id: str) -> ToolConfigRecord:
        """Return the visible record, or raise NotFoundError (same error for missing, deleted, expired)."""
        record = None
        if share_id:
            record = await self._repo.find_by_share_id(share_id)
        if record is None:
            SHARE_LOOKUPS.labels("not_found").inc()
            raise NotFoundError("Shared config not found or expired")
        SHARE_LOOKUPS.labels("found").inc()
        return record

    async def delete_shared_config(self, share_id: str, owner_id: str) -> None:
        if not owner_id:
            raise InvalidArgumentError("ownerId is required")
        deleted = await self._repo.soft_delete(share_id, owner_id)
        if not deleted:
            raise NotFoundError("Shared config not found or expired")
        logger.info(f"soft-deleted share_id={share_id}")
