# loverituals/dependencies.py
# FastAPI dependency providers. Long-lived clients come from app.state,
# which the application lifespan fills in at startup.

from fastapi import Depends, Request

from loverituals.config import Settings
from loverituals.db.base import Database
from loverituals.middleware.error_handler import UnauthorizedError
from loverituals.repositories.category_repository import CategoryRepository
from loverituals.repositories.tool_config_repository import ToolConfigRepository
from loverituals.repositories.tool_metadata_repository import ToolMetadataRepository
from loverituals.services.category_service import CategoryService
from loverituals.services.share_service import ShareService
from loverituals.services.tool_catalog_service import ToolCatalogService
from loverituals.utils.cache import Cache
from loverituals.utils.ids import IdentifierGenerator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_cache(request: Request) -> Cache:
    return request.app.state.cache


def get_id_generator(settings: Settings = Depends(get_app_settings)) -> IdentifierGenerator:
    return IdentifierGenerator(
        share_id_length=settings.SHARE_ID_LENGTH,
        record_id_length=settings.RECORD_ID_LENGTH,
    )


def get_current_user_id(request: Request, settings: Settings = Depends(get_app_settings)) -> str:
    """User id resolved upstream by the auth layer and forwarded in a trusted header."""
    user_id = (request.headers.get(settings.AUTH_USER_HEADER) or "").strip()
    if not user_id:
        raise UnauthorizedError()
    return user_id


def get_share_service(
    database: Database = Depends(get_database),
    id_generator: IdentifierGenerator = Depends(get_id_generator),
    settings: Settings = Depends(get_app_settings),
) -> ShareService:
    """Provide service with DI so handlers stay thin."""
    return ShareService(
        repository=ToolConfigRepository(database),
        id_generator=id_generator,
        max_attempts=settings.SHARE_SAVE_MAX_ATTEMPTS,
    )


def get_tool_catalog_service(
    database: Database = Depends(get_database),
    cache: Cache = Depends(get_cache),
) -> ToolCatalogService:
    return ToolCatalogService(repository=ToolMetadataRepository(database), cache=cache)


def get_category_service(
    database: Database = Depends(get_database),
    id_generator: IdentifierGenerator = Depends(get_id_generator),
    cache: Cache = Depends(get_cache),
) -> CategoryService:
    return CategoryService(repository=CategoryRepository(database), id_generator=id_generator, cache=cache)
