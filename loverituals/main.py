# loverituals/main.py
# FastAPI application factory and entry point

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

from loverituals.config import LOGS_PATH, Settings, get_settings
from loverituals.db.base import Database
from loverituals.middleware.error_handler import ErrorHandlerMiddleware, setup_exception_handlers
from loverituals.middleware.rate_limiter import RateLimitMiddleware
from loverituals.observability.logger import configure_logging
from loverituals.observability.metrics import PrometheusMiddleware, router as metrics_router
from loverituals.routers.categories import router as categories_router
from loverituals.routers.health import router as health_router
from loverituals.routers.share import router as share_router
from loverituals.routers.tools import router as tools_router
from loverituals.utils.cache import Cache, create_redis_client
from loverituals.utils.telemetry import init_otel, instrument_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    configure_logging(settings, logs_path=LOGS_PATH)

    database = Database(settings.DB_URL, echo=settings.DEBUG)
    cache = Cache(create_redis_client(settings.REDIS_URL), ttl_seconds=settings.CACHE_TTL_SECONDS)
    if settings.OTEL_ENABLED:
        instrument_engine(database.engine)

    app.state.database = database
    app.state.cache = cache
    logger.info(f"{settings.SERVICE_NAME} started")
    try:
        yield
    finally:
        await cache.close()
        await database.dispose()
        logger.info(f"{settings.SERVICE_NAME} stopped")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title="LoveRituals API",
        description="Tool catalog and shareable tool configurations",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    # first added = innermost; ErrorHandler ends up outermost
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        api_limit=settings.RATE_LIMIT_API,
        general_limit=settings.RATE_LIMIT_GENERAL,
    )
    app.add_middleware(ErrorHandlerMiddleware, debug=settings.DEBUG)

    setup_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(metrics_router)
    app.include_router(share_router, prefix="/api")
    app.include_router(tools_router, prefix="/api")
    app.include_router(categories_router, prefix="/api")

    if settings.OTEL_ENABLED:
        init_otel(app=app, service_name=settings.SERVICE_NAME)

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("loverituals.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
