# loverituals/routers/health.py
# Health check endpoints for monitoring and load balancers
# Provides liveness and readiness probes

import time
import asyncio
import logging
from typing import Dict, Any

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel
from redis.exceptions import RedisError

from loverituals.db.base import Database
from loverituals.dependencies import get_cache, get_database
from loverituals.middleware.error_handler import DatabaseError
from loverituals.utils.cache import Cache

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])


class HealthStatus(BaseModel):
    """Health check response model."""
    status: str  # "healthy", "degraded", "unhealthy"
    timestamp: float
    version: str = "1.0.0"
    checks: Dict[str, Dict[str, Any]] = {}


class ComponentHealth(BaseModel):
    """Individual component health."""
    status: str
    latency_ms: float = 0.0
    message: str = ""


async def check_database_health(database: Database) -> ComponentHealth:
    """Run a trivial query through the shared engine."""
    start = time.time()
    try:
        ok = await asyncio.wait_for(database.ping(), timeout=5)
    except asyncio.TimeoutError:
        return ComponentHealth(
            status="unhealthy",
            latency_ms=(time.time() - start) * 1000,
            message="Database connection timeout"
        )
    except DatabaseError as e:
        logger.error(f"Database health check failed: {e.details}")
        return ComponentHealth(
            status="unhealthy",
            latency_ms=(time.time() - start) * 1000,
            message=f"Database error: {e.details.get('type', 'unknown')}"
        )

    latency_ms = (time.time() - start) * 1000
    if not ok:
        return ComponentHealth(
            status="unhealthy",
            latency_ms=latency_ms,
            message="Database query returned unexpected result"
        )
    return ComponentHealth(status="healthy", latency_ms=latency_ms, message="ok")


async def check_cache_health(cache: Cache) -> ComponentHealth:
    """Redis is optional: a failing cache only degrades the service."""
    start = time.time()
    try:
        await asyncio.wait_for(cache.ping(), timeout=2)
    except (RedisError, OSError, asyncio.TimeoutError) as e:
        logger.warning(f"Cache health check failed: {type(e).__name__}")
        return ComponentHealth(
            status="degraded",
            latency_ms=(time.time() - start) * 1000,
            message=f"Cache error: {type(e).__name__}"
        )
    hits, misses = cache.stats()
    return ComponentHealth(
        status="healthy",
        latency_ms=(time.time() - start) * 1000,
        message=f"hits={hits} misses={misses}"
    )


@router.get("/health", response_model=HealthStatus)
async def health_check(
    response: Response,
    database: Database = Depends(get_database),
    cache: Cache = Depends(get_cache),
):
    """
    Full health check endpoint.
    Returns status of all components.
    """
    checks = {}
    for name, component in (
        ("database", await check_database_health(database)),
        ("cache", await check_cache_health(cache)),
    ):
        checks[name] = {
            "status": component.status,
            "latency_ms": round(component.latency_ms, 2),
            "message": component.message
        }

    statuses = [c["status"] for c in checks.values()]
    if "unhealthy" in statuses:
        overall_status = "unhealthy"
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif "degraded" in statuses:
        overall_status = "degraded"
    else:
        overall_status = "healthy"

    return HealthStatus(status=overall_status, timestamp=time.time(), checks=checks)


@router.get("/health/live")
async def liveness_probe():
    """
    Kubernetes liveness probe.
    Does NOT check external dependencies.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_probe(response: Response, database: Database = Depends(get_database)):
    """
    Kubernetes readiness probe.
    Returns 200 only if the database answers.
    """
    db_health = await check_database_health(database)

    if db_health.status == "unhealthy":
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return {
            "status": "not_ready",
            "reason": db_health.message
        }

    return {"status": "ready"}
