# loverituals/observability/metrics.py
# minimal prometheus instrumentation

from __future__ import annotations

import os
import time
from typing import Optional

from fastapi import APIRouter, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)
from prometheus_client.multiprocess import MultiProcessCollector
from starlette.middleware.base import BaseHTTPMiddleware

from loverituals.utils.logger import log_info

# Detect multiprocess mode via environment.
# NOTE: PROMETHEUS_MULTIPROC_DIR must be set BEFORE importing this module in real multi-proc setups.
PROM_MP_DIR = os.environ.get("PROMETHEUS_MULTIPROC_DIR")
HAVE_MP = bool(PROM_MP_DIR and os.path.isdir(PROM_MP_DIR))


def _exposition_registry() -> Optional[CollectorRegistry]:
    """Registry to expose: a fresh multiprocess collector, or None for the default."""
    if not HAVE_MP:
        return None
    registry = CollectorRegistry()
    MultiProcessCollector(registry)
    return registry


# --- HTTP metrics ---
REQUEST_COUNT = Counter(
    "request_count",
    "Total request count",
    labelnames=("method", "path", "status"),
)
REQUEST_LATENCY = Histogram(
    "request_latency_seconds",
    "Request latency in seconds",
)
REQUEST_IN_PROGRESS = Gauge(
    "request_in_progress",
    "Requests currently in progress",
    ("method",),
    **({"multiprocess_mode": "livesum"} if HAVE_MP else {}),
)
ERROR_COUNT = Counter(
    "error_count",
    "Total error count",
    labelnames=("method", "path", "status"),
)

# --- Share link metrics ---
SHARE_SAVES = Counter(
    "share_config_saves_total",
    "Tool configs saved with a share id",
)
SHARE_ID_COLLISIONS = Counter(
    "share_id_collisions_total",
    "Insert attempts rejected because the share id was taken",
)
SHARE_SAVES_EXHAUSTED = Counter(
    "share_config_saves_exhausted_total",
    "Saves that ran out of attempts on share id collisions",
)
SHARE_LOOKUPS = Counter(
    "share_config_lookups_total",
    "Share id lookups by outcome",
    labelnames=("outcome",),
)


def _route_path(request: Request) -> str:
    # Use the route template so /api/tools/share/{share_id} is one label;
    # unmatched URLs share a single label
    route = request.scope.get("route")
    return getattr(route, "path", None) or "<unmatched>"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """// record request count, latency and in-flight gauge"""

    async def dispatch(self, request: Request, call_next):
        method = request.method
        start = time.perf_counter()
        # the route template is only known after routing, so no path label here
        REQUEST_IN_PROGRESS.labels(method).inc()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            REQUEST_IN_PROGRESS.labels(method).dec()
            path = _route_path(request)
            elapsed = time.perf_counter() - start
            REQUEST_LATENCY.observe(elapsed)
            REQUEST_COUNT.labels(method, path, str(status)).inc()
            if status >= 500:
                ERROR_COUNT.labels(method, path, str(status)).inc()
            log_info(f"{method} {request.url.path} {status} {elapsed:.3f}s")


router = APIRouter(tags=["Metrics"])


@router.get("/metrics", include_in_schema=False)
async def prometheus_metrics() -> Response:
    """// expose /metrics"""
    registry = _exposition_registry()
    payload = generate_latest(registry) if registry is not None else generate_latest()
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
