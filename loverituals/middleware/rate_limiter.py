# loverituals/middleware/rate_limiter.py
# Per-client rate limiting with an in-memory sliding window counter

import time
import logging
from collections import defaultdict
from typing import Dict, Tuple

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from loverituals.middleware.error_handler import create_error_response

logger = logging.getLogger(__name__)

EXEMPT_PATHS = ("/health", "/health/live", "/health/ready", "/metrics")


class SlidingWindowCounter:
    """
    Sliding window rate limiter.
    Weighted sum of the previous and current fixed windows.
    """

    def __init__(self, window_size: int = 60, max_requests: int = 100):
        self.window_size = window_size  # seconds
        self.max_requests = max_requests
        # key -> (prev_count, curr_count, window_index)
        self._counters: Dict[str, Tuple[int, int, float]] = defaultdict(lambda: (0, 0, 0.0))

    def is_allowed(self, key: str, now: float = None) -> Tuple[bool, int]:
        """
        Count one request for key.
        Returns (is_allowed, remaining_requests).
        """
        now = time.time() if now is None else now
        prev_count, curr_count, window_start = self._counters[key]
        current_window = now // self.window_size

        if window_start < current_window - 1:
            prev_count = 0
            curr_count = 1
            window_start = current_window
        elif window_start < current_window:
            prev_count = curr_count
            curr_count = 1
            window_start = current_window
        else:
            curr_count += 1

        weight = (now % self.window_size) / self.window_size
        weighted_count = prev_count * (1 - weight) + curr_count

        self._counters[key] = (prev_count, curr_count, window_start)

        remaining = max(0, int(self.max_requests - weighted_count))
        return weighted_count <= self.max_requests, remaining

    def cleanup_old_entries(self, max_age: int = 300, now: float = None):
        """Drop keys idle for more than max_age seconds."""
        now = time.time() if now is None else now
        current_window = now // self.window_size
        stale = [
            key for key, (_, _, window_start) in self._counters.items()
            if current_window - window_start > max_age // self.window_size
        ]
        for key in stale:
            del self._counters[key]

    def __len__(self) -> int:
        return len(self._counters)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Stricter limit for /api/ paths than for everything else.
    Health probes and /metrics are never limited.
    """

    def __init__(self, app, api_limit: int = 60, general_limit: int = 200):
        super().__init__(app)
        self.api_limiter = SlidingWindowCounter(window_size=60, max_requests=api_limit)
        self.general_limiter = SlidingWindowCounter(window_size=60, max_requests=general_limit)
        self._last_cleanup = time.time()

    @staticmethod
    def _get_client_key(request: Request) -> str:
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip
        if request.client:
            return request.client.host
        return "unknown"

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        now = time.time()
        if now - self._last_cleanup > 300:
            self.api_limiter.cleanup_old_entries()
            self.general_limiter.cleanup_old_entries()
            self._last_cleanup = now

        client_key = self._get_client_key(request)
        is_api = request.url.path.startswith("/api/")
        limiter = self.api_limiter if is_api else self.general_limiter

        is_allowed, remaining = limiter.is_allowed(client_key)
        if not is_allowed:
            logger.warning(f"Rate limit exceeded for {client_key} on {request.url.path}")
            response = create_error_response(
                error_code="RATE_LIMITED",
                message="Too many requests. Please slow down.",
                status_code=429,
                details={"retry_after": limiter.window_size},
            )
            response.headers["Retry-After"] = str(limiter.window_size)
            response.headers["X-RateLimit-Remaining"] = "0"
            return response

        response = await call_next(request)
        response.headers["X-RateLimit-Remaining"] = str(remaining)
        response.headers["X-RateLimit-Limit"] = str(limiter.max_requests)
        return response
