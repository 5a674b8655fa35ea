import os
import time
import logging
from collections import defaultdict
from threading import Lock

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

# simple in-process sliding window, good enough for a single instance
RATE_LIMIT_REQUESTS = int(os.getenv("RATE_LIMIT_REQUESTS", "30"))   # request units allowed per window
RATE_LIMIT_WINDOW = int(os.getenv("RATE_LIMIT_WINDOW", "60"))       # window in seconds

# batch endpoints fetch several pages per call, so they use up more of the window
PATH_COSTS = {"/compare": 3, "/bulk-scan": 5}
EXEMPT_PATHS = {"/health"}


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, requests_per_window: int = RATE_LIMIT_REQUESTS, window_seconds: int = RATE_LIMIT_WINDOW):
        super().__init__(app)
        self.requests_per_window = requests_per_window
        self.window_seconds = window_seconds
        self._buckets: dict[str, list[float]] = defaultdict(list)
        self._lock = Lock()

    def _get_client_ip(self, request: Request) -> str:
        # honour X-Forwarded-For if behind a proxy / load balancer
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if path in EXEMPT_PATHS:
            return await call_next(request)

        ip = self._get_client_ip(request)
        cost = PATH_COSTS.get(path, 1)
        now = time.time()

        with self._lock:
            # drop timestamps outside the current window
            window_start = now - self.window_seconds
            self._buckets[ip] = [t for t in self._buckets[ip] if t > window_start]

            if len(self._buckets[ip]) + cost > self.requests_per_window:
                oldest = self._buckets[ip][0] if self._buckets[ip] else now
                retry_after = int(self.window_seconds - (now - oldest)) + 1
                logger.warning("Rate limit hit for IP %s on %s", ip, path)
                return JSONResponse(
                    status_code=429,
                    content={"ok": False, "error": "Too many requests. Please slow down."},
                    headers={"Retry-After": str(retry_after)},
                )

            self._buckets[ip].extend([now] * cost)

        return await call_next(request)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        duration_ms = int((time.time() - start) * 1000)
        logger.info(
            "%s %s -> %d (%dms)",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
        )
        return response
