"""
Request timing middleware and logging setup for the Storefront backend
"""
import time
import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Paths that are not worth timing
EXEMPT_PATHS = {
    "/health",
    "/docs",
    "/openapi.json",
    "/redoc",
}


def configure_logging(level: str = "INFO"):
    """Configure root logging once for the API process"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


class TimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that measures how long each request takes.

    Logs `[API] METHOD path took Nms` and returns the duration in the
    X-Process-Time header (milliseconds).
    """

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = round((time.perf_counter() - start) * 1000, 2)

        response.headers["X-Process-Time"] = str(elapsed_ms)
        logger.info(f"[API] {request.method} {request.url.path} took {elapsed_ms}ms ({response.status_code})")

        return response
