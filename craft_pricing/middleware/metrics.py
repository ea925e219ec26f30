import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("craft_pricing.http")


def new_metrics() -> dict:
    return {"requests": 0, "errors": 0, "total_response_ms": 0.0}


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Logs every request and keeps in-process counters on ``app.state.metrics``:
      - total requests
      - responses with status >= 500
      - total response time (ms)
    NOTE: app.state may not exist yet while the middleware stack builds, so the
    counters are created lazily on the first request.
    """

    async def dispatch(self, request: Request, call_next):
        metrics = getattr(request.app.state, "metrics", None)
        if metrics is None:
            metrics = request.app.state.metrics = new_metrics()

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000.0

        metrics["requests"] += 1
        metrics["total_response_ms"] += elapsed_ms
        if response.status_code >= 500:
            metrics["errors"] += 1

        logger.info(
            "%s %s -> %s (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response
