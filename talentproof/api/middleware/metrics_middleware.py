"""Metrics middleware recording HTTP request metrics to Prometheus."""

import time
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from talentproof.infrastructure.monitoring.metrics import get_verification_metrics


def _endpoint_label(request: Request) -> str:
    # Route template keeps video ids out of label values
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path if isinstance(path, str) else "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Records request duration, totals and failures per route template."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        get_verification_metrics().observe_request(
            method=request.method,
            endpoint=_endpoint_label(request),
            status_code=response.status_code,
            duration=duration,
        )
        return response
