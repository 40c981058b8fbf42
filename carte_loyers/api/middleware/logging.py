"""
Middleware de journalisation des requêtes et d'alimentation des métriques HTTP.
"""

import logging
import time
from typing import Awaitable, Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from carte_loyers.api.monitoring.prometheus_registry import (
    HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL)

request_logger = logging.getLogger("carte_loyers.requests")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Journalise chaque requête et alimente les métriques HTTP."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start = time.perf_counter()
        request_logger.info(f"📥 {request.method} {request.url.path}")
        response = await call_next(request)
        elapsed = time.perf_counter() - start

        endpoint = request.url.path
        route = request.scope.get("route")
        if route is not None:
            endpoint = getattr(route, "path", endpoint)
        HTTP_REQUESTS_TOTAL.labels(
            method=request.method, endpoint=endpoint, status_code=response.status_code
        ).inc()
        HTTP_REQUEST_DURATION.labels(method=request.method, endpoint=endpoint).observe(elapsed)

        request_logger.info(
            f"📤 {request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed * 1000:.1f} ms)"
        )
        return response
