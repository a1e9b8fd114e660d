"""Prometheus instrumentation for every HTTP request."""

from __future__ import annotations

import time
from typing import Any, MutableMapping

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from groundops.telemetry import observe_request

UNTAGGED_AREA = "ops"


def route_labels(scope: MutableMapping[str, Any]) -> tuple[str, str]:
    """Return ``(route template, API area)`` for a request scope.

    The area is the first tag of the router that served the request, so
    ``/api/crisis/activate`` is counted under ``crisis``. Untagged routes such
    as ``/health`` and ``/metrics`` fall under ``ops``.
    """

    route = scope.get("route")
    template = getattr(route, "path", None) or scope.get("path") or "unknown"
    tags = getattr(route, "tags", None) or ()
    return template, str(tags[0]) if tags else UNTAGGED_AREA


class TelemetryMiddleware(BaseHTTPMiddleware):
    """Time requests and count them per route template and API area."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            route, area = route_labels(request.scope)
            observe_request(
                request.method, route, area, status_code, time.perf_counter() - started
            )
