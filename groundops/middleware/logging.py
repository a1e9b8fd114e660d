"""Structured logging middleware for FastAPI requests."""

from __future__ import annotations

import json
import logging
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("groundops.middleware.structured")


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one structured JSON log line for each HTTP request."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start_time = time.perf_counter()
        log_payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "method": request.method,
            "url": str(request.url),
            "client_ip": request.client.host if request.client else None,
        }

        try:
            response = await call_next(request)
        except Exception as exc:  # pragma: no cover
            log_payload["status_code"] = 500
            log_payload["duration_ms"] = self._elapsed_ms(start_time)
            log_payload["error"] = repr(exc)
            logger.exception(self._to_json(log_payload))
            raise

        log_payload["status_code"] = response.status_code
        log_payload["duration_ms"] = self._elapsed_ms(start_time)
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(level, self._to_json(log_payload))
        return response

    @staticmethod
    def _elapsed_ms(start_time: float) -> float:
        """Return elapsed milliseconds rounded to two decimals."""

        return round((time.perf_counter() - start_time) * 1000, 2)

    @staticmethod
    def _to_json(payload: dict[str, Any]) -> str:
        """Serialize payload as compact JSON."""

        return json.dumps(payload, default=str, separators=(',', ':'))
