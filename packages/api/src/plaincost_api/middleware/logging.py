"""Structured request/response logging middleware."""

from __future__ import annotations

import time

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = structlog.get_logger()


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.monotonic()
        log = logger.bind(method=request.method, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception as exc:
            log.error(
                "request_failed",
                error=str(exc),
                duration_ms=round((time.monotonic() - start) * 1000, 2),
            )
            raise

        log.info(
            "request_completed",
            status=response.status_code,
            cache_control=response.headers.get("cache-control"),
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        return response
