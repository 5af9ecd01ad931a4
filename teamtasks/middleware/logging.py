"""
Access Logging Middleware

One log line per API request with its duration; requests slower than
SLOW_REQUEST_SECONDS get an extra `slow` line. Every logged response carries
an X-Request-ID header, reusing the caller's id when one was sent.
"""

import time
import uuid
from typing import Callable, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from teamtasks.core.config import settings
from teamtasks.logging import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
SKIPPED_PATHS = {"/", "/api/", "/api/health", "/docs", "/openapi.json"}


def client_ip(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the peer address"""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class AccessLoggingMiddleware(BaseHTTPMiddleware):

    def __init__(self, app: ASGIApp, enabled: bool = True, slow_threshold: Optional[float] = None):
        super().__init__(app)
        self.enabled = enabled
        self.slow_threshold = settings.SLOW_REQUEST_SECONDS if slow_threshold is None else slow_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if not self.enabled or request.url.path in SKIPPED_PATHS:
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        started = time.perf_counter()
        response = await call_next(request)
        duration = round(time.perf_counter() - started, 4)

        request_logger = logger.bind(request_id=request_id, ip_address=client_ip(request))
        team_id = request.path_params.get("team_id")
        if team_id:
            request_logger = request_logger.bind(team_id=team_id)

        request_logger.request(
            "API request",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration=duration,
        )
        if duration > self.slow_threshold:
            request_logger.slow("Slow request", duration=duration, threshold=self.slow_threshold, path=request.url.path)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
