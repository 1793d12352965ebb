"""
Request/Response Logging Middleware

Assigns every request a correlation ID (taken from X-Request-ID when the
client sends one), times it, and logs one line per response at a level
matching its status.
"""

import logging
import os
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

# Paths to exclude from request logging
EXCLUDE_PATHS = {
    '/docs', '/redoc', '/openapi.json', '/favicon.ico'
}


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    HTTP request logging with correlation IDs and timing.

    Configuration via environment variables:
    - LOG_SLOW_REQUEST_THRESHOLD: Threshold for slow request warning in ms (default: 1000)
    """

    def __init__(self, app: ASGIApp, slow_request_threshold: int = None):
        super().__init__(app)
        if slow_request_threshold is None:
            slow_request_threshold = int(os.getenv('LOG_SLOW_REQUEST_THRESHOLD', 1000))
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        request.state.request_id = request_id

        path = request.url.path
        if path in EXCLUDE_PATHS:
            response = await call_next(request)
            response.headers['X-Request-ID'] = request_id
            return response

        method = request.method
        client_id = request.headers.get('X-Client-ID')
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"{method} {path} - Request failed: {type(e).__name__}",
                extra={
                    'request_id': request_id,
                    'path': path,
                    'client_id': client_id,
                    'duration_ms': round(duration, 2),
                },
                exc_info=True
            )
            raise

        duration = (time.perf_counter() - start_time) * 1000
        response.headers['X-Request-ID'] = request_id
        response.headers['X-Process-Time'] = f"{duration:.2f}ms"

        status_code = response.status_code
        if status_code >= 500:
            log_level = logging.ERROR
        elif status_code >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        extra = {
            'request_id': request_id,
            'path': path,
            'status_code': status_code,
            'client_id': client_id,
            'duration_ms': round(duration, 2),
        }
        logger.log(log_level, f"{method} {path} - {status_code} ({duration:.2f}ms)", extra=extra)

        if duration > self.slow_request_threshold:
            logger.warning(f"Slow request: {method} {path} took {duration:.2f}ms", extra=extra)

        return response
