"""요청 로깅 미들웨어.

Request logging middleware.
Logs method, path, query params, status code and duration of every API
request through the package logger (and so to Axiom when configured).
"""

import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from user_directory.utils.logger import get_logger, safe_stringify

log = get_logger("http")

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 로깅하는 미들웨어.

    Middleware that logs every API request with its outcome.
    Server errors are logged at error level, client errors at warning level.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            event = {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params) or None,
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - start_time) * 1000, 2),
            }
            if status_code >= 500:
                log.error("request %s", safe_stringify(event))
            elif status_code >= 400:
                log.warning("request %s", safe_stringify(event))
            else:
                log.info("request %s", safe_stringify(event))
