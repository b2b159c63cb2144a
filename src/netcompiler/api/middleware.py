import time
from os import urandom

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from netcompiler.observability.metrics import HTTP_REQUEST_DURATION, HTTP_REQUESTS_TOTAL

_QUIET_PATHS = ("/health", "/metrics")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind request_id and user_id to the log context and record HTTP metrics."""

    async def dispatch(self, request: Request, call_next):
        request_id = urandom(4).hex()
        request.state.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            user_id=request.headers.get("id"),
        )

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        path = request.url.path
        labels = {
            "method": request.method,
            "path": path,
            "status_code": str(response.status_code),
        }
        HTTP_REQUEST_DURATION.labels(**labels).observe(duration)
        HTTP_REQUESTS_TOTAL.labels(**labels).inc()

        if path not in _QUIET_PATHS:
            structlog.get_logger().info(
                "http_request",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round(duration * 1000, 1),
            )

        response.headers["x-request-id"] = request_id
        return response


class ApiKeyMiddleware(BaseHTTPMiddleware):
    PUBLIC_PATHS = {"/health", "/metrics", "/docs", "/openapi.json"}

    def __init__(self, app, api_key: str) -> None:
        super().__init__(app)
        self.api_key = api_key

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.PUBLIC_PATHS:
            return await call_next(request)
        if request.headers.get("x-api-key") != self.api_key:
            return JSONResponse(status_code=401, content={"detail": "Invalid or missing API key"})
        return await call_next(request)
