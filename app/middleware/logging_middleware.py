"""
HTTP request logging middleware.

One structured line per request: request id, route template, status and
duration. Request bodies are never read here; cancellation bodies carry
private keys.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.stdlib.get_logger("fusion.http")

REQUEST_ID_HEADER = "x-request-id"
QUIET_PATHS = frozenset({"/health", "/"})


def _route_template(request: Request) -> str:
    # Templates keep order hashes and wallets out of the grouping key.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind a request id for downstream logs and record the outcome."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id, method=request.method)

        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - started) * 1000, 1)
            if status_code >= 500:
                log = logger.error
            elif status_code >= 400:
                log = logger.warning
            elif request.url.path in QUIET_PATHS:
                log = logger.debug
            else:
                log = logger.info
            log(
                "fusion_request",
                route=_route_template(request),
                path=request.url.path,
                status=status_code,
                duration_ms=duration_ms,
            )
