import logging
import time
from datetime import datetime, timezone

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

access_logger = logging.getLogger("simple_api_demo.access")

CORS_ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOWED_HEADERS = ["Authorization", "Accept", "Content-Type"]
CORS_MAX_AGE = 3600


class AccessLogMiddleware(BaseHTTPMiddleware):
    """One log line per request: client, time, request line, status, size, referer, agent, duration."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        received_at = datetime.now(timezone.utc)
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        client = request.client.host if request.client else "-"
        target = request.url.path
        if request.url.query:
            target = f"{target}?{request.url.query}"
        http_version = request.scope.get("http_version", "1.1")

        access_logger.info(
            '%s - - [%s] "%s %s HTTP/%s" %d %s "%s" "%s" %.6f',
            client,
            received_at.strftime("%d/%b/%Y:%H:%M:%S %z"),
            request.method,
            target,
            http_version,
            response.status_code,
            response.headers.get("content-length", "-"),
            request.headers.get("referer", "-"),
            request.headers.get("user-agent", "-"),
            elapsed,
        )
        return response
