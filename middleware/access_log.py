"""Access logging: one structured line and one metrics sample per finished request."""

import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from config.logging_config import get_logger
from .tracing import get_trace_id
from monitoring.metrics import record_request


class AccessLogMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, logger=None):
        super().__init__(app)
        self.logger = logger or get_logger(__name__)

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        self.logger.info(
            "HTTP Request",
            extra={
                "traceId": get_trace_id(request),
                "method": request.method,
                "path": request.url.path,
                "statusCode": response.status_code,
                "durationMs": round(duration * 1000, 1),
                "userAgent": request.headers.get("user-agent"),
            },
        )
        # Unmatched paths share one label to keep metric cardinality bounded
        endpoint = "unmatched" if response.status_code == 404 else request.url.path
        record_request(request.method, endpoint, response.status_code, duration)
        return response
