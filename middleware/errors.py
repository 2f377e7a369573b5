"""
Outermost error boundary for the application.

Anything that escapes the route handlers and FastAPI's own exception handlers is logged here and
answered with a generic INTERNAL_ERROR envelope. Clients never see exception text; the stack trace
goes to the log outside production only.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from config.logging_config import get_logger
from .tracing import get_trace_id
from monitoring.metrics import record_error
from shared.result import DomainError, ErrorCode

INTERNAL_ERROR_MESSAGE = "Internal server error"


class UncaughtErrorMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, include_stack: bool = True, logger=None):
        super().__init__(app)
        self.include_stack = include_stack
        self.logger = logger or get_logger(__name__)

    async def dispatch(self, request: Request, call_next) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            trace_id = get_trace_id(request)
            self.logger.error(
                "Unhandled error",
                extra={
                    "traceId": trace_id,
                    "method": request.method,
                    "path": request.url.path,
                    "error": str(exc) or type(exc).__name__,
                },
                exc_info=exc if self.include_stack else None,
            )
            record_error(ErrorCode.INTERNAL_ERROR.value, "http")
            error = DomainError(ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE, 500)
            return JSONResponse(error.envelope(trace_id), status_code=error.status)
