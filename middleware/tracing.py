"""
Trace-id assignment.

Every request gets a correlation id: the inbound `x-trace-id` header when the caller supplied one,
otherwise a fresh UUID4. The id is stored on `request.state.trace` for handlers and log lines, and
is echoed back on every response, including error responses produced further down the chain.
"""

import uuid
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from shared.models import TraceContext

TRACE_HEADER = "x-trace-id"


def generate_trace_id() -> str:
    return str(uuid.uuid4())


def get_trace_id(request: Request) -> Optional[str]:
    """Trace id assigned to this request, or None when tracing did not run."""
    trace = getattr(request.state, "trace", None)
    return trace.trace_id if trace is not None else None


class TracingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        trace_id = request.headers.get(TRACE_HEADER, "").strip() or generate_trace_id()
        request.state.trace = TraceContext(trace_id=trace_id)

        response = await call_next(request)
        response.headers[TRACE_HEADER] = trace_id
        return response
