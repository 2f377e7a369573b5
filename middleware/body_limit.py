"""
Reject request bodies larger than the configured cap before anything parses them.

A declared `Content-Length` over the cap is refused from the headers alone. Without that header
(chunked transfer encoding) the stage reads `http.request` messages itself, counting bytes as they
arrive, and refuses the request as soon as the total passes the cap. A body that fits is replayed
to the inner application unchanged, so at most `max_bytes` are ever buffered.

This is a plain ASGI middleware rather than a `BaseHTTPMiddleware` because it has to own the
`receive` channel.
"""

from typing import List, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from config.logging_config import get_logger
from .tracing import get_trace_id
from monitoring.metrics import record_error
from shared.result import DomainError, ErrorCode


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_bytes: int, logger=None):
        self.app = app
        self.max_bytes = max_bytes
        self.logger = logger or get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        declared = request.headers.get("content-length")
        if declared is not None:
            if declared.isdigit() and int(declared) > self.max_bytes:
                await self._reject(request, int(declared), scope, receive, send)
                return
            await self.app(scope, receive, send)
            return

        chunks = []
        received = 0
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # client went away before finishing the body
                await self.app(scope, _replay([], message, receive), send)
                return
            body = message.get("body", b"")
            received += len(body)
            if received > self.max_bytes:
                await self._reject(request, received, scope, receive, send)
                return
            chunks.append(body)
            more_body = message.get("more_body", False)

        await self.app(scope, _replay(chunks, None, receive), send)

    async def _reject(self, request: Request, size: int, scope: Scope, receive: Receive, send: Send) -> None:
        trace_id = get_trace_id(request)
        self.logger.warning(
            "Request body too large",
            extra={"traceId": trace_id, "contentLength": size, "limit": self.max_bytes},
        )
        record_error(ErrorCode.PAYLOAD_TOO_LARGE.value, "body_limit")
        error = DomainError(
            ErrorCode.PAYLOAD_TOO_LARGE,
            f"Request body exceeds {self.max_bytes} bytes",
            413,
        )
        response = JSONResponse(error.envelope(trace_id), status_code=error.status)
        await response(scope, receive, send)


def _replay(chunks: List[bytes], pending: Optional[Message], receive: Receive) -> Receive:
    """A `receive` that hands back the buffered body first, then defers to the real channel."""
    replayed = False

    async def replay_receive() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            if pending is not None:
                return pending
            return {"type": "http.request", "body": b"".join(chunks), "more_body": False}
        return await receive()

    return replay_receive
