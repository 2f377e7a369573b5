"""
Fixed-window rate limiting per client address.

Counting is delegated to the `limits` fixed-window strategy over in-memory storage (the engine
slowapi is built on), which increments and compares under a lock, so concurrent requests from the
same client cannot both slip through the last free slot. Clients are keyed with slowapi's
`get_remote_address`. Only paths under the API prefix are limited; health, readiness and metrics
stay reachable for orchestrators.
"""

import math
import time
from dataclasses import dataclass

from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from config.logging_config import get_logger
from .tracing import get_trace_id
from monitoring.metrics import record_error
from shared.result import DomainError, ErrorCode

RATE_LIMITED_MESSAGE = "Too many requests, please try again later"


@dataclass(frozen=True)
class RateLimitDecision:
    allowed: bool
    limit: int
    remaining: int
    reset_after: int

    def headers(self) -> dict:
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after),
        }


class ClientRateLimiter:
    """
    `max_requests` hits per `window_seconds` fixed window, tracked per client key.

    One instance belongs to one application; its counters live in process memory.
    """

    def __init__(self, max_requests: int, window_seconds: int):
        self.item = RateLimitItemPerSecond(max_requests, window_seconds)
        self.storage = MemoryStorage()
        self.strategy = FixedWindowRateLimiter(self.storage)

    def hit(self, client_key: str) -> RateLimitDecision:
        allowed = self.strategy.hit(self.item, client_key)
        reset_time, remaining = self.strategy.get_window_stats(self.item, client_key)
        return RateLimitDecision(
            allowed=allowed,
            limit=self.item.amount,
            remaining=max(0, remaining),
            reset_after=max(0, math.ceil(reset_time - time.time())),
        )

    def reset(self) -> None:
        self.storage.reset()


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: ClientRateLimiter, path_prefix: str = "/api", logger=None):
        super().__init__(app)
        self.limiter = limiter
        self.path_prefix = path_prefix
        self.logger = logger or get_logger(__name__)

    async def dispatch(self, request: Request, call_next) -> Response:
        if not request.url.path.startswith(self.path_prefix):
            return await call_next(request)

        client_key = get_remote_address(request)
        decision = self.limiter.hit(client_key)
        if not decision.allowed:
            trace_id = get_trace_id(request)
            self.logger.warning(
                "Rate limit exceeded",
                extra={"traceId": trace_id, "client": client_key, "source": "local", "code": "RATE_LIMITED"},
            )
            record_error(ErrorCode.RATE_LIMITED.value, "rate_limit")
            error = DomainError(ErrorCode.RATE_LIMITED, RATE_LIMITED_MESSAGE, 429)
            headers = decision.headers()
            headers["Retry-After"] = str(decision.reset_after)
            return JSONResponse(error.envelope(trace_id), status_code=error.status, headers=headers)

        response = await call_next(request)
        for name, value in decision.headers().items():
            response.headers[name] = value
        return response
