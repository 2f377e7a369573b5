"""
Middleware package: cross-cutting request stages applied to every request.

Stages run in the order listed by `middleware_stages()` (outermost first):

    security headers → trace id → access log → CORS → body cap → rate limit → error boundary → routes

Trace assignment precedes CORS and the body cap so that every response, rejections included,
carries the x-trace-id header and appears in the access log. Starlette wraps middleware in reverse
registration order, so `install_middleware` registers the list back to front.
"""

from typing import Any, Dict, List, Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Settings
from .access_log import AccessLogMiddleware
from .body_limit import BodySizeLimitMiddleware
from .errors import UncaughtErrorMiddleware
from .rate_limit import ClientRateLimiter, RateLimitMiddleware
from .security import SecurityHeadersMiddleware
from .tracing import TRACE_HEADER, TracingMiddleware, get_trace_id

API_PREFIX = "/api"


def middleware_stages(settings: Settings, limiter: ClientRateLimiter) -> List[Tuple[type, Dict[str, Any]]]:
    """Ordered (middleware class, options) pairs, outermost first."""
    return [
        (SecurityHeadersMiddleware, {}),
        (TracingMiddleware, {}),
        (AccessLogMiddleware, {}),
        (CORSMiddleware, {
            "allow_origins": [settings.cors_origin],
            "allow_methods": list(settings.cors_allow_methods),
            "allow_headers": list(settings.cors_allow_headers),
            "allow_credentials": True,
            "expose_headers": [TRACE_HEADER],
            "max_age": settings.cors_max_age,
        }),
        (BodySizeLimitMiddleware, {"max_bytes": settings.max_body_bytes}),
        (RateLimitMiddleware, {"limiter": limiter, "path_prefix": API_PREFIX}),
        (UncaughtErrorMiddleware, {"include_stack": not settings.is_production}),
    ]


def install_middleware(app: FastAPI, settings: Settings, limiter: ClientRateLimiter) -> None:
    for middleware_class, options in reversed(middleware_stages(settings, limiter)):
        app.add_middleware(middleware_class, **options)


__all__ = [
    "API_PREFIX",
    "ClientRateLimiter",
    "TRACE_HEADER",
    "get_trace_id",
    "install_middleware",
    "middleware_stages",
]
