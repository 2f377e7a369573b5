"""
Health and readiness endpoints.

`GET /health` is a liveness check: it answers 200 whenever the process is serving requests and
never touches the upstream. `GET /ready` runs a short upstream reachability probe and answers 503
while the probe fails, so orchestrators can hold traffic back without restarting the process.
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from middleware.tracing import get_trace_id
from version import API_VERSION

router = APIRouter()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health(request: Request) -> Dict[str, Any]:
    """
    Return a simple liveness payload.

    Returns:
        Dict[str, Any]: `status` ("healthy"), an ISO-8601 UTC `timestamp`, the API `version`, and
        `uptime` in whole seconds since the application was created.
    """
    started_at = request.app.state.started_at
    return {
        "status": "healthy",
        "timestamp": _utc_now_iso(),
        "version": API_VERSION,
        "uptime": int(time.monotonic() - started_at),
    }


@router.get("/ready")
def ready(request: Request) -> JSONResponse:
    """
    Report whether upstream dependencies are reachable.

    The probe lists models with a short timeout. Probe failures are logged by the repository and
    simply flip the `api` check to false.
    """
    repository = request.app.state.blog_repository
    checks = {
        "api": repository.check_reachability(get_trace_id(request)),
    }
    is_ready = all(checks.values())
    return JSONResponse(
        {"ready": is_ready, "checks": checks, "timestamp": _utc_now_iso()},
        status_code=200 if is_ready else 503,
    )
