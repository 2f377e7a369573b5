"""
HTTP client for the Blog Generator API (minimal, dependency-free).

This module issues the generation request using only Python's standard library and turns every
outcome into either a `GenerationResult` or a `BlogApiError`. Prompt bounds are checked before any
network traffic so obviously invalid input fails without a round trip. Response bodies are parsed
defensively: an empty or non-JSON body is treated as an empty object rather than crashing the
caller, and a 2xx response is only accepted when it really carries `success: true` and a string
`blog`.
"""

from __future__ import annotations

import json
import socket
from typing import Any, Dict, Optional, Tuple
from urllib import error as urlerror
from urllib import request as urlrequest

from shared.models import GenerationResult

PROMPT_MIN_LENGTH = 3
PROMPT_MAX_LENGTH = 500
API_VERSION = "v1"


class BlogApiError(Exception):
    """
    Failure surfaced to the caller of `generate_blog`.

    Attributes:
        message (str): Human-readable description (server-provided when available).
        code (Optional[str]): Server error code such as "INVALID_PROMPT" or "MODEL_LOADING".
        request_id (Optional[str]): Server trace id, useful when reporting a problem.
        status (Optional[int]): HTTP status, when a response was received.
    """

    def __init__(self, message: str, code: Optional[str] = None,
                 request_id: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.request_id = request_id
        self.status = status


def _parse_json(raw: bytes) -> Dict[str, Any]:
    """Decode a response body, treating empty, non-JSON or non-object bodies as `{}`."""
    try:
        data = json.loads(raw.decode("utf-8", errors="replace")) if raw else {}
    except json.JSONDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


class BlogApiClient:
    """
    Client for `POST /api/v1/blog/generate`.

    Args:
        base_url (str): Service base URL, e.g. "http://localhost:5000".
        timeout_s (float): Socket timeout in seconds. Generation can take up to the server's
            upstream timeout, so the default leaves a small margin above it.
    """

    def __init__(self, base_url: str = "http://localhost:5000", timeout_s: float = 130.0):
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/api/{API_VERSION}/blog/generate"

    def generate_blog(self, prompt: Any) -> GenerationResult:
        """
        Request a blog post for `prompt`.

        Raises:
            BlogApiError: For client-side validation failures, network errors and timeouts,
                non-2xx responses (using the server's message and code when present), and 2xx
                responses that do not carry a valid success envelope.
        """
        if not prompt or not isinstance(prompt, str):
            raise BlogApiError("Invalid prompt provided")

        trimmed = prompt.strip()
        if len(trimmed) < PROMPT_MIN_LENGTH:
            raise BlogApiError(f"Prompt must be at least {PROMPT_MIN_LENGTH} characters")
        if len(trimmed) > PROMPT_MAX_LENGTH:
            raise BlogApiError(f"Prompt must not exceed {PROMPT_MAX_LENGTH} characters")

        status, data = self._post({"prompt": trimmed})

        if not 200 <= status < 300:
            message = data.get("error") if isinstance(data.get("error"), str) else None
            raise BlogApiError(
                message or f"Request failed with status {status}",
                code=data.get("code"),
                request_id=data.get("requestId"),
                status=status,
            )

        if data.get("success") is not True or not isinstance(data.get("blog"), str):
            raise BlogApiError("Invalid response from server", status=status)

        return GenerationResult.from_dict(data)

    def _post(self, payload: Dict[str, Any]) -> Tuple[int, Dict[str, Any]]:
        req = urlrequest.Request(
            self.generate_url,
            data=json.dumps(payload).encode("utf-8"),
            method="POST",
        )
        req.add_header("Content-Type", "application/json")

        try:
            with urlrequest.urlopen(req, timeout=self.timeout_s) as resp:
                return getattr(resp, "status", 200), _parse_json(resp.read())
        except urlerror.HTTPError as exc:
            # Non-2xx answers still carry the server's envelope
            return exc.code, _parse_json(exc.read() or b"")
        except socket.timeout as exc:
            raise BlogApiError(f"Request timed out after {self.timeout_s}s") from exc
        except urlerror.URLError as exc:
            if isinstance(exc.reason, socket.timeout):
                raise BlogApiError(f"Request timed out after {self.timeout_s}s") from exc
            raise BlogApiError(f"Network error calling Blog Generator API: {exc.reason}") from exc
