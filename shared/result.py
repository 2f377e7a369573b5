"""
shared/result.py

Domain error taxonomy and the Ok/Err result type returned by the service and repository layers.

Anticipated failures (bad input, upstream refusals) travel as values rather than exceptions: each
layer returns either `Ok(value)` or `Err(DomainError)`, and the HTTP layer checks which variant it
received. Exceptions remain reserved for programming faults, which the outermost middleware turns
into a generic INTERNAL_ERROR response.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar, Union

T = TypeVar("T")


class ErrorCode(str, Enum):
    """
    Machine-readable error codes rendered in the `code` field of error envelopes.

    - INVALID_PROMPT: client input fault (400)
    - MODEL_LOADING: upstream model cold start (503)
    - RATE_LIMITED: local throttling or upstream throttling (429)
    - GENERATION_FAILED: any other upstream fault (upstream status, else 500)
    - NOT_FOUND: no route matched (404)
    - PAYLOAD_TOO_LARGE: request body over the configured cap (413)
    - INTERNAL_ERROR: unexpected fault (500)
    """
    INVALID_PROMPT = "INVALID_PROMPT"
    MODEL_LOADING = "MODEL_LOADING"
    RATE_LIMITED = "RATE_LIMITED"
    GENERATION_FAILED = "GENERATION_FAILED"
    NOT_FOUND = "NOT_FOUND"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


DEFAULT_STATUS: Dict[ErrorCode, int] = {
    ErrorCode.INVALID_PROMPT: 400,
    ErrorCode.MODEL_LOADING: 503,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.GENERATION_FAILED: 500,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.PAYLOAD_TOO_LARGE: 413,
    ErrorCode.INTERNAL_ERROR: 500,
}


@dataclass(frozen=True)
class DomainError:
    """
    A failure the caller is expected to handle: what went wrong, its code, and the HTTP status
    the controller should answer with.
    """
    code: ErrorCode
    message: str
    http_status: Optional[int] = None

    @property
    def status(self) -> int:
        """HTTP status to render; falls back to the code's default, then 500."""
        return self.http_status or DEFAULT_STATUS.get(self.code, 500)

    def envelope(self, request_id: Optional[str]) -> Dict[str, Any]:
        """Render the uniform JSON error envelope."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code.value,
            "requestId": request_id,
        }


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: DomainError


Result = Union[Ok[T], Err]


def invalid_prompt(message: str) -> Err:
    return Err(DomainError(ErrorCode.INVALID_PROMPT, message, 400))
