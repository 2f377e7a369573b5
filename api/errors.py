"""
Exception handlers that keep framework errors inside the JSON envelope.

- Unmatched routes (404) and known paths hit with an unsupported method (405) answer NOT_FOUND/404.
- Request bodies FastAPI cannot parse (invalid JSON, not an object) answer INVALID_PROMPT/400.
- Any other HTTPException keeps its status and detail under INTERNAL_ERROR.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.logging_config import get_logger
from middleware.tracing import get_trace_id
from shared.result import DomainError, ErrorCode

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = "Endpoint not found"
INVALID_BODY_MESSAGE = "Request body must be a JSON object with a prompt field"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    trace_id = get_trace_id(request)
    if exc.status_code in (404, 405):
        error = DomainError(ErrorCode.NOT_FOUND, NOT_FOUND_MESSAGE, 404)
        return JSONResponse(error.envelope(trace_id), status_code=error.status)

    error = DomainError(ErrorCode.INTERNAL_ERROR, str(exc.detail), exc.status_code)
    return JSONResponse(error.envelope(trace_id), status_code=error.status, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    trace_id = get_trace_id(request)
    logger.info("Unparseable request body", extra={"traceId": trace_id, "path": request.url.path})
    error = DomainError(ErrorCode.INVALID_PROMPT, INVALID_BODY_MESSAGE, 400)
    return JSONResponse(error.envelope(trace_id), status_code=error.status)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
