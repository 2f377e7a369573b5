"""
api/blog.py – blog generation endpoint.

Endpoints:
  - POST /generate (mounted under /api/v1/blog): reads `prompt` from the JSON body, delegates to
    BlogService, and renders either the success envelope or the error envelope of the returned
    DomainError with its declared HTTP status.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config.logging_config import get_logger
from middleware.tracing import get_trace_id
from services.blog_service import BlogService
from shared.models import GenerateBlogRequest
from shared.result import Err

# Get a logger instance for this module
logger = get_logger(__name__)

router = APIRouter()


def get_blog_service(request: Request) -> BlogService:
    """Resolve the BlogService instance built by the application factory."""
    return request.app.state.blog_service


@router.post("/generate")
def generate_blog(
    body: GenerateBlogRequest,
    request: Request,
    service: BlogService = Depends(get_blog_service),
) -> JSONResponse:
    """
    Generate a markdown blog post for the submitted prompt.

    The handler is a plain `def`, so FastAPI runs it in its worker thread pool and the blocking
    upstream call does not hold up the event loop.

    Returns:
        JSONResponse: `{success: true, blog, prompt, meta}` with HTTP 200 on success, otherwise
        `{success: false, error, code, requestId}` with the error's HTTP status.
    """
    trace_id = get_trace_id(request)
    outcome = service.generate(body.prompt, trace_id)

    if isinstance(outcome, Err):
        error = outcome.error
        logger.warning(
            "Blog generation request failed",
            extra={"traceId": trace_id, "code": error.code.value, "message": error.message},
        )
        return JSONResponse(error.envelope(trace_id), status_code=error.status)

    return JSONResponse({"success": True, **outcome.value.to_dict()})
