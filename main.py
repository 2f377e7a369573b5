"""
main.py: FastAPI application entry point and runtime wiring for the Blog Generator service.

This module builds the ASGI app: it loads and validates settings, configures structured logging,
constructs the upstream client, repository and service once, mounts the API routers, installs the
ordered middleware pipeline and the envelope exception handlers, and exposes a Prometheus metrics
endpoint. Components receive their collaborators explicitly from `create_app()`; nothing reads
configuration from module globals at request time.

`app = create_app()` at import time is what `uvicorn main:app` serves, so a missing or invalid
setting stops the process before it accepts a connection. When executed directly, the module
starts a Uvicorn server using host/port values from the settings.
"""

import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from fastapi import FastAPI
from prometheus_client import make_asgi_app

from config import Settings, load_settings
from config.logging_config import get_logger, setup_app_logging
from llm_cloud.blog_repository import BlogRepository
from llm_cloud.provider import get_client
from middleware import ClientRateLimiter, install_middleware
from services.blog_service import BlogService
from version import API_VERSION, __version__

# --- Router Imports ---
from api import blog as blog_router
from api import health as health_router
from api.errors import register_exception_handlers

# Get a logger instance for this module
logger = get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    llm_client: Optional[Any] = None,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings (Settings, optional): Validated settings; loaded from the environment when omitted.
        llm_client (optional): OpenAI-compatible client to use instead of building one. Tests pass
            a mock here so no request ever leaves the process.
        configure_logging (bool): Install the JSON log handlers on the root logger.

    Returns:
        FastAPI: The configured application. Its `state` holds the settings, repository, service,
        rate limiter and start time used by the routers.

    Raises:
        ConfigError: If settings are loaded here and any value is missing or invalid.
    """
    if settings is None:
        settings = load_settings()
    if configure_logging:
        setup_app_logging(settings.logging_config())

    client = llm_client if llm_client is not None else get_client(settings)
    repository = BlogRepository(client, settings, logger=get_logger("llm_cloud.blog_repository"))
    service = BlogService(repository, logger=get_logger("services.blog_service"))
    limiter = ClientRateLimiter(settings.rate_limit_max, settings.rate_limit_window_seconds)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Server started",
            extra={"port": settings.port, "env": settings.app_env, "corsOrigin": settings.cors_origin},
        )
        yield
        logger.info("Server shutting down")

    app = FastAPI(title="Blog Generator API", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.blog_repository = repository
    app.state.blog_service = service
    app.state.rate_limiter = limiter
    app.state.started_at = time.monotonic()

    # Include routers
    app.include_router(health_router.router, tags=["Health"])
    app.include_router(blog_router.router, prefix=f"/api/{API_VERSION}/blog", tags=["Blog"])

    register_exception_handlers(app)
    install_middleware(app, settings, limiter)

    # Add Prometheus metrics endpoint
    app.mount("/metrics", make_asgi_app())

    return app


app = create_app()

# The uvicorn server is used to run the FastAPI application.
if __name__ == '__main__':
    import uvicorn

    active_settings: Settings = app.state.settings
    uvicorn.run(
        app,
        host=active_settings.host,
        port=active_settings.port,
        log_config=None,  # keep the JSON handlers installed by setup_app_logging
    )
