"""FastAPI application with lifespan context manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from relay.config import get_settings
from relay.errors import RelayError
from relay.logging_config import configure_logging
from relay.routers import health, webhooks


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Validate settings, configure logging and own the outbound HTTP client.

    ``get_settings()`` raises when the Buildkite URL or token is missing, so
    the server fails to start instead of accepting webhooks it cannot relay.
    """
    settings = get_settings()
    configure_logging(json_logs=not settings.debug, log_level=settings.log_level)
    app.title = settings.app_name

    async with httpx.AsyncClient(timeout=settings.buildkite_timeout) as client:
        app.state.http_client = client
        structlog.get_logger().info("relay_started", buildkite_url=settings.buildkite_url)
        yield


app = FastAPI(title="vsts-buildkite-relay", lifespan=lifespan)


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> PlainTextResponse:
    """Report a relay failure to the caller as plain text with its status code."""
    return PlainTextResponse(str(exc), status_code=exc.status_code)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a JSON 500 response for any unhandled exception."""
    logger = structlog.get_logger()
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(health.router)
app.include_router(webhooks.router)
