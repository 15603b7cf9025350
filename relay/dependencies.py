"""Centralized FastAPI dependencies for use with Depends()."""

import httpx
from fastapi import Request

from relay.config import get_settings


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the outbound client opened by the application lifespan.

    Tests override this dependency with a client backed by
    ``httpx.MockTransport``.
    """
    return request.app.state.http_client


__all__ = [
    "get_http_client",
    "get_settings",
]
