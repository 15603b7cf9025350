"""Liveness endpoint."""

from fastapi import APIRouter

from relay.schemas.health import HealthResponse

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse)
async def healthz() -> HealthResponse:
    """Report that the process is up and serving requests."""
    return HealthResponse(status="ok")
