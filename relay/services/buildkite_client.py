"""Buildkite REST API client for creating a single build."""

import httpx
import structlog
from pydantic import ValidationError

from relay.errors import DownstreamError
from relay.schemas.buildkite import BuildRequest, BuildResponse

logger = structlog.get_logger()


def _auth_headers(token: str) -> dict[str, str]:
    """Build Buildkite API headers with Bearer auth."""
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }


async def create_build(
    client: httpx.AsyncClient,
    url: str,
    token: str,
    build: BuildRequest,
) -> BuildResponse:
    """POST ``build`` to the Buildkite create-build endpoint.

    Args:
        client: Shared httpx async client; its timeout bounds the call.
        url: Full create-build URL, e.g.
            ``https://api.buildkite.com/v2/organizations/{org}/pipelines/{pipeline}/builds``.
        token: Buildkite API access token.
        build: The build to create.

    Returns:
        The created build, guaranteed to list at least one job.

    Raises:
        DownstreamError: On transport failure, a non-2xx response, a body that
            is not a build, or a build without jobs. The request is never retried.
    """
    try:
        resp = await client.post(url, content=build.to_json(), headers=_auth_headers(token))
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        logger.error(
            "buildkite_request_failed",
            status_code=exc.response.status_code,
            body=exc.response.text[:500],
        )
        raise DownstreamError(
            f"Buildkite responded with HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        logger.error("buildkite_request_failed", error=repr(exc))
        raise DownstreamError(f"Could not reach Buildkite: {exc.__class__.__name__}") from exc

    try:
        created = BuildResponse.model_validate_json(resp.content)
    except ValidationError as exc:
        logger.error("buildkite_request_failed", status_code=resp.status_code, errors=exc.error_count())
        raise DownstreamError("Buildkite returned an unreadable build response") from exc

    if not created.jobs:
        logger.error("buildkite_request_failed", build_id=created.id, reason="no jobs")
        raise DownstreamError("no jobs in build response")
    return created
