"""VSTS service-hook router that triggers Buildkite builds for branch pushes."""

from typing import Annotated

import httpx
import structlog
from fastapi import APIRouter, Depends, Request

from relay.config import Settings
from relay.dependencies import get_http_client, get_settings
from relay.schemas.relay import RelayResponse
from relay.services.buildkite_client import create_build
from relay.services.translator import SkippedPush, parse_push_event, translate_push

logger = structlog.get_logger()

router = APIRouter(tags=["webhooks"])


@router.post("/", response_model=RelayResponse, response_model_exclude_none=True)
async def vsts_webhook(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    http_client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> RelayResponse:
    """Receive a VSTS ``git.push`` event and start the matching Buildkite build.

    Tag pushes and branch deletions are acknowledged without contacting
    Buildkite. Client errors surface as 400 and Buildkite failures as 502
    through the ``RelayError`` exception handler.
    """
    raw_body = await request.body()
    event = parse_push_event(raw_body)

    outcome = translate_push(
        event,
        raw_body,
        env=settings.buildkite_build_env,
        meta_data=settings.buildkite_build_meta_data,
    )
    if isinstance(outcome, SkippedPush):
        return RelayResponse(status="ignored", reason=outcome.reason)

    logger.info(
        "build_dispatching",
        author=outcome.author.name,
        branch=outcome.branch,
        commit=outcome.commit,
    )
    build = await create_build(
        http_client,
        settings.buildkite_url,
        settings.buildkite_auth_token,
        outcome,
    )

    build_url = build.viewable_url
    logger.info("build_created", build_number=build.number, web_url=build_url)
    return RelayResponse(status="triggered", build_url=build_url, build_number=build.number)
