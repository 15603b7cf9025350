"""Shared test fixtures: settings, a scripted Buildkite API and the FastAPI test client."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator, Iterator

import httpx
import pytest
import structlog
from httpx import ASGITransport, AsyncClient

from relay.config import Settings
from relay.dependencies import get_http_client, get_settings
from relay.main import app

BUILDKITE_URL = "https://api.buildkite.com/v2/organizations/acme/pipelines/web/builds"
BUILDKITE_TOKEN = "bk-test-token"
COMMIT_SHA = "abc123" + "0" * 33 + "f"
ZERO_SHA = "0" * 40


def make_push_payload(
    *,
    event_type: str = "git.push",
    ref: str = "refs/heads/main",
    new_object_id: str = COMMIT_SHA,
    commits: list[dict] | None = None,
    pushed_by: dict | None = None,
    detailed_markdown: str = "Bob pushed updates to main",
    extra_ref_updates: list[dict] | None = None,
) -> dict:
    """Build a realistic VSTS ``git.push`` service-hook payload.

    ``commits`` defaults to a single commit by Ada; pass ``[]`` for a push
    without commits.
    """
    if commits is None:
        commits = [make_commit()]
    return {
        "subscriptionId": "00000000-0000-0000-0000-000000000000",
        "notificationId": 3,
        "id": "03c164c2-8912-4d5e-8009-3707d5f83734",
        "eventType": event_type,
        "publisherId": "tfs",
        "message": {
            "text": "Bob pushed updates to web:main.",
            "html": "Bob pushed updates to web:main.",
            "markdown": "Bob pushed updates to `web`:`main`.",
        },
        "detailedMessage": {
            "text": detailed_markdown,
            "html": detailed_markdown,
            "markdown": detailed_markdown,
        },
        "resource": {
            "commits": commits,
            "refUpdates": [
                {
                    "name": ref,
                    "oldObjectId": "aad331d8d3b131fa9ae03cf5e53965b51942618a",
                    "newObjectId": new_object_id,
                },
                *(extra_ref_updates or []),
            ],
            "repository": {
                "id": "278d5cd2-584d-4b63-824a-2ba458937249",
                "name": "web",
                "url": "https://acme.visualstudio.com/_apis/git/repositories/278d5cd2",
                "defaultBranch": "refs/heads/main",
                "remoteUrl": "https://acme.visualstudio.com/_git/web",
            },
            "pushedBy": pushed_by
            or {
                "displayName": "Bob",
                "id": "00067ffed5b0",
                "uniqueName": "bob@x.com",
            },
            "pushId": 14,
            "date": "2026-10-01T12:00:00Z",
            "url": "https://acme.visualstudio.com/_apis/git/repositories/278d5cd2/pushes/14",
        },
        "resourceVersion": "1.0",
        "createdDate": "2026-10-01T12:00:01Z",
    }


def make_commit(
    *,
    name: str = "Ada",
    email: str = "ada@x.com",
    comment: str = "fix bug",
) -> dict:
    """Build one entry of ``resource.commits``."""
    return {
        "commitId": COMMIT_SHA,
        "author": {"name": name, "email": email, "date": "2026-10-01T11:59:00Z"},
        "committer": {"name": name, "email": email, "date": "2026-10-01T11:59:00Z"},
        "comment": comment,
        "url": f"https://acme.visualstudio.com/_apis/git/repositories/278d5cd2/commits/{COMMIT_SHA}",
    }


def make_build_response(*, number: int = 42, jobs: list[dict] | None = None) -> dict:
    """Build a Buildkite create-build response body."""
    if jobs is None:
        jobs = [
            {
                "id": "b63254c0-3271-4a98-8270-7cfbd6c2f14e",
                "type": "script",
                "name": ":rspec:",
                "state": "scheduled",
                "web_url": f"https://buildkite.com/acme/web/builds/{number}#b63254c0",
            }
        ]
    return {
        "id": "f62a1b4d-10f9-4790-bc1c-e2c3a0c80983",
        "url": f"{BUILDKITE_URL}/{number}",
        "web_url": f"https://buildkite.com/acme/web/builds/{number}",
        "number": number,
        "state": "scheduled",
        "message": "fix bug",
        "commit": COMMIT_SHA,
        "branch": "main",
        "jobs": jobs,
    }


class FakeBuildkite:
    """Scripted Buildkite API that records every request it receives."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = 201
        self.body: dict | bytes = make_build_response()
        self.error: Exception | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, bytes):
            return httpx.Response(self.status_code, content=self.body)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at the fake Buildkite endpoint, ignoring any .env file."""
    return Settings(
        buildkite_url=BUILDKITE_URL,
        buildkite_auth_token=BUILDKITE_TOKEN,
        _env_file=None,
    )


@pytest.fixture
def buildkite() -> FakeBuildkite:
    """Create a fresh scripted Buildkite API for test inspection."""
    return FakeBuildkite()


@pytest.fixture
async def client(
    settings: Settings,
    buildkite: FakeBuildkite,
) -> AsyncGenerator[AsyncClient, None]:
    """Yield an httpx AsyncClient against the app with dependencies overridden.

    Outbound Buildkite calls go through ``httpx.MockTransport`` into
    ``buildkite`` so tests can inspect and script them.
    """
    async with httpx.AsyncClient(transport=httpx.MockTransport(buildkite.handler)) as outbound:
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_http_client] = lambda: outbound
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo ``configure_logging`` side effects on the root logger and structlog."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()
