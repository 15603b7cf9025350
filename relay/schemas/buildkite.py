"""Pydantic models for the Buildkite create-build API.

Reference: https://buildkite.com/docs/apis/rest-api/builds#create-a-build
"""

from pydantic import BaseModel, Field


class BuildAuthor(BaseModel):
    """Author shown on the Buildkite build."""

    name: str
    email: str


class BuildRequest(BaseModel):
    """Body of the create-build request."""

    commit: str
    branch: str
    message: str
    author: BuildAuthor
    env: dict[str, str] | None = None
    meta_data: dict[str, str] | None = None

    def to_json(self) -> bytes:
        """Serialize for the wire, leaving out unset ``env``/``meta_data``."""
        return self.model_dump_json(exclude_none=True).encode()


class BuildJob(BaseModel):
    """A job scheduled as part of the created build."""

    id: str = ""
    type: str = ""
    name: str | None = None
    state: str | None = None
    web_url: str | None = None


class BuildResponse(BaseModel):
    """The subset of Buildkite's build representation the relay reports on."""

    id: str
    url: str = ""
    web_url: str = ""
    number: int | None = None
    state: str = ""
    message: str | None = None
    commit: str = ""
    branch: str = ""
    jobs: list[BuildJob] = Field(default_factory=list)

    @property
    def viewable_url(self) -> str | None:
        """URL of the first job that has one, else the build page.

        Waiter and block jobs carry no ``web_url``.
        """
        for job in self.jobs:
            if job.web_url:
                return job.web_url
        return self.web_url or None
