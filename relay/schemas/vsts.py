"""Pydantic models for VSTS (Azure DevOps) service-hook payloads.

Reference: https://learn.microsoft.com/azure/devops/service-hooks/events#git.push

Only the fields the relay reads are declared. Keys are camelCase on the wire;
missing strings default to ``""`` and missing lists to ``[]`` so a sparse but
well-formed payload still validates.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

GIT_PUSH_EVENT = "git.push"


class VstsModel(BaseModel):
    """Base model mapping camelCase JSON keys onto snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        """Treat an explicit JSON ``null`` like a missing key so the default applies."""
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class EventEnvelope(VstsModel):
    """The part of every service-hook event needed to decide whether to handle it."""

    event_type: str = ""


class MessageBlock(VstsModel):
    """Human-readable summary rendered in several formats."""

    text: str = ""
    html: str = ""
    markdown: str = ""


class GitUserDate(VstsModel):
    """Author or committer identity on a commit."""

    name: str = ""
    email: str = ""
    date: str | None = None


class GitCommitRef(VstsModel):
    """A commit included in the push."""

    commit_id: str = ""
    author: GitUserDate = Field(default_factory=GitUserDate)
    committer: GitUserDate = Field(default_factory=GitUserDate)
    comment: str = ""
    url: str = ""


class GitRefUpdate(VstsModel):
    """A ref moving from ``old_object_id`` to ``new_object_id``."""

    name: str = ""
    old_object_id: str = ""
    new_object_id: str = ""


class IdentityRef(VstsModel):
    """The user who performed the push."""

    display_name: str = ""
    id: str = ""
    unique_name: str = ""


class GitRepository(VstsModel):
    """Repository metadata from the push resource."""

    id: str = ""
    name: str = ""
    url: str = ""
    default_branch: str = ""
    remote_url: str = ""


class GitPushResource(VstsModel):
    """The ``resource`` object of a ``git.push`` event."""

    commits: list[GitCommitRef] = Field(default_factory=list)
    ref_updates: list[GitRefUpdate] = Field(default_factory=list)
    repository: GitRepository = Field(default_factory=GitRepository)
    pushed_by: IdentityRef = Field(default_factory=IdentityRef)
    push_id: int | None = None
    url: str = ""


class GitPushEvent(EventEnvelope):
    """VSTS ``git.push`` service-hook event."""

    id: str = ""
    message: MessageBlock = Field(default_factory=MessageBlock)
    detailed_message: MessageBlock = Field(default_factory=MessageBlock)
    resource: GitPushResource = Field(default_factory=GitPushResource)
