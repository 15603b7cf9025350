"""Translate a VSTS ``git.push`` event into a Buildkite build request.

The translation is a linear filter:

1. anything other than ``git.push`` is rejected,
2. tag pushes (and other non-branch refs) are dropped,
3. branch deletions are dropped,
4. the author and message come from the first commit, or from the pusher
   and the event's detailed message when the push carries no commits.

Only the first ref update is considered; further updates in the same push are
ignored.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog
from pydantic import ValidationError

from relay.errors import InvalidRefError, MalformedPayloadError, UnsupportedEventError
from relay.schemas.buildkite import BuildAuthor, BuildRequest
from relay.schemas.vsts import GIT_PUSH_EVENT, EventEnvelope, GitPushEvent

logger = structlog.get_logger()

ZERO_OBJECT_ID = "0" * 40

BRANCH_REF_KIND = "heads"
TAG_REF_KIND = "tags"

SKIP_TAG_PUSH = "tag_push"
SKIP_BRANCH_DELETION = "branch_deletion"
SKIP_UNSUPPORTED_REF = "unsupported_ref"


@dataclass(frozen=True)
class RefName:
    """A ref path such as ``refs/heads/main`` split into kind and short name."""

    kind: str
    short_name: str


@dataclass(frozen=True)
class SkippedPush:
    """A push that was understood but deliberately not built."""

    reason: str
    ref: str


def parse_push_event(raw_body: bytes) -> GitPushEvent:
    """Validate the raw webhook body as a ``git.push`` event.

    The event type is checked on a minimal envelope first so other event
    types are reported as unsupported regardless of their resource shape.

    Raises:
        MalformedPayloadError: The body is not a JSON object of the push shape.
        UnsupportedEventError: The event type is not ``git.push``.
    """
    try:
        envelope = EventEnvelope.model_validate_json(raw_body)
    except ValidationError as exc:
        logger.info("malformed_payload", errors=exc.error_count())
        raise MalformedPayloadError("Request body is not a valid service hook event") from exc

    if envelope.event_type != GIT_PUSH_EVENT:
        logger.info("unsupported_event_type", event_type=envelope.event_type)
        raise UnsupportedEventError(envelope.event_type)

    try:
        return GitPushEvent.model_validate_json(raw_body)
    except ValidationError as exc:
        logger.info("malformed_payload", event_type=envelope.event_type, errors=exc.error_count())
        raise MalformedPayloadError("Request body is not a valid git.push event") from exc


def parse_ref(name: str) -> RefName:
    """Split ``refs/<kind>/<short name>``; the short name may contain slashes.

    Raises:
        InvalidRefError: The name has no kind or no short name.
    """
    parts = name.lstrip("/").split("/", 2)
    if len(parts) < 3 or not parts[1] or not parts[2]:
        raise InvalidRefError(f"Unrecognised ref name: {name!r}")
    return RefName(kind=parts[1], short_name=parts[2])


def translate_push(
    event: GitPushEvent,
    raw_body: bytes,
    *,
    env: dict[str, str] | None = None,
    meta_data: dict[str, str] | None = None,
) -> BuildRequest | SkippedPush:
    """Map a push event onto a Buildkite build, or say why it is skipped.

    ``raw_body`` is only used for the diagnostic log emitted when the push
    carries no commits.

    Raises:
        InvalidRefError: The push has no ref updates or an unparsable ref name.
    """
    if not event.resource.ref_updates:
        raise InvalidRefError("no ref updates present")

    ref_update = event.resource.ref_updates[0]
    ref = parse_ref(ref_update.name)

    if ref.kind == TAG_REF_KIND:
        logger.info("tag_push_ignored", ref=ref_update.name)
        return SkippedPush(reason=SKIP_TAG_PUSH, ref=ref_update.name)
    if ref.kind != BRANCH_REF_KIND:
        logger.info("unsupported_ref_ignored", ref=ref_update.name)
        return SkippedPush(reason=SKIP_UNSUPPORTED_REF, ref=ref_update.name)

    if ref_update.new_object_id == ZERO_OBJECT_ID:
        logger.info("branch_deletion_ignored", branch=ref.short_name)
        return SkippedPush(reason=SKIP_BRANCH_DELETION, ref=ref_update.name)

    if event.resource.commits:
        commit = event.resource.commits[0]
        author = BuildAuthor(name=commit.author.name, email=commit.author.email)
        message = commit.comment
    else:
        # A branch pointer can be pushed without new commits.
        logger.warning(
            "push_without_commits",
            branch=ref.short_name,
            raw_payload=raw_body.decode("utf-8", errors="replace"),
        )
        pushed_by = event.resource.pushed_by
        author = BuildAuthor(name=pushed_by.display_name, email=pushed_by.unique_name)
        message = event.detailed_message.markdown

    return BuildRequest(
        commit=ref_update.new_object_id,
        branch=ref.short_name,
        message=message,
        author=author,
        env=env or None,
        meta_data=meta_data or None,
    )
