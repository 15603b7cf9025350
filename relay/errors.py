"""Exceptions raised while relaying a webhook, each mapped to an HTTP status."""

from fastapi import status


class RelayError(Exception):
    """Base class for failures reported back to the inbound caller."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR


class MalformedPayloadError(RelayError):
    """The inbound body is not a JSON object of the expected shape."""

    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedEventError(RelayError):
    """The inbound event is not a git push."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, event_type: str) -> None:
        super().__init__(f"Event not supported: {event_type}")
        self.event_type = event_type


class InvalidRefError(RelayError):
    """The push carries no usable ref update."""

    status_code = status.HTTP_400_BAD_REQUEST


class DownstreamError(RelayError):
    """Buildkite could not be reached or answered with something unusable."""

    status_code = status.HTTP_502_BAD_GATEWAY
