"""Exception classes for ArchivesSpace API interactions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .models.envelope import ResponseEnvelope


class ArchivesSpaceError(Exception):
    """Base exception for all ArchivesSpace client errors.

    ``context`` carries whatever the raising site knows about the failed call
    (method, path, underlying cause) so callers can log or retry.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = context or {}


class AuthError(ArchivesSpaceError):
    """Login was rejected or returned a malformed response."""


class TransportError(ArchivesSpaceError):
    """The request never produced an HTTP response (DNS, connect, timeout)."""


class RequestCancelledError(TransportError):
    """The caller's cancel event fired before the response completed."""


class StatusError(ArchivesSpaceError):
    """ArchivesSpace answered with a non-2xx HTTP status.

    Validation failures (400) and stale lock versions (409) come back with an
    ``{"error": ...}`` body; when the body decodes that way it is kept on
    ``envelope``.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        reason: str = "",
        body: str = "",
        envelope: ResponseEnvelope | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context)
        self.status_code = status_code
        self.reason = reason
        self.body = body
        self.envelope = envelope


class DecodeError(ArchivesSpaceError):
    """A response body was not valid JSON or did not match the expected shape."""


class EncodeError(ArchivesSpaceError):
    """A record could not be serialized to JSON."""


class ParseError(ArchivesSpaceError):
    """A URI did not end in a numeric record id."""


class ServerError(ArchivesSpaceError):
    """A 2xx response carried an envelope with ``error`` populated."""

    def __init__(
        self,
        message: str,
        envelope: ResponseEnvelope,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, context)
        self.envelope = envelope
