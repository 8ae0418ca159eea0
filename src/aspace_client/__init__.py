"""Async client for the ArchivesSpace backend REST API."""

from .auth import Credentials, SessionManager
from .client import ArchivesSpaceClient, connect
from .codec import decode, decode_envelope, encode, resolve_id
from .errors import (
    ArchivesSpaceError,
    AuthError,
    DecodeError,
    EncodeError,
    ParseError,
    RequestCancelledError,
    ServerError,
    StatusError,
    TransportError,
)
from .executor import RequestExecutor
from .models import Accession, Agent, Repository, ResponseEnvelope

__all__ = [
    "Accession",
    "Agent",
    "ArchivesSpaceClient",
    "ArchivesSpaceError",
    "AuthError",
    "Credentials",
    "DecodeError",
    "EncodeError",
    "ParseError",
    "Repository",
    "RequestCancelledError",
    "RequestExecutor",
    "ResponseEnvelope",
    "ServerError",
    "SessionManager",
    "StatusError",
    "TransportError",
    "connect",
    "decode",
    "decode_envelope",
    "encode",
    "resolve_id",
]
