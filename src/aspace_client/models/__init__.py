"""Typed ArchivesSpace records and response envelopes."""

from .envelope import ResponseEnvelope
from .records import (
    Accession,
    Agent,
    AgentContact,
    AuditMetadata,
    Date,
    ExternalID,
    Extent,
    NamePerson,
    NoteBiogHist,
    NoteText,
    RawJSON,
    Record,
    Ref,
    Repository,
    Resource,
    UserDefined,
    WireModel,
)

__all__ = [
    "Accession",
    "Agent",
    "AgentContact",
    "AuditMetadata",
    "Date",
    "ExternalID",
    "Extent",
    "NamePerson",
    "NoteBiogHist",
    "NoteText",
    "RawJSON",
    "Record",
    "Ref",
    "Repository",
    "Resource",
    "ResponseEnvelope",
    "UserDefined",
    "WireModel",
]
