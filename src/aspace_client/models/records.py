"""Pydantic models for the ArchivesSpace JSONModel records this client handles.

Field names match the JSON keys ArchivesSpace uses on the wire. Every model
keeps keys it does not declare (``extra="allow"``) so a record fetched from
the server can be modified and posted back without dropping data.
"""

from __future__ import annotations

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    SerializerFunctionWrapHandler,
    model_serializer,
)

RawJSON = dict[str, JsonValue]


class WireModel(BaseModel):
    """Base for every JSON body exchanged with ArchivesSpace.

    Declared fields left as ``None`` are omitted when serializing. Undeclared
    keys are written back exactly as received, ``null`` included.
    """

    model_config = ConfigDict(extra="allow")

    @model_serializer(mode="wrap")
    def _omit_unset_fields(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        declared = {field.alias or name for name, field in type(self).model_fields.items()}
        return {
            key: value
            for key, value in data.items()
            if value is not None or key not in declared
        }

    def __str__(self) -> str:
        return self.model_dump_json(by_alias=True)


class AuditMetadata(WireModel):
    """Server-maintained bookkeeping fields shared by every JSONModel."""

    created_by: str | None = None
    last_modified_by: str | None = None
    create_time: str | None = Field(
        default=None,
        description="Creation timestamp (ISO 8601, UTC)",
        examples=["2015-11-19T00:43:00Z"],
    )
    system_mtime: str | None = None
    user_mtime: str | None = None


class Record(AuditMetadata):
    """Common base for every record shape.

    Notes and external ids carry no lock version of their own; those shapes
    default ``lock_version`` to ``None`` so it is left out of their JSON.
    """

    jsonmodel_type: str | None = None
    lock_version: int = Field(
        default=0,
        description="Optimistic-concurrency counter; must match the server copy on update",
    )


class Resource(Record):
    """A record addressable by its own URI (repository, agent, accession)."""

    id: int | None = Field(
        default=None,
        description="Server-assigned numeric id; trailing segment of `uri`",
        examples=[16],
    )
    uri: str | None = Field(
        default=None,
        description="Server-assigned record URI",
        examples=["/repositories/16"],
    )

    def ref(self) -> Ref:
        """Return a link to this record for use in another record's payload."""
        if not self.uri:
            raise ValueError(f"{type(self).__name__} has no uri to reference")
        return Ref(ref=self.uri)


class Ref(WireModel):
    """A link to another record, e.g. ``{"ref": "/agents/people/5", "role": "creator"}``."""

    ref: str


class Date(Record):
    jsonmodel_type: str | None = "date"
    begin: str | None = None
    end: str | None = None
    expression: str | None = None
    date_type: str | None = Field(default=None, examples=["single", "inclusive", "bulk"])
    label: str | None = Field(default=None, examples=["existence", "creation"])


class NoteText(Record):
    """Content of a subnote."""

    jsonmodel_type: str | None = "note_text"
    lock_version: int | None = None
    content: str | None = None
    publish: bool | None = None


class NoteBiogHist(Record):
    """Biographical/historical note attached to an agent."""

    jsonmodel_type: str | None = "note_bioghist"
    lock_version: int | None = None
    label: str | None = None
    persistent_id: str | None = None
    subnotes: list[NoteText] | None = None
    publish: bool | None = None


class NamePerson(Record):
    jsonmodel_type: str | None = "name_person"
    primary_name: str | None = None
    rest_of_name: str | None = None
    sort_name: str | None = None
    sort_name_auto_generate: bool | None = None
    authorized: bool | None = None
    is_display_name: bool | None = None
    source: str | None = None
    rules: str | None = None
    name_order: str | None = Field(default=None, examples=["inverted", "direct"])
    use_dates: list[Date] | None = None


class AgentContact(Record):
    jsonmodel_type: str | None = "agent_contact"
    name: str | None = None
    telephones: list[JsonValue] | None = None


class ExternalID(Record):
    jsonmodel_type: str | None = "external_id"
    lock_version: int | None = None
    external_id: str | None = None
    source: str | None = None


class Extent(Record):
    jsonmodel_type: str | None = "extent"
    number: str | None = None
    physical_details: str | None = None
    portion: str | None = Field(default=None, examples=["whole", "part"])
    extent_type: str | None = Field(default=None, examples=["linear_feet", "cubic_feet"])


class UserDefined(Record):
    """Site-specific fields attached to an accession."""

    jsonmodel_type: str | None = "user_defined"
    boolean_1: bool | None = None
    boolean_2: bool | None = None
    boolean_3: bool | None = None
    text_1: str | None = None
    text_2: str | None = None
    text_3: str | None = None
    text_4: str | None = None
    text_5: str | None = None
    repository: Ref | None = None


class Repository(Resource):
    """An ArchivesSpace repository."""

    jsonmodel_type: str | None = "repository"
    repo_code: str = Field(description="Short repository code", examples=["CALTECH"])
    name: str = Field(description="Repository display name", examples=["Caltech Archives"])
    url: str | None = None
    agent_representation: Ref | None = None
    country: str | None = None
    image_url: str | None = None
    org_code: str | None = None
    parent_institution_name: str | None = None


class Agent(Resource):
    """A person, family, corporate entity or software agent.

    ``agent_type`` is informational; the collection path (``people``,
    ``families``, ``corporate_entities``, ``software``) is supplied separately
    when creating or listing agents.
    """

    agent_type: str | None = Field(default=None, examples=["agent_person"])
    publish: bool | None = None
    title: str | None = None
    is_linked_to_published_record: bool | None = None
    names: list[NamePerson] | None = None
    display_name: NamePerson | None = None
    related_agents: list[RawJSON] | None = None
    dates_of_existence: list[Date] | None = None
    agent_contacts: list[AgentContact] | None = None
    linked_agent_roles: list[JsonValue] | None = None
    external_documents: list[RawJSON] | None = None
    rights_statements: list[RawJSON] | None = None
    notes: list[NoteBiogHist] | None = None


class Accession(Resource):
    """An accession record belonging to a repository."""

    jsonmodel_type: str | None = "accession"
    title: str | None = None
    display_string: str | None = None
    publish: bool | None = None
    suppressed: bool | None = None
    content_description: str | None = None
    provenance: str | None = None
    accession_date: str | None = Field(default=None, examples=["2015-11-19"])
    restrictions_apply: bool | None = None
    use_restrictions: bool | None = None
    id_0: str | None = None
    id_1: str | None = None
    id_2: str | None = None
    id_3: str | None = None
    external_ids: list[ExternalID] | None = None
    related_accessions: list[Ref] | None = None
    classifications: list[Ref] | None = None
    subjects: list[Ref] | None = None
    linked_events: list[Ref] | None = None
    extents: list[Extent] | None = None
    dates: list[Date] | None = None
    external_documents: list[RawJSON] | None = None
    rights_statements: list[RawJSON] | None = None
    deaccessions: list[RawJSON] | None = None
    related_resources: list[Ref] | None = None
    linked_agents: list[Ref] | None = None
    instances: list[RawJSON] | None = None
    repository: Ref | None = None
    user_defined: UserDefined | None = None
