"""Tests for JSON encoding/decoding and URI id resolution."""

from __future__ import annotations

import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from aspace_client.codec import (
    backfill_id,
    decode,
    decode_envelope,
    decode_ids,
    decode_many,
    encode,
    resolve_id,
)
from aspace_client.errors import DecodeError, EncodeError, ParseError
from aspace_client.models import (
    Accession,
    Agent,
    Date,
    Extent,
    ExternalID,
    NamePerson,
    NoteBiogHist,
    NoteText,
    Ref,
    Repository,
    UserDefined,
)

REPOSITORY_BODY = (
    b'{"lock_version":0,"repo_code":"1447893780","name":"This is a test generated from go_test",'
    b'"created_by":"admin","last_modified_by":"admin","create_time":"2015-11-19T00:43:00Z",'
    b'"system_mtime":"2015-11-19T00:43:00Z","user_mtime":"2015-11-19T00:43:00Z",'
    b'"jsonmodel_type":"repository","uri":"/repositories/16",'
    b'"agent_representation":{"ref":"/agents/corporate_entities/15"}}'
)


class TestEncode:
    """Tests for `encode()`."""

    def test_omits_unset_optional_fields(self) -> None:
        payload = json.loads(encode(Repository(repo_code="CALTECH", name="Caltech Archives")))

        assert payload == {
            "jsonmodel_type": "repository",
            "lock_version": 0,
            "repo_code": "CALTECH",
            "name": "Caltech Archives",
        }

    def test_keeps_false_and_zero_values(self) -> None:
        payload = json.loads(encode(Accession(title="Papers", publish=False, lock_version=3)))

        assert payload["publish"] is False
        assert payload["lock_version"] == 3
        assert "suppressed" not in payload
        assert "id" not in payload

    def test_nested_records_and_extra_keys(self) -> None:
        accession = Accession(
            title="Papers of A. Scientist",
            id_0="2015",
            id_1="042",
            extents=[Extent(number="2", extent_type="linear_feet", portion="whole")],
            external_ids=[ExternalID(external_id="ext-1", source="legacy")],
            repository=Ref(ref="/repositories/2"),
            user_defined=UserDefined(text_1="box 4", boolean_1=True),
            acquisition_type="gift",
        )

        payload = json.loads(encode(accession))

        assert payload["extents"] == [
            {
                "jsonmodel_type": "extent",
                "lock_version": 0,
                "number": "2",
                "portion": "whole",
                "extent_type": "linear_feet",
            }
        ]
        assert payload["repository"] == {"ref": "/repositories/2"}
        assert payload["user_defined"]["text_1"] == "box 4"
        assert payload["acquisition_type"] == "gift"

    def test_keeps_null_values_in_undeclared_keys(self) -> None:
        accession = Accession(
            title="Papers",
            linked_agents=[Ref(ref="/agents/people/5", role="creator", relator=None)],
            acquisition_type=None,
        )

        payload = json.loads(encode(accession))

        assert payload["linked_agents"] == [
            {"ref": "/agents/people/5", "role": "creator", "relator": None}
        ]
        assert payload["acquisition_type"] is None
        assert "display_string" not in payload
        assert decode(encode(accession), Accession) == accession

    def test_notes_and_external_ids_carry_no_lock_version(self) -> None:
        note = NoteBiogHist(subnotes=[NoteText(content="Biography.")])

        assert json.loads(encode(note)) == {
            "jsonmodel_type": "note_bioghist",
            "subnotes": [{"jsonmodel_type": "note_text", "content": "Biography."}],
        }
        assert "lock_version" not in json.loads(encode(ExternalID(external_id="ext-1")))
        assert json.loads(encode(Date(begin="1960")))["lock_version"] == 0

    def test_str_is_the_wire_json(self) -> None:
        repo = Repository(repo_code="CALTECH", name="Caltech Archives")

        assert json.loads(str(repo)) == json.loads(encode(repo))

    def test_unserializable_value_raises_encode_error(self) -> None:
        repo = Repository(repo_code="X", name="Y", scratch=object())

        with pytest.raises(EncodeError, match="Repository"):
            encode(repo)


class TestDecode:
    """Tests for `decode()` and friends."""

    def test_repository_from_server_body(self) -> None:
        repo = decode(REPOSITORY_BODY, Repository)

        assert repo.repo_code == "1447893780"
        assert repo.uri == "/repositories/16"
        assert repo.id is None
        assert repo.created_by == "admin"
        assert repo.agent_representation == Ref(ref="/agents/corporate_entities/15")

    def test_tolerates_surrounding_whitespace(self) -> None:
        envelope = decode_envelope(b'\n  {"status":"Deleted","id":13}\n')

        assert envelope.status == "Deleted"
        assert envelope.id == 13

    @pytest.mark.parametrize(
        "content",
        [b"", b"not json", b'{"repo_code": "X"}', b'{"repo_code": "X", "name": ["a"]}', b"[]"],
    )
    def test_malformed_or_mismatched_raises_decode_error(self, content: bytes) -> None:
        with pytest.raises(DecodeError) as excinfo:
            decode(content, Repository)

        assert excinfo.value.context["shape"] == "Repository"

    def test_decode_many(self) -> None:
        repos = decode_many(b"[" + REPOSITORY_BODY + b"]", Repository)

        assert [repo.uri for repo in repos] == ["/repositories/16"]

    def test_decode_many_rejects_object(self) -> None:
        with pytest.raises(DecodeError, match="list of Repository"):
            decode_many(REPOSITORY_BODY, Repository)

    def test_decode_ids_preserves_order(self) -> None:
        assert decode_ids(b"[1,2,3,4]") == [1, 2, 3, 4]
        assert decode_ids(b"[]") == []

    @pytest.mark.parametrize("content", [b'{"ids": [1]}', b"[1, null]", b"[1.5]"])
    def test_decode_ids_rejects_non_integer_lists(self, content: bytes) -> None:
        with pytest.raises(DecodeError):
            decode_ids(content)

    def test_envelope_with_error(self) -> None:
        envelope = decode_envelope(b'{"error":"Some error message here"}')

        assert envelope.error == "Some error message here"
        assert not envelope.ok


def test_agent_round_trip_preserves_every_field() -> None:
    agent = Agent(
        jsonmodel_type="agent_person",
        lock_version=2,
        id=13,
        uri="/agents/people/13",
        publish=True,
        title="Doiel, R. S.",
        names=[
            NamePerson(
                primary_name="Doiel",
                rest_of_name="R. S.",
                sort_name="Doiel, R. S.",
                authorized=True,
                is_display_name=True,
                source="local",
                name_order="inverted",
                use_dates=[Date(begin="1960", date_type="single", label="existence")],
            )
        ],
        notes=[
            NoteBiogHist(
                label="Biography",
                subnotes=[NoteText(content="Software developer.", publish=True)],
                publish=True,
            )
        ],
        related_agents=[{"ref": "/agents/people/5", "relator": "is_associative_with"}],
        created_by="admin",
        system_mtime="2015-11-19T00:43:00Z",
    )

    assert decode(encode(agent), Agent) == agent


optional_text = st.none() | st.text(max_size=30)


@given(
    repo_code=st.text(min_size=1, max_size=20),
    name=st.text(min_size=1, max_size=60),
    lock_version=st.integers(min_value=0, max_value=10_000),
    record_id=st.none() | st.integers(min_value=1, max_value=10**9),
    country=optional_text,
    org_code=optional_text,
    created_by=optional_text,
)
def test_repository_round_trip(
    repo_code: str,
    name: str,
    lock_version: int,
    record_id: int | None,
    country: str | None,
    org_code: str | None,
    created_by: str | None,
) -> None:
    repo = Repository(
        repo_code=repo_code,
        name=name,
        lock_version=lock_version,
        id=record_id,
        uri=None if record_id is None else f"/repositories/{record_id}",
        country=country,
        org_code=org_code,
        created_by=created_by,
    )

    assert decode(encode(repo), Repository) == repo


class TestResolveId:
    """Tests for `resolve_id()`."""

    @given(
        segments=st.lists(st.from_regex(r"[a-z_]{1,12}", fullmatch=True), min_size=1, max_size=4),
        number=st.integers(min_value=0, max_value=10**12),
    )
    def test_trailing_integer_is_returned(self, segments: list[str], number: int) -> None:
        uri = "/" + "/".join(segments) + f"/{number}"

        assert resolve_id(uri) == number

    @pytest.mark.parametrize(
        "uri",
        [
            "/repositories/2/accessions",
            "/repositories/",
            "",
            "/agents/people/-3",
            "/agents/people/4a",
            "/agents/people/٣",
        ],
    )
    def test_non_numeric_trailing_segment_raises_parse_error(self, uri: str) -> None:
        with pytest.raises(ParseError) as excinfo:
            resolve_id(uri)

        assert excinfo.value.context["uri"] == uri

    def test_examples(self) -> None:
        assert resolve_id("/repositories/2/accessions/5") == 5
        assert resolve_id("/agents/corporate_entities/15") == 15
        assert resolve_id("/repositories/16") == 16


class TestBackfillId:
    """Tests for `backfill_id()`."""

    def test_uses_uri_when_present(self) -> None:
        repo = backfill_id(Repository(repo_code="X", name="Y", uri="/repositories/16"), 99)

        assert repo.id == 16

    def test_falls_back_to_caller_id_without_uri(self) -> None:
        repo = backfill_id(Repository(repo_code="X", name="Y"), 16)

        assert repo.id == 16

    def test_keeps_existing_id_without_uri(self) -> None:
        repo = backfill_id(Repository(repo_code="X", name="Y", id=7), 16)

        assert repo.id == 7

    def test_bad_uri_raises_parse_error(self) -> None:
        with pytest.raises(ParseError):
            backfill_id(Accession(uri="/repositories/2/accessions/latest"))
