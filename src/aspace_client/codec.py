"""JSON encoding/decoding of ArchivesSpace records and URI id resolution."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from .errors import DecodeError, EncodeError, ParseError
from .models.envelope import ResponseEnvelope
from .models.records import Resource, WireModel

ModelT = TypeVar("ModelT", bound=BaseModel)
ResourceT = TypeVar("ResourceT", bound=Resource)

_ID_LIST: TypeAdapter[list[int]] = TypeAdapter(list[int])


@lru_cache(maxsize=None)
def _list_adapter(shape: type[BaseModel]) -> TypeAdapter[list[Any]]:
    return TypeAdapter(list[shape])  # type: ignore[valid-type]


def _excerpt(content: bytes) -> str:
    return content[:200].decode("utf-8", errors="replace")


def encode(record: WireModel) -> bytes:
    """Serialize a record to JSON, omitting declared optional fields that are unset."""
    try:
        return record.model_dump_json(by_alias=True).encode("utf-8")
    except (ValueError, TypeError) as exc:
        raise EncodeError(
            f"Cannot JSON encode {type(record).__name__}: {exc}",
            {"shape": type(record).__name__, "cause": str(exc)},
        ) from exc


def decode(content: bytes, shape: type[ModelT]) -> ModelT:
    """Parse a JSON object into ``shape``."""
    try:
        return shape.model_validate_json(content.strip())
    except ValidationError as exc:
        raise DecodeError(
            f"Cannot decode {shape.__name__} from response: {_excerpt(content)}",
            {"shape": shape.__name__, "cause": str(exc)},
        ) from exc


def decode_many(content: bytes, shape: type[ModelT]) -> list[ModelT]:
    """Parse a JSON array of objects into a list of ``shape``."""
    try:
        return _list_adapter(shape).validate_json(content.strip())
    except ValidationError as exc:
        raise DecodeError(
            f"Cannot decode list of {shape.__name__} from response: {_excerpt(content)}",
            {"shape": f"list[{shape.__name__}]", "cause": str(exc)},
        ) from exc


def decode_ids(content: bytes) -> list[int]:
    """Parse an ``all_ids=true`` listing such as ``[1,2,3,4]``."""
    try:
        return _ID_LIST.validate_json(content.strip())
    except ValidationError as exc:
        raise DecodeError(
            f"Cannot decode id list from response: {_excerpt(content)}",
            {"shape": "list[int]", "cause": str(exc)},
        ) from exc


def decode_envelope(content: bytes) -> ResponseEnvelope:
    return decode(content, ResponseEnvelope)


def resolve_id(uri: str) -> int:
    """Return the numeric id that ends ``uri``, e.g. ``/repositories/2/accessions/5`` -> 5."""
    segment = uri.split("/")[-1]
    if not segment.isascii() or not segment.isdigit():
        raise ParseError(
            f"URI does not end in a numeric id: {uri!r}",
            {"uri": uri, "segment": segment},
        )
    return int(segment)


def backfill_id(resource: ResourceT, fallback: int | None = None) -> ResourceT:
    """Fill ``resource.id`` from its URI, or from ``fallback`` when there is no URI.

    Some endpoints return records with a ``uri`` but no ``id`` field.
    """
    if resource.uri:
        resource.id = resolve_id(resource.uri)
    elif resource.id is None:
        resource.id = fallback
    return resource
