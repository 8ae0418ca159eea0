"""Uniform response body returned by ArchivesSpace create/update/delete calls."""

from __future__ import annotations

from pydantic import Field, JsonValue

from ..errors import ServerError
from .records import WireModel


class ResponseEnvelope(WireModel):
    """Outcome of a mutating request.

    Success carries ``status``, ``id``, ``lock_version`` and ``uri`` (for example
    ``{"status": "Created", "id": 3, "uri": "/repositories/3"}``); failure populates
    ``error`` instead.
    """

    status: str | None = Field(default=None, examples=["Created", "Updated", "Deleted"])
    id: int | None = None
    lock_version: int | None = None
    stale: bool | None = None
    uri: str | None = None
    warnings: list[JsonValue] = Field(default_factory=list)
    error: JsonValue | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self, context: dict[str, object] | None = None) -> ResponseEnvelope:
        """Raise `ServerError` when ``error`` is populated, otherwise return self."""
        if self.error is not None:
            raise ServerError(f"ArchivesSpace reported an error: {self.error}", self, context)
        return self
