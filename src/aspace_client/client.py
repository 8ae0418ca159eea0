"""ArchivesSpace resource operations: repositories, agents and accessions."""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator
from typing import TypeVar

import httpx
from loguru import logger

from .auth import Credentials, SessionManager
from .codec import backfill_id, decode, decode_envelope, decode_ids, decode_many, encode
from .errors import ArchivesSpaceError
from .models.envelope import ResponseEnvelope
from .models.records import Accession, Agent, Repository, Resource

ResourceT = TypeVar("ResourceT", bound=Resource)

ALL_IDS = {"all_ids": "true"}


class ArchivesSpaceClient:
    """Wrap the ArchivesSpace REST endpoints for repositories, agents and accessions.

    Create, update and delete return the server's `ResponseEnvelope` and raise
    `ServerError` if the envelope reports an error. Get returns a typed record
    with ``id`` filled in.
    """

    def __init__(self, session: SessionManager) -> None:
        self._session = session
        self._executor = session.executor

    @property
    def session(self) -> SessionManager:
        return self._session

    async def _mutate(
        self,
        method: str,
        path: str,
        record: Resource,
        cancel: asyncio.Event | None,
    ) -> ResponseEnvelope:
        content = await self._executor.execute(method, path, encode(record), cancel=cancel)
        envelope = decode_envelope(content)
        envelope.raise_for_error({"method": method, "path": path})
        logger.info(f"{envelope.status or method} {envelope.uri or path}")
        return envelope

    async def _fetch(
        self,
        path: str,
        shape: type[ResourceT],
        record_id: int | None,
        cancel: asyncio.Event | None,
    ) -> ResourceT:
        content = await self._executor.execute("GET", path, cancel=cancel)
        return backfill_id(decode(content, shape), record_id)

    @staticmethod
    def _own_path(record: Resource, fallback: str | None = None) -> str:
        if record.uri:
            return record.uri
        if fallback:
            return fallback
        raise ValueError(f"{type(record).__name__} has no uri; fetch or create it first")

    async def get_record(
        self, uri: str, shape: type[ResourceT], *, cancel: asyncio.Event | None = None
    ) -> ResourceT:
        """Fetch any record by its URI, e.g. a ``ref`` found in another record."""
        return await self._fetch(uri, shape, None, cancel)

    # Repositories

    async def create_repository(
        self, repo: Repository, *, cancel: asyncio.Event | None = None
    ) -> ResponseEnvelope:
        return await self._mutate("POST", "/repositories", repo, cancel)

    async def get_repository(
        self, repo_id: int, *, cancel: asyncio.Event | None = None
    ) -> Repository:
        return await self._fetch(f"/repositories/{repo_id}", Repository, repo_id, cancel)

    async def update_repository(
        self, repo: Repository, *, cancel: asyncio.Event | None = None
    ) -> ResponseEnvelope:
        fallback = f"/repositories/{repo.id}" if repo.id is not None else None
        return await self._mutate("POST", self._own_path(repo, fallback), repo, cancel)

    async def delete_repository(
        self, repo: Repository, *, cancel: asyncio.Event | None = None
    ) -> ResponseEnvelope:
        fallback = f"/repositories/{repo.id}" if repo.id is not None else None
        return await self._mutate("DELETE", self._own_path(repo, fallback), repo, cancel)

    async def list_repositories(
        self, *, cancel: asyncio.Event | None = None
    ) -> list[Repository]:
        """Return every repository, with ids resolved from their URIs."""
        content = await self._executor.execute("GET", "/repositories", cancel=cancel)
        return [backfill_id(repo) for repo in decode_many(content, Repository)]

    # Agents

    async def create_agent(
        self, agent_type: str, agent: Agent, *, cancel: asyncio.Event | None = None
    ) -> ResponseEnvelope:
        """Create an agent under ``/agents/{agent_type}`` (``people``, ``families``, ...)."""
        return await self._mutate("POST", f"/agents/{agent_type}", agent, cancel)

    async def get_agent(
        self, agent_type: str, agent_id: int, *, cancel: asyncio.Event | None = None
    ) -> Agent:
        return await self._fetch(f"/agents/{agent_type}/{agent_id}", Agent, agent_id, cancel)

    async def update_agent(
        self, agent: Agent, *, cancel: asyncio.Event | None = None
    ) -> ResponseEnvelope:
        return await self._mutate("POST", self._own_path(agent), agent, cancel)

    async def delete_agent(
        self, agent: Agent, *, cancel: asyncio.Event | None = None
    ) -> ResponseEnvelope:
        return await self._mutate("DELETE", self._own_path(agent), agent, cancel)

    async def list_agents(
        self, agent_type: str, *, cancel: asyncio.Event | None = None
    ) -> list[int]:
        content = await self._executor.execute(
            "GET", f"/agents/{agent_type}", params=ALL_IDS, cancel=cancel
        )
        return decode_ids(content)

    # Accessions

    async def create_accession(
        self, repo_id: int, accession: Accession, *, cancel: asyncio.Event | None = None
    ) -> ResponseEnvelope:
        return await self._mutate(
            "POST", f"/repositories/{repo_id}/accessions", accession, cancel
        )

    async def get_accession(
        self, repo_id: int, accession_id: int, *, cancel: asyncio.Event | None = None
    ) -> Accession:
        path = f"/repositories/{repo_id}/accessions/{accession_id}"
        return await self._fetch(path, Accession, accession_id, cancel)

    async def update_accession(
        self, accession: Accession, *, cancel: asyncio.Event | None = None
    ) -> ResponseEnvelope:
        return await self._mutate("POST", self._own_path(accession), accession, cancel)

    async def delete_accession(
        self, accession: Accession, *, cancel: asyncio.Event | None = None
    ) -> ResponseEnvelope:
        return await self._mutate("DELETE", self._own_path(accession), accession, cancel)

    async def list_accessions(
        self, repo_id: int, *, cancel: asyncio.Event | None = None
    ) -> list[int]:
        content = await self._executor.execute(
            "GET", f"/repositories/{repo_id}/accessions", params=ALL_IDS, cancel=cancel
        )
        return decode_ids(content)


@contextlib.asynccontextmanager
async def connect(credentials: Credentials | None = None) -> AsyncIterator[ArchivesSpaceClient]:
    """Open an HTTP client, log in, and yield a ready `ArchivesSpaceClient`.

    Credentials default to `Credentials.from_file()`. The session is logged
    out and the HTTP client closed on exit. If the block raised, that error
    reaches the caller even when logout fails too.
    """
    if credentials is None:
        credentials = Credentials.from_file()

    async with httpx.AsyncClient(
        base_url=str(credentials.api_url), timeout=credentials.timeout
    ) as http_client:
        session = SessionManager(http_client, credentials)
        await session.login()
        try:
            yield ArchivesSpaceClient(session)
        except BaseException:
            if session.is_authenticated():
                try:
                    await session.logout()
                except ArchivesSpaceError as exc:
                    logger.warning(f"Logout after failed block also failed: {exc}")
            raise
        if session.is_authenticated():
            await session.logout()
