"""Credentials and session handling for the ArchivesSpace backend API."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import quote

import httpx
from loguru import logger
from omegaconf import OmegaConf
from pydantic import BaseModel, Field, HttpUrl, field_validator

from .errors import AuthError, TransportError
from .executor import RequestExecutor

SESSION_HEADER = "X-ArchivesSpace-Session"
DEFAULT_TIMEOUT_SECONDS = 30.0
REQUIRED_KEYS = ("ASPACE_API_URL", "ASPACE_USERNAME", "ASPACE_PASSWORD")


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _resolve_secrets_location(spec: Path | str, *, source: str) -> Path:
    raw = Path(spec).expanduser()
    if raw.is_absolute():
        candidates: tuple[Path, ...] = (raw,)
    else:
        candidates = (Path.cwd() / raw, _repo_root() / raw)

    existing: list[Path] = []
    for candidate in candidates:
        if candidate.exists() and candidate.resolve() not in existing:
            existing.append(candidate.resolve())

    if len(existing) == 1:
        return existing[0]
    if not existing:
        checked = "\n".join(str(candidate) for candidate in candidates)
        raise FileNotFoundError(f"Secrets file not found for {source}: {raw}\nChecked:\n{checked}")
    joined = ", ".join(str(path) for path in existing)
    raise RuntimeError(f"Multiple secrets files found for {source}: {raw}. Candidates: {joined}")


def _normalize(config: Mapping[Any, Any]) -> dict[str, Any]:
    return {str(key).upper(): value for key, value in config.items()}


def _credentials_kwargs(normalized: dict[str, Any]) -> dict[str, Any]:
    missing = [key for key in REQUIRED_KEYS if not normalized.get(key)]
    if missing:
        raise ValueError(f"Missing ArchivesSpace settings: {', '.join(missing)}")

    kwargs: dict[str, Any] = {
        "api_url": str(normalized["ASPACE_API_URL"]),
        "username": str(normalized["ASPACE_USERNAME"]),
        "password": str(normalized["ASPACE_PASSWORD"]),
    }
    if normalized.get("ASPACE_TIMEOUT"):
        kwargs["timeout"] = float(normalized["ASPACE_TIMEOUT"])
    return kwargs


class Credentials(BaseModel):
    """Validated connection settings for one ArchivesSpace backend.

    Blank values are rejected at construction so a misconfigured process
    fails at startup rather than on its first request.
    """

    api_url: HttpUrl = Field(
        description="ArchivesSpace backend API base URL",
        examples=["http://localhost:8089"],
    )
    username: str = Field(description="ArchivesSpace user name", examples=["admin"])
    password: str = Field(description="ArchivesSpace password", examples=["admin"])
    timeout: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Default per-request timeout in seconds",
    )

    @field_validator("username", "password")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> Credentials:
        """Load credentials from a YAML secrets file, ``conf/secrets.yml`` by default."""
        env_path = os.environ.get("ASPACE_CONFIG_PATH")
        if env_path:
            location = _resolve_secrets_location(env_path, source="ASPACE_CONFIG_PATH")
        elif path is not None:
            location = _resolve_secrets_location(path, source="path")
        else:
            location = _resolve_secrets_location("conf/secrets.yml", source="default")

        config = OmegaConf.to_container(OmegaConf.load(location), resolve=True)
        if not isinstance(config, dict):
            raise ValueError("Secrets file must contain a mapping of ArchivesSpace settings.")
        return cls(**_credentials_kwargs(_normalize(config)))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Credentials:
        """Load credentials from ``ASPACE_API_URL``/``ASPACE_USERNAME``/``ASPACE_PASSWORD``."""
        source = os.environ if environ is None else environ
        return cls(**_credentials_kwargs(_normalize(source)))


class SessionManager:
    """Hold the session token for one ArchivesSpace login."""

    def __init__(self, client: httpx.AsyncClient, credentials: Credentials) -> None:
        self._client = client
        self._credentials = credentials
        self._token = ""
        self.executor = RequestExecutor(client, self, timeout=credentials.timeout)

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def token(self) -> str:
        return self._token

    def is_authenticated(self) -> bool:
        return bool(self._token)

    def headers(self) -> dict[str, str]:
        """Return the session header to attach to authenticated requests."""
        if not self._token:
            return {}
        return {SESSION_HEADER: self._token}

    async def login(self) -> str:
        """Exchange username/password for a session token and keep it for later calls."""
        username = self._credentials.username
        path = f"/users/{quote(username, safe='')}/login"
        context = {"method": "POST", "path": path, "username": username}

        try:
            response = await self._client.post(
                path,
                data={"password": self._credentials.password},
                timeout=self._credentials.timeout,
            )
        except httpx.TransportError as exc:
            logger.error(f"ArchivesSpace login request failed: {exc!r}")
            raise TransportError(
                f"Login request failed: {exc}", context | {"cause": repr(exc)}
            ) from exc

        if response.status_code != httpx.codes.OK:
            logger.error(f"ArchivesSpace login rejected for {username}: {response.status_code}")
            raise AuthError(
                f"ArchivesSpace returned HTTP status {response.status_code} "
                f"{response.reason_phrase}",
                context | {"status_code": response.status_code},
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise AuthError(
                f"Can't process login response {response.text[:200]!r}",
                context | {"cause": str(exc)},
            ) from exc

        token = body.get("session") if isinstance(body, dict) else None
        if not isinstance(token, str) or not token:
            raise AuthError("ArchivesSpace login response missing session token", context)

        self._token = token
        logger.info(f"Logged in to ArchivesSpace as {username}")
        return token

    async def logout(self) -> None:
        """Invalidate the session token.

        The local token is dropped even when the request fails; the failure
        still propagates to the caller.
        """
        try:
            await self.executor.execute("POST", "/logout")
        finally:
            self._token = ""
            logger.info(f"Logged out of ArchivesSpace as {self._credentials.username}")
