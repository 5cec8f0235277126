"""Remote endpoint contract and its HTTP client."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any, Protocol

import httpx
from pydantic import ValidationError as PydanticValidationError

from projectsync.client.auth import resolve_auth
from projectsync.client.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    RemoteAPIError,
    RemoteConnectionError,
    ValidationError,
)
from projectsync.config.constants import DEFAULT_API_BASE, DEFAULT_MAX_RETRIES
from projectsync.config.models import RemoteProfile
from projectsync.models import Project

logger = logging.getLogger(__name__)


class RemoteEndpoint(Protocol):
    """Operations the sync engine needs from the remote store.

    Any call may raise; the engine treats every failure as "not delivered".
    """

    async def fetch_all(self) -> list[Project]: ...

    async def create(self, project: Project) -> Project: ...

    async def update(self, project: Project) -> Project: ...

    async def bulk_upsert(self, projects: Sequence[Project]) -> None: ...


class RemoteClient:
    """Asynchronous HTTP client for the projects REST API."""

    def __init__(
        self,
        profile: RemoteProfile,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.profile = profile
        self.base_url = f"{profile.url}{DEFAULT_API_BASE}"
        if not profile.verify_ssl:
            logger.warning("TLS certificate verification is disabled")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            auth=resolve_auth(profile),
            verify=profile.verify_ssl,
            timeout=profile.timeout,
            transport=transport or httpx.AsyncHTTPTransport(retries=DEFAULT_MAX_RETRIES),
            headers={"Accept": "application/json"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> RemoteClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.is_success:
            return response
        status = response.status_code
        try:
            detail = response.json().get("message", response.text)
        except (json.JSONDecodeError, AttributeError):
            detail = response.text
        if status in (401, 403):
            raise AuthenticationError("Authentication failed. Check your API token.")
        if status == 404:
            raise NotFoundError(f"Not found: {detail}")
        if status == 409:
            raise ConflictError(f"Conflict: {detail}")
        if status == 422:
            raise ValidationError(detail)
        raise RemoteAPIError(status, detail)

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.ConnectError as exc:
            raise RemoteConnectionError(
                f"Cannot connect to remote at {self.profile.url}: {exc}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise RemoteConnectionError(
                f"Request to {self.profile.url} timed out: {exc}"
            ) from exc
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise RemoteConnectionError(
                f"Invalid URL for remote at {self.profile.url}: {exc}"
            ) from exc
        except httpx.TransportError as exc:
            raise RemoteConnectionError(
                f"Request to {self.profile.url} failed: {exc}"
            ) from exc
        return self._handle_response(response)

    def _parse_project(self, data: Any) -> Project:
        try:
            return Project.model_validate(data)
        except PydanticValidationError as exc:
            raise RemoteAPIError(200, f"Malformed project in response: {exc}") from exc

    async def fetch_all(self) -> list[Project]:
        resp = await self.request("GET", "/projects")
        data = self._json(resp)
        items = data.get("items", []) if isinstance(data, dict) else data
        if not isinstance(items, list):
            raise RemoteAPIError(resp.status_code, "Unexpected response shape")
        return [self._parse_project(item) for item in items]

    async def create(self, project: Project) -> Project:
        resp = await self.request("POST", "/projects", json=project.to_record())
        return self._echo(resp, project)

    async def update(self, project: Project) -> Project:
        resp = await self.request(
            "PUT", f"/projects/{project.id}", json=project.to_record(),
        )
        return self._echo(resp, project)

    async def bulk_upsert(self, projects: Sequence[Project]) -> None:
        await self.request(
            "POST",
            "/projects/bulk-sync",
            json={"projects": [p.to_record() for p in projects]},
        )

    def _echo(self, resp: httpx.Response, sent: Project) -> Project:
        # Some servers answer 204; the submitted project is then the echo.
        if not resp.content:
            return sent
        return self._parse_project(self._json(resp))

    def _json(self, resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise RemoteAPIError(resp.status_code, f"Invalid JSON in response: {exc}") from exc
