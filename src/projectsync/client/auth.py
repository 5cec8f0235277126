"""Authentication for the remote endpoint."""

from __future__ import annotations

from collections.abc import Generator

import httpx

from projectsync.config.models import RemoteProfile


class APITokenAuth(httpx.Auth):
    """Authenticate using an API token (X-API-Token header)."""

    def __init__(self, token: str) -> None:
        self.token = token

    def auth_flow(
        self, request: httpx.Request,
    ) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["X-API-Token"] = self.token
        yield request


def resolve_auth(profile: RemoteProfile) -> httpx.Auth | None:
    """Resolve authentication from a remote profile."""
    if profile.token:
        return APITokenAuth(profile.token)
    return None
