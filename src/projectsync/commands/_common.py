"""Shared helpers for CLI commands — engine factory, options, lookups."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Coroutine, Sequence
from contextlib import asynccontextmanager
from typing import Annotated, Any, TypeVar

import typer

from projectsync.client.errors import NotFoundError, ValidationError
from projectsync.client.memory import InMemoryRemote, RemoteState
from projectsync.client.remote import RemoteClient
from projectsync.config.manager import ConfigManager
from projectsync.models import Project, ProjectStatus
from projectsync.storage import DurableStore, FileStorage
from projectsync.sync import ConnectivitySignal, SyncEngine

T = TypeVar("T")

# Shared Typer option type aliases
RemoteOpt = Annotated[
    str | None,
    typer.Option("--remote", "-r", help="Remote profile"),
]
UrlOpt = Annotated[
    str | None,
    typer.Option("--url", help="Remote URL override"),
]
TokenOpt = Annotated[
    str | None,
    typer.Option("--token", help="API token override"),
]
OfflineOpt = Annotated[
    bool,
    typer.Option("--offline", help="Work offline; changes are queued"),
]
DataDirOpt = Annotated[
    str | None,
    typer.Option("--data-dir", help="Local storage directory"),
]
FormatOpt = Annotated[
    str | None,
    typer.Option("--format", "-f", help="Output format: table, json, yaml, csv (default from config)"),
]
StatusOpt = Annotated[
    str | None,
    typer.Option("--status", "-s", help="Backlog, 'To Do', 'In Progress' or Completed"),
]


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Drive one command's coroutine to completion."""
    return asyncio.run(coro)


@asynccontextmanager
async def open_engine(
    remote: str | None,
    url: str | None,
    token: str | None,
    offline: bool = False,
    data_dir: str | None = None,
) -> AsyncIterator[SyncEngine]:
    """Build a loaded SyncEngine from CLI options, env vars, or config.

    With no remote URL configured anywhere the engine starts offline.
    """
    mgr = ConfigManager()
    profile = mgr.resolve_remote(profile_name=remote, url=url, token=token)
    online = profile is not None and not mgr.resolve_offline(offline)
    store = DurableStore(FileStorage(mgr.resolve_data_dir(data_dir)))
    if profile is not None:
        endpoint: RemoteClient | InMemoryRemote = RemoteClient(profile)
    else:
        # No remote configured: an unreachable stand-in, never called while offline.
        state = RemoteState()
        state.available = False
        endpoint = InMemoryRemote(state)
    engine = SyncEngine(store, endpoint, ConnectivitySignal(online=online))
    try:
        await engine.load(sync=False)
        yield engine
    finally:
        engine.close()
        if isinstance(endpoint, RemoteClient):
            await endpoint.aclose()


def open_store(data_dir: str | None = None) -> DurableStore:
    """The local store alone, for commands that never touch the remote."""
    return DurableStore(FileStorage(ConfigManager().resolve_data_dir(data_dir)))


def resolve_format(fmt: str | None) -> str:
    return ConfigManager().resolve_format(fmt)


def parse_status(value: str | None) -> ProjectStatus | None:
    if value is None:
        return None
    return ProjectStatus.parse(value)


def find_project(projects: Sequence[Project], ref: str) -> Project:
    """Look up a project by full id or unique id prefix."""
    for p in projects:
        if p.id == ref:
            return p
    matches = [p for p in projects if p.id.startswith(ref)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        raise ValidationError(f"Ambiguous project id '{ref}' matches {len(matches)} projects")
    raise NotFoundError(f"Project '{ref}' not found")
