"""Simulated remote backend with an explicit, injectable state object."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence

from projectsync.client.errors import NotFoundError, RemoteConnectionError
from projectsync.models import Project
from projectsync.sync.policy import incoming_wins

logger = logging.getLogger(__name__)


class RemoteState:
    """The simulated server's project table.

    Setting ``available`` to ``False`` makes every call on a remote backed by
    this state fail with :class:`RemoteConnectionError`.
    """

    def __init__(self, projects: Iterable[Project] = ()) -> None:
        self.projects: dict[str, Project] = {p.id: p for p in projects}
        self.available = True

    def list(self) -> list[Project]:
        return list(self.projects.values())

    def get(self, project_id: str) -> Project | None:
        return self.projects.get(project_id)


class InMemoryRemote:
    """Remote endpoint over a :class:`RemoteState`, with optional simulated latency."""

    def __init__(self, state: RemoteState | None = None, *, latency: float = 0.0) -> None:
        self.state = state if state is not None else RemoteState()
        self.latency = latency

    async def _round_trip(self) -> None:
        if self.latency:
            await asyncio.sleep(self.latency)
        else:
            await asyncio.sleep(0)
        if not self.state.available:
            raise RemoteConnectionError("Simulated remote is unavailable")

    async def fetch_all(self) -> list[Project]:
        await self._round_trip()
        return [p.model_copy() for p in self.state.list()]

    async def create(self, project: Project) -> Project:
        await self._round_trip()
        self.state.projects[project.id] = project.model_copy()
        return project

    async def update(self, project: Project) -> Project:
        await self._round_trip()
        if project.id not in self.state.projects:
            raise NotFoundError(f"Not found: project {project.id}")
        self.state.projects[project.id] = project.model_copy()
        return project

    async def bulk_upsert(self, projects: Sequence[Project]) -> None:
        await self._round_trip()
        for project in projects:
            if incoming_wins(self.state.get(project.id), project):
                self.state.projects[project.id] = project.model_copy()
            else:
                logger.debug("Kept stored copy of %s (not older than submitted)", project.id)
