"""Sync engine — owns the project list and reconciles it with the remote.

Every mutation is persisted to the durable store before it is published to
subscribers. When online, mutations are sent to the remote right away; when
offline, or when the remote call fails, they are queued and delivered in bulk
by the next reconciliation.

``create_project`` and ``update_project`` are not serialised against each
other: each one re-reads the stored list immediately before writing it, and
two calls interleaving at their awaits can still lose one write.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from collections.abc import Sequence
from typing import Any, Callable

import httpx
from pydantic import BaseModel

from projectsync.client.errors import ProjectSyncError, StorageWriteError
from projectsync.client.remote import RemoteEndpoint
from projectsync.models import (
    EngineSnapshot,
    OperationType,
    PendingOperation,
    Project,
    ProjectInput,
    now_ms,
)
from projectsync.storage import DurableStore
from projectsync.sync.connectivity import ConnectivitySignal
from projectsync.sync.policy import consolidate_queue

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[EngineSnapshot], None]

# Failures of a remote call that mean "not delivered yet".
REMOTE_ERRORS = (ProjectSyncError, httpx.HTTPError)


class SyncReport(BaseModel):
    """Outcome of one reconciliation or local refresh."""

    skipped: bool = False
    local_only: bool = False
    pushed: int = 0
    fetched: int = 0
    seeded: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and not self.skipped


def new_project_id() -> str:
    return uuid.uuid4().hex


def _log_sync_failure(task: asyncio.Task[SyncReport]) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Background sync failed: %r", exc, exc_info=exc)


class SyncEngine:
    """Offline-first project list backed by a durable store and a remote endpoint."""

    def __init__(
        self,
        store: DurableStore,
        remote: RemoteEndpoint,
        connectivity: ConnectivitySignal,
        *,
        id_factory: Callable[[], str] = new_project_id,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.remote = remote
        self.connectivity = connectivity
        self._id_factory = id_factory
        self._clock = clock
        self._last_stamp = 0
        self._projects: list[Project] = []
        self._loading = True
        self._syncing = False
        self._listeners: list[SnapshotListener] = []
        self._sync_task: asyncio.Task[SyncReport] | None = None
        self._unsubscribe = connectivity.subscribe(self._on_connectivity_change)

    # -- presentation surface -------------------------------------------

    @property
    def projects(self) -> list[Project]:
        return list(self._projects)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def syncing(self) -> bool:
        return self._syncing

    @property
    def is_online(self) -> bool:
        return self.connectivity.is_online

    def snapshot(self) -> EngineSnapshot:
        return EngineSnapshot(
            projects=list(self._projects),
            loading=self._loading,
            syncing=self._syncing,
            is_online=self.is_online,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Call *listener* with a fresh snapshot after every published change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, projects: Sequence[Project] | None = None) -> None:
        if projects is not None:
            self._projects = list(projects)
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    def _set_syncing(self, value: bool) -> None:
        self._syncing = value
        self._publish()

    def _next_stamp(self) -> int:
        # Strictly increasing even when the clock does not advance between calls.
        stamp = max(self._clock(), self._last_stamp + 1)
        self._last_stamp = stamp
        return stamp

    # -- lifecycle --------------------------------------------------------

    async def load(self, *, sync: bool = True) -> list[Project]:
        """Initial read from the durable store.

        With *sync* set and the device already online, one reconciliation is
        scheduled once the list is available.
        """
        projects = await self.store.read_projects()
        logger.debug("Loaded %d projects from local storage", len(projects))
        self._loading = False
        self._publish(projects)
        if sync and self.is_online:
            self._schedule_sync()
        return self.projects

    def close(self) -> None:
        self._unsubscribe()
        self._listeners.clear()

    def _on_connectivity_change(self, online: bool) -> None:
        self._publish()
        if online and not self._loading:
            self._schedule_sync()

    def _schedule_sync(self) -> None:
        if self._sync_task is not None and not self._sync_task.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop; sync deferred until force_sync()")
            return
        self._sync_task = loop.create_task(self.reconcile())
        self._sync_task.add_done_callback(_log_sync_failure)

    async def wait_for_sync(self) -> SyncReport | None:
        """Wait for a reconciliation started by a connectivity change, if any."""
        if self._sync_task is None:
            return None
        return await self._sync_task

    # -- mutations --------------------------------------------------------

    async def create_project(self, data: ProjectInput | dict[str, Any]) -> Project:
        """Persist a new project, then deliver it or queue it.

        Remote failures never raise; a failure to persist locally raises
        :class:`StorageWriteError`.
        """
        if not isinstance(data, ProjectInput):
            data = ProjectInput.model_validate(data)
        project = Project(
            id=self._id_factory(),
            name=data.name,
            status=data.status,
            assignee=data.assignee,
            updated_at=self._next_stamp(),
        )
        current = await self.store.read_projects()
        updated = [*current, project]
        await self.store.write_projects(updated)
        self._publish(updated)
        await self._deliver(OperationType.CREATE, project)
        return project

    async def update_project(self, project: Project) -> Project:
        """Stamp, persist and deliver (or queue) a changed project.

        An id missing from the stored list leaves the list unchanged, but the
        stamped project is still sent to the remote or queued.
        """
        stamped = project.model_copy(update={"updated_at": self._next_stamp()})
        current = await self.store.read_projects()
        if not any(p.id == stamped.id for p in current):
            logger.warning("Project %s is not in local storage; list left unchanged", stamped.id)
        updated = [stamped if p.id == stamped.id else p for p in current]
        await self.store.write_projects(updated)
        self._publish(updated)
        await self._deliver(OperationType.UPDATE, stamped)
        return stamped

    async def _deliver(self, operation: OperationType, project: Project) -> None:
        if self.is_online:
            try:
                if operation is OperationType.CREATE:
                    await self.remote.create(project)
                else:
                    await self.remote.update(project)
                logger.debug("Delivered %s of %s", operation.value, project.id)
                return
            except REMOTE_ERRORS as exc:
                logger.warning(
                    "Remote %s of %s failed, queueing: %s", operation.value, project.id, exc,
                )
        await self.store.enqueue_operation(
            PendingOperation(
                id=project.id,
                operation=operation,
                data=project,
                timestamp=self._clock(),
            )
        )

    # -- reconciliation ---------------------------------------------------

    async def reconcile(self) -> SyncReport:
        """Push queued changes, then pull the remote list.

        A non-empty remote list replaces the local one. An empty remote list
        with local projects present is treated as an unseeded remote, and the
        local list is pushed instead.
        """
        if not self.is_online or self._syncing or self._loading:
            logger.debug(
                "Sync skipped (online=%s syncing=%s loading=%s)",
                self.is_online, self._syncing, self._loading,
            )
            return SyncReport(skipped=True)

        report = SyncReport()
        self._set_syncing(True)
        try:
            logger.info("Starting sync with remote")
            queue = await self.store.read_queue()
            logger.debug("Sync queue length: %d", len(queue))
            if queue:
                consolidated = consolidate_queue(queue)
                await self.remote.bulk_upsert(consolidated)
                # Operations enqueued while the push was in flight stay queued.
                await self.store.remove_operations(queue)
                report.pushed = len(consolidated)

            remote_projects = await self.remote.fetch_all()
            report.fetched = len(remote_projects)
            logger.debug("Fetched %d projects from remote", len(remote_projects))
            if remote_projects:
                self._publish(remote_projects)
                try:
                    await self.store.write_projects(remote_projects)
                except StorageWriteError:
                    logger.error("Remote projects shown but not persisted locally")
            else:
                local = await self.store.read_projects()
                if local:
                    logger.info("Remote is empty; pushing %d local projects", len(local))
                    await self.remote.bulk_upsert(local)
                    report.seeded = len(local)
        except REMOTE_ERRORS as exc:
            logger.error("Error syncing with remote: %s", exc)
            report.error = str(exc)
        finally:
            self._set_syncing(False)
        logger.info(
            "Sync finished: pushed=%d fetched=%d seeded=%d",
            report.pushed, report.fetched, report.seeded,
        )
        return report

    async def force_sync(self) -> SyncReport:
        """Reconcile when online; otherwise refresh the list from local storage."""
        if self.is_online:
            return await self.reconcile()
        self._set_syncing(True)
        try:
            local = await self.store.read_projects()
            logger.debug("Refreshing from local storage: %d projects", len(local))
            # An unreadable store reads as empty; keep what is shown.
            if local:
                self._projects = local
        finally:
            self._set_syncing(False)
        return SyncReport(local_only=True)

    async def pending_count(self) -> int:
        return len(await self.store.read_queue())
