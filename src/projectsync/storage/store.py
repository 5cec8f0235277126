"""Durable store — the persisted project table and pending-operation queue.

Both records are full-collection JSON snapshots. Reads never raise: an absent
or undecodable record degrades to an empty list and the failure is logged.
The backend calls block, so they run in a worker thread and every store
method is a suspension point for the event loop.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from projectsync.client.errors import StorageReadError, StorageWriteError
from projectsync.config.constants import PROJECTS_KEY, SYNC_QUEUE_KEY
from projectsync.models import PendingOperation, Project
from projectsync.storage.backends import KeyValueStorage

logger = logging.getLogger(__name__)


class DurableStore:
    """Typed access to the persisted project list and sync queue."""

    def __init__(self, backend: KeyValueStorage) -> None:
        self.backend = backend

    async def _read_records(self, key: str) -> list[Any]:
        raw = await asyncio.to_thread(self.backend.get_item, key)
        if raw is None:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON list, got {type(data).__name__}")
        return data

    async def _write_records(self, key: str, records: list[dict[str, Any]]) -> None:
        payload = json.dumps(records)
        await asyncio.to_thread(self.backend.set_item, key, payload)

    async def read_projects(self) -> list[Project]:
        try:
            records = await self._read_records(PROJECTS_KEY)
            projects = [Project.model_validate(r) for r in records]
        except (OSError, ValueError, PydanticValidationError) as exc:
            logger.warning("%s", StorageReadError(f"Cannot read projects: {exc}"))
            return []
        logger.debug("Read %d projects from storage", len(projects))
        return projects

    async def write_projects(self, projects: Sequence[Project]) -> None:
        """Persist the full list, replacing what was stored.

        Raises :class:`StorageWriteError` on failure; nothing the caller holds
        is rolled back.
        """
        try:
            await self._write_records(PROJECTS_KEY, [p.to_record() for p in projects])
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error saving projects: %s", exc)
            raise StorageWriteError(f"Cannot save projects: {exc}") from exc
        logger.debug("Saved %d projects to storage", len(projects))

    async def read_queue(self) -> list[PendingOperation]:
        try:
            records = await self._read_records(SYNC_QUEUE_KEY)
            return [PendingOperation.model_validate(r) for r in records]
        except (OSError, ValueError, PydanticValidationError) as exc:
            logger.warning("%s", StorageReadError(f"Cannot read sync queue: {exc}"))
            return []

    async def enqueue_operation(self, op: PendingOperation) -> None:
        try:
            queue = await self.read_queue()
            queue.append(op)
            await self._write_records(SYNC_QUEUE_KEY, [q.to_record() for q in queue])
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error adding %s of %s to sync queue: %s", op.operation.value, op.id, exc)
            return
        logger.debug("Queued %s for project %s (queue length %d)", op.operation.value, op.id, len(queue))

    async def remove_operations(self, delivered: Sequence[PendingOperation]) -> None:
        """Drop *delivered* from the queue, keeping anything enqueued since."""
        keys = {_op_key(op) for op in delivered}
        try:
            queue = await self.read_queue()
            remaining = [q for q in queue if _op_key(q) not in keys]
            await self._write_records(SYNC_QUEUE_KEY, [q.to_record() for q in remaining])
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error removing delivered operations from sync queue: %s", exc)
            return
        logger.debug("Removed %d delivered operations, %d still queued", len(queue) - len(remaining), len(remaining))

    async def clear_queue(self) -> None:
        try:
            await self._write_records(SYNC_QUEUE_KEY, [])
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Error clearing sync queue: %s", exc)


def _op_key(op: PendingOperation) -> tuple[str, str, int, int]:
    return (op.id, op.operation.value, op.timestamp, op.data.updated_at)
