"""Last-writer-wins conflict policy, shared by the engine and the simulated remote."""

from __future__ import annotations

from collections.abc import Sequence

from projectsync.models import PendingOperation, Project


def incoming_wins(stored: Project | None, incoming: Project) -> bool:
    """True when *incoming* should replace *stored*.

    Ties keep the stored copy, which makes redelivery of the same payload a
    no-op.
    """
    return stored is None or incoming.updated_at > stored.updated_at


def consolidate_queue(queue: Sequence[PendingOperation]) -> list[Project]:
    """Collapse queued operations to one payload per project id.

    The payload with the greatest ``updatedAt`` wins, then the later enqueue
    ``timestamp``, then the later queue position. Output keeps the order in
    which each id first appeared.
    """
    chosen: dict[str, PendingOperation] = {}
    for op in queue:
        key = op.data.id
        current = chosen.get(key)
        if current is None or (op.data.updated_at, op.timestamp) >= (
            current.data.updated_at,
            current.timestamp,
        ):
            chosen[key] = op
    return [op.data for op in chosen.values()]
