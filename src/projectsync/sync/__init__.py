"""Offline-first sync engine."""

from projectsync.sync.connectivity import ConnectivitySignal
from projectsync.sync.engine import SyncEngine, SyncReport
from projectsync.sync.policy import consolidate_queue, incoming_wins

__all__ = [
    "ConnectivitySignal",
    "SyncEngine",
    "SyncReport",
    "consolidate_queue",
    "incoming_wins",
]
