"""Local durable storage for the project list and the pending-operation queue."""

from projectsync.storage.backends import FileStorage, KeyValueStorage, MemoryStorage
from projectsync.storage.store import DurableStore

__all__ = ["DurableStore", "FileStorage", "KeyValueStorage", "MemoryStorage"]
