"""Pydantic data models for projects and the sync queue."""

from projectsync.models.operation import OperationType, PendingOperation
from projectsync.models.project import (
    EngineSnapshot,
    Project,
    ProjectInput,
    ProjectStatus,
    now_ms,
)

__all__ = [
    "EngineSnapshot",
    "OperationType",
    "PendingOperation",
    "Project",
    "ProjectInput",
    "ProjectStatus",
    "now_ms",
]
