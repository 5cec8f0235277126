"""Pending-operation queue models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel

from projectsync.models.project import Project


class OperationType(str, Enum):
    CREATE = "create"
    UPDATE = "update"


class PendingOperation(BaseModel):
    """A mutation not yet confirmed delivered to the remote.

    ``id`` is the target project id; ``timestamp`` is the enqueue time in
    milliseconds.
    """

    id: str
    operation: OperationType
    data: Project
    timestamp: int

    def to_record(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "operation": self.operation.value,
            "data": self.data.to_record(),
            "timestamp": self.timestamp,
        }
