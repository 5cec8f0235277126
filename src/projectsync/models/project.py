"""Project data models."""

from __future__ import annotations

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class ProjectStatus(str, Enum):
    """Workflow status of a project."""

    BACKLOG = "Backlog"
    TODO = "To Do"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def parse(cls, value: str) -> ProjectStatus:
        """Accept the wire value or a loose spelling like ``in-progress`` or ``ToDo``."""
        key = "".join(ch for ch in value.lower() if ch.isalnum())
        for member in cls:
            if key in (member.name.lower().replace("_", ""), member.value.lower().replace(" ", "")):
                return member
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"Unknown status '{value}'. Choose one of: {choices}")


def _clean_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Project name is required")
    return v


def _clean_assignee(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


class ProjectInput(BaseModel):
    """Fields supplied by the caller when creating a project."""

    name: str
    status: ProjectStatus = ProjectStatus.BACKLOG
    assignee: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("assignee")
    @classmethod
    def validate_assignee(cls, v: str | None) -> str | None:
        return _clean_assignee(v)


class Project(BaseModel):
    """One unit of work, as stored locally and remotely.

    ``updated_at`` is the only conflict-resolution signal and is owned by the
    local engine. It serialises as ``updatedAt``.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    status: ProjectStatus
    assignee: str | None = None
    updated_at: int = Field(alias="updatedAt", ge=0)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _clean_name(v)

    @field_validator("assignee")
    @classmethod
    def validate_assignee(cls, v: str | None) -> str | None:
        return _clean_assignee(v)

    def to_record(self) -> dict[str, Any]:
        """JSON-ready dict using the persisted field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EngineSnapshot(BaseModel):
    """What the presentation layer renders."""

    projects: list[Project] = Field(default_factory=list)
    loading: bool = True
    syncing: bool = False
    is_online: bool = False
