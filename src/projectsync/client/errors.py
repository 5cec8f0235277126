"""Typed exceptions and error handling decorator."""

from __future__ import annotations

import functools
from typing import Any, Callable, TypeVar

from rich.console import Console

F = TypeVar("F", bound=Callable[..., Any])

err_console = Console(stderr=True)


class ProjectSyncError(Exception):
    """Base exception for projectsync."""

    exit_code: int = 1


class RemoteConnectionError(ProjectSyncError):
    """Cannot reach the remote endpoint."""

    exit_code = 2


class AuthenticationError(ProjectSyncError):
    """Authentication failed (401/403)."""

    exit_code = 3


class NotFoundError(ProjectSyncError):
    """Project not found (404)."""

    exit_code = 4


class ConflictError(ProjectSyncError):
    """Resource conflict (409)."""

    exit_code = 5


class ConfigurationError(ProjectSyncError):
    """Missing or invalid configuration."""

    exit_code = 6


class ValidationError(ProjectSyncError):
    """Request rejected by the remote (422)."""

    exit_code = 7

    def __init__(self, detail: str = "") -> None:
        super().__init__(f"Validation error: {detail}" if detail else "Validation error")


class RemoteAPIError(ProjectSyncError):
    """Generic API error from the remote endpoint."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        super().__init__(f"Remote returned {status_code}: {detail}")


class StorageError(ProjectSyncError):
    """Local persistence failure."""

    exit_code = 8


class StorageReadError(StorageError):
    """Persisted state could not be read or decoded."""


class StorageWriteError(StorageError):
    """Persisted state could not be written."""


def error_handler(func: F) -> F:
    """Decorator that catches ProjectSyncError and prints user-friendly messages."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ProjectSyncError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(exc.exit_code)
        except ValueError as exc:
            err_console.print(f"[bold red]Error:[/] {exc}")
            raise SystemExit(1)

    return wrapper  # type: ignore[return-value]
