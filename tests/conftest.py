"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from projectsync.client.memory import InMemoryRemote, RemoteState
from projectsync.config.manager import ConfigManager
from projectsync.config.models import RemoteProfile
from projectsync.models import Project, ProjectStatus
from projectsync.storage import DurableStore, MemoryStorage
from projectsync.sync import ConnectivitySignal, SyncEngine

ENV_VARS = (
    "PROJECTSYNC_REMOTE_URL",
    "PROJECTSYNC_API_TOKEN",
    "PROJECTSYNC_PROFILE",
    "PROJECTSYNC_OFFLINE",
)


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int = 1) -> int:
        self.now += ms
        return self.now


class FailingStorage(MemoryStorage):
    """Memory storage whose writes can be switched to raise OSError."""

    def __init__(self) -> None:
        super().__init__()
        self.fail_writes = False

    def set_item(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        super().set_item(key, value)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the user's real config and data directories."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    data_dir = tmp_path / "data"
    monkeypatch.setenv("PROJECTSYNC_DATA_DIR", str(data_dir))
    monkeypatch.setattr(
        "projectsync.config.manager.CONFIG_FILE", tmp_path / "config.toml",
    )
    return data_dir


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Return a temporary config file path."""
    return tmp_path / "config.toml"


@pytest.fixture
def config_manager(tmp_config: Path) -> ConfigManager:
    """Return a ConfigManager pointed at a temp config file."""
    return ConfigManager(config_path=tmp_config)


@pytest.fixture
def sample_profile() -> RemoteProfile:
    return RemoteProfile(
        name="test-remote",
        url="https://projects.local",
        token="testtoken",
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> FailingStorage:
    return FailingStorage()


@pytest.fixture
def store(storage: FailingStorage) -> DurableStore:
    return DurableStore(storage)


@pytest.fixture
def remote_state() -> RemoteState:
    return RemoteState()


@pytest.fixture
def remote(remote_state: RemoteState) -> InMemoryRemote:
    return InMemoryRemote(remote_state)


@pytest.fixture
def connectivity() -> ConnectivitySignal:
    return ConnectivitySignal(online=False)


@pytest.fixture
def engine(
    store: DurableStore,
    remote: InMemoryRemote,
    connectivity: ConnectivitySignal,
    clock: FakeClock,
):
    eng = SyncEngine(store, remote, connectivity, clock=clock)
    yield eng
    eng.close()


@pytest.fixture
def make_project():
    """Factory for Project instances with overridable fields."""
    return _make_project


def _make_project(
    project_id: str = "p1",
    name: str = "Alpha",
    status: ProjectStatus = ProjectStatus.BACKLOG,
    assignee: str | None = None,
    updated_at: int = 100,
) -> Project:
    return Project(
        id=project_id,
        name=name,
        status=status,
        assignee=assignee,
        updated_at=updated_at,
    )
