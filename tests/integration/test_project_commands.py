"""Integration tests for project commands."""

from __future__ import annotations

import json
from pathlib import Path

import httpx
import respx
from typer.testing import CliRunner

from projectsync.app import app
from projectsync.config.constants import PROJECTS_KEY, SYNC_QUEUE_KEY

runner = CliRunner()
REMOTE = "https://projects.local"
BASE = f"{REMOTE}/api/v1"
ONLINE = ["--url", REMOTE, "--token", "secret"]


def _stored(data_dir: Path, key: str) -> list:
    return json.loads((data_dir / f"{key}.json").read_text())


class TestOfflineProjectCommands:
    def test_create_without_remote_is_queued(self, isolated_env: Path):
        result = runner.invoke(app, ["project", "create", "Website", "--status", "todo", "-a", "Kim"])
        assert result.exit_code == 0, result.output
        assert "created" in result.output
        assert "1 change waiting to sync" in result.output
        projects = _stored(isolated_env, PROJECTS_KEY)
        assert projects[0]["name"] == "Website"
        assert projects[0]["status"] == "To Do"
        queue = _stored(isolated_env, SYNC_QUEUE_KEY)
        assert queue[0]["operation"] == "create"

    def test_list(self, isolated_env: Path):
        runner.invoke(app, ["project", "create", "Alpha"])
        runner.invoke(app, ["project", "create", "Beta", "--status", "completed"])
        result = runner.invoke(app, ["project", "list"])
        assert result.exit_code == 0
        assert "Alpha" in result.output
        assert "Beta" in result.output
        assert "offline" in result.output

    def test_list_filter_by_status(self, isolated_env: Path):
        runner.invoke(app, ["project", "create", "Alpha"])
        runner.invoke(app, ["project", "create", "Beta", "--status", "completed"])
        result = runner.invoke(app, ["project", "list", "--status", "Completed", "-f", "json"])
        assert result.exit_code == 0
        names = [p["name"] for p in json.loads(result.output)]
        assert names == ["Beta"]

    def test_list_empty_store(self):
        result = runner.invoke(app, ["project", "list", "-f", "csv"])
        assert result.exit_code == 0
        assert "ID,Name,Status,Assignee,Updated" in result.output

    def test_update_by_prefix(self, isolated_env: Path):
        runner.invoke(app, ["project", "create", "Alpha"])
        project_id = _stored(isolated_env, PROJECTS_KEY)[0]["id"]
        result = runner.invoke(
            app, ["project", "update", project_id[:8], "--status", "in-progress", "--name", "Alpha 2"],
        )
        assert result.exit_code == 0, result.output
        assert "updated" in result.output
        stored = _stored(isolated_env, PROJECTS_KEY)[0]
        assert stored["name"] == "Alpha 2"
        assert stored["status"] == "In Progress"
        ops = [op["operation"] for op in _stored(isolated_env, SYNC_QUEUE_KEY)]
        assert ops == ["create", "update"]

    def test_unassign(self, isolated_env: Path):
        runner.invoke(app, ["project", "create", "Alpha", "-a", "Kim"])
        project_id = _stored(isolated_env, PROJECTS_KEY)[0]["id"]
        result = runner.invoke(app, ["project", "update", project_id, "--unassign"])
        assert result.exit_code == 0
        assert "assignee" not in _stored(isolated_env, PROJECTS_KEY)[0]

    def test_show(self, isolated_env: Path):
        runner.invoke(app, ["project", "create", "Alpha"])
        project_id = _stored(isolated_env, PROJECTS_KEY)[0]["id"]
        result = runner.invoke(app, ["project", "show", project_id])
        assert result.exit_code == 0
        assert "Alpha" in result.output

    def test_show_unknown(self):
        result = runner.invoke(app, ["project", "show", "nope"])
        assert result.exit_code == 4

    def test_empty_name_rejected(self, isolated_env: Path):
        result = runner.invoke(app, ["project", "create", "   "])
        assert result.exit_code == 1
        assert not (isolated_env / f"{PROJECTS_KEY}.json").exists()

    def test_bad_status_rejected(self):
        result = runner.invoke(app, ["project", "create", "Alpha", "--status", "archived"])
        assert result.exit_code == 1

    def test_update_rejects_conflicting_flags(self, isolated_env: Path):
        runner.invoke(app, ["project", "create", "Alpha"])
        project_id = _stored(isolated_env, PROJECTS_KEY)[0]["id"]
        result = runner.invoke(app, ["project", "update", project_id, "-a", "Kim", "--unassign"])
        assert result.exit_code == 1


class TestOnlineProjectCommands:
    @respx.mock
    def test_create_online_posts(self, isolated_env: Path):
        route = respx.post(f"{BASE}/projects").mock(
            side_effect=lambda request: httpx.Response(201, content=request.content)
        )
        result = runner.invoke(app, ["project", "create", "Remote One", *ONLINE])
        assert result.exit_code == 0, result.output
        assert route.called
        assert json.loads(route.calls.last.request.content)["name"] == "Remote One"
        assert not (isolated_env / f"{SYNC_QUEUE_KEY}.json").exists()

    @respx.mock
    def test_create_online_failure_queues(self, isolated_env: Path):
        respx.post(f"{BASE}/projects").mock(return_value=httpx.Response(500, text="boom"))
        result = runner.invoke(app, ["project", "create", "Remote Two", *ONLINE])
        assert result.exit_code == 0
        assert "waiting to sync" in result.output
        assert len(_stored(isolated_env, SYNC_QUEUE_KEY)) == 1

    def test_offline_flag_skips_network(self, isolated_env: Path):
        with respx.mock(assert_all_called=False) as mock:
            route = mock.post(f"{BASE}/projects")
            result = runner.invoke(app, ["project", "create", "Quiet", *ONLINE, "--offline"])
        assert result.exit_code == 0
        assert not route.called
