"""Integration tests for config commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import httpx
import respx
from typer.testing import CliRunner

from projectsync.app import app
from projectsync.config.manager import ConfigManager

runner = CliRunner()


def _patch_manager(tmp_path: Path):
    """Patch ConfigManager to use a temp config file."""
    config_path = tmp_path / "config.toml"
    return patch(
        "projectsync.commands.config_cmd._get_manager",
        return_value=ConfigManager(config_path=config_path),
    )


class TestConfigCommands:
    def test_list_empty(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "list"])
            assert result.exit_code == 0
            assert "No remotes configured" in result.output

    def test_add_and_list(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "add", "dev", "--url", "https://remote", "--token", "k"])
            assert result.exit_code == 0
            assert "added" in result.output
            result = runner.invoke(app, ["config", "list"])
            assert "dev" in result.output

    def test_show_reports_local_settings(self, isolated_env: Path):
        runner.invoke(app, ["config", "add", "dev", "--url", "https://remote", "--token", "secret-token"])
        result = runner.invoke(app, ["config", "show", "-f", "json"])
        assert result.exit_code == 0, result.output
        settings = json.loads(result.output)
        assert settings["data_dir"] == str(isolated_env)
        assert settings["offline"] is False
        assert settings["remote"] == "dev"
        assert settings["remote_url"] == "https://remote"
        assert "secret-token" not in result.output

    def test_show_without_remote(self, monkeypatch):
        monkeypatch.setenv("PROJECTSYNC_OFFLINE", "1")
        result = runner.invoke(app, ["config", "show", "-f", "json"])
        assert result.exit_code == 0, result.output
        settings = json.loads(result.output)
        assert settings["offline"] is True
        assert settings["remote"] is None

    def test_show_unknown_remote(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "show", "--remote", "nope"])
            assert result.exit_code == 6

    def test_set_offline_and_data_dir(self, tmp_path: Path):
        with _patch_manager(tmp_path) as patched:
            assert runner.invoke(app, ["config", "set", "offline", "yes"]).exit_code == 0
            assert runner.invoke(app, ["config", "set", "data-dir", str(tmp_path / "store")]).exit_code == 0
            mgr = patched.return_value
        reloaded = ConfigManager(config_path=mgr.config_path)
        assert reloaded.config.offline is True
        assert reloaded.config.data_dir == str(tmp_path / "store")

    def test_set_rejects_bad_values(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            assert runner.invoke(app, ["config", "set", "offline", "maybe"]).exit_code == 7
            assert runner.invoke(app, ["config", "set", "colour", "red"]).exit_code == 7
            assert runner.invoke(app, ["config", "set", "format", "xml"]).exit_code == 1

    def test_default_format_applies_to_project_list(self, isolated_env: Path):
        assert runner.invoke(app, ["config", "set", "format", "json"]).exit_code == 0
        runner.invoke(app, ["project", "create", "Alpha"])
        result = runner.invoke(app, ["project", "list"])
        assert result.exit_code == 0, result.output
        assert [p["name"] for p in json.loads(result.output)] == ["Alpha"]
        table = runner.invoke(app, ["project", "list", "--format", "table"])
        assert "Alpha" in table.output

    def test_invalid_url(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            result = runner.invoke(app, ["config", "add", "dev", "--url", "ftp://remote"])
            assert result.exit_code == 1

    def test_set_default_and_remove(self, tmp_path: Path):
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "a", "--url", "https://a"])
            runner.invoke(app, ["config", "add", "b", "--url", "https://b"])
            assert runner.invoke(app, ["config", "set-default", "b"]).exit_code == 0
            result = runner.invoke(app, ["config", "remove", "a", "--force"])
            assert result.exit_code == 0
            assert "removed" in result.output

    @respx.mock
    def test_test_command(self, tmp_path: Path):
        respx.get("https://remote/api/v1/projects").mock(
            return_value=httpx.Response(200, json=[])
        )
        with _patch_manager(tmp_path):
            runner.invoke(app, ["config", "add", "dev", "--url", "https://remote"])
            result = runner.invoke(app, ["config", "test"])
            assert result.exit_code == 0, result.output
            assert "Connected" in result.output

    def test_profile_used_by_project_commands(self, isolated_env: Path):
        runner.invoke(app, ["config", "add", "dev", "--url", "https://remote"])
        with respx.mock:
            respx.post("https://remote/api/v1/projects").mock(return_value=httpx.Response(204))
            result = runner.invoke(app, ["project", "create", "Via profile"])
        assert result.exit_code == 0, result.output
        assert "waiting to sync" not in result.output


class TestRootApp:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "projectsync" in result.output

    def test_verbose_flag(self):
        result = runner.invoke(app, ["--verbose", "sync", "status"])
        assert result.exit_code == 0
