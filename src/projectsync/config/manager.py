"""Configuration manager — read/write TOML config, resolve profiles."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomli_w

from projectsync.client.errors import ConfigurationError
from projectsync.config.constants import (
    CONFIG_FILE,
    DATA_DIR,
    DEFAULT_TIMEOUT,
    ENV_API_TOKEN,
    ENV_DATA_DIR,
    ENV_OFFLINE,
    ENV_REMOTE_PROFILE,
    ENV_REMOTE_URL,
)
from projectsync.config.models import CLIConfig, RemoteProfile

try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

_TRUTHY = {"1", "true", "yes", "on"}


class ConfigManager:
    """Manages CLI configuration on disk and resolves remote profiles."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path = config_path or CONFIG_FILE
        self._config: CLIConfig | None = None

    @property
    def config(self) -> CLIConfig:
        if self._config is None:
            self._config = self._load()
        return self._config

    def _load(self) -> CLIConfig:
        if not self.config_path.exists():
            return CLIConfig()
        raw = self.config_path.read_bytes()
        try:
            data = tomllib.loads(raw.decode())
        except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
            raise ConfigurationError(
                f"Cannot parse config file {self.config_path}: {exc}"
            ) from exc
        profiles: dict[str, RemoteProfile] = {}
        for name, prof_data in data.get("profiles", {}).items():
            profiles[name] = RemoteProfile(name=name, **prof_data)
        return CLIConfig(
            default_profile=data.get("default_profile"),
            default_format=data.get("default_format", "table"),
            data_dir=data.get("data_dir"),
            offline=data.get("offline", False),
            profiles=profiles,
        )

    def save(self) -> None:
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        # Owner-only: profiles hold API tokens
        os.chmod(self.config_path.parent, 0o700)
        data: dict[str, Any] = {}
        if self.config.default_profile:
            data["default_profile"] = self.config.default_profile
        if self.config.default_format != "table":
            data["default_format"] = self.config.default_format
        if self.config.data_dir:
            data["data_dir"] = self.config.data_dir
        if self.config.offline:
            data["offline"] = True
        if self.config.profiles:
            data["profiles"] = {}
            for name, profile in self.config.profiles.items():
                prof_dict = profile.model_dump(exclude={"name"}, exclude_none=True)
                if prof_dict.get("verify_ssl") is True:
                    del prof_dict["verify_ssl"]
                if prof_dict.get("timeout") == DEFAULT_TIMEOUT:
                    del prof_dict["timeout"]
                data["profiles"][name] = prof_dict
        temp = self.config_path.with_suffix(".tmp")
        fd = os.open(str(temp), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        try:
            os.write(fd, tomli_w.dumps(data).encode())
        finally:
            os.close(fd)
        temp.replace(self.config_path)

    def add_profile(self, profile: RemoteProfile) -> None:
        self.config.profiles[profile.name] = profile
        if not self.config.default_profile:
            self.config.default_profile = profile.name
        self.save()

    def remove_profile(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        del self.config.profiles[name]
        if self.config.default_profile == name:
            self.config.default_profile = next(iter(self.config.profiles), None)
        self.save()
        return True

    def set_default(self, name: str) -> bool:
        if name not in self.config.profiles:
            return False
        self.config.default_profile = name
        self.save()
        return True

    def update_settings(self, **changes: Any) -> CLIConfig:
        """Change top-level settings (data_dir, offline, default_format) and save."""
        merged = self.config.model_dump() | changes
        self._config = CLIConfig.model_validate(merged)
        self.save()
        return self._config

    def get_profile(self, name: str | None = None) -> RemoteProfile | None:
        if name:
            return self.config.profiles.get(name)
        default = self.config.default_profile
        if default:
            return self.config.profiles.get(default)
        return None

    def resolve_remote(
        self,
        profile_name: str | None = None,
        url: str | None = None,
        token: str | None = None,
    ) -> RemoteProfile | None:
        """Resolve the remote endpoint connection.

        Precedence: CLI flags > env vars > config profile. Returns ``None``
        when no URL is configured anywhere, which means the CLI runs offline.
        """
        env_profile = os.environ.get(ENV_REMOTE_PROFILE)
        requested = profile_name or env_profile
        profile = self.get_profile(requested)
        if requested and profile is None:
            raise ConfigurationError(f"Remote profile '{requested}' not found.")

        env_url = os.environ.get(ENV_REMOTE_URL)
        env_token = os.environ.get(ENV_API_TOKEN)

        resolved_url = url or env_url or (profile.url if profile else None)
        resolved_token = token or env_token or (profile.token if profile else None)

        if not resolved_url:
            return None

        return RemoteProfile(
            name=profile.name if profile else "cli",
            url=resolved_url.rstrip("/"),
            token=resolved_token,
            verify_ssl=profile.verify_ssl if profile else True,
            timeout=profile.timeout if profile else DEFAULT_TIMEOUT,
        )

    def require_remote(
        self,
        profile_name: str | None = None,
        url: str | None = None,
        token: str | None = None,
    ) -> RemoteProfile:
        """Like :meth:`resolve_remote` but a missing URL is an error."""
        profile = self.resolve_remote(profile_name, url, token)
        if profile is None:
            raise ConfigurationError(
                "No remote URL configured. Use 'projectsync config add' or set "
                f"{ENV_REMOTE_URL} or pass --url."
            )
        return profile

    def resolve_data_dir(self, data_dir: str | None = None) -> Path:
        """Precedence: explicit argument > env var > config file > platform default."""
        chosen = data_dir or os.environ.get(ENV_DATA_DIR) or self.config.data_dir
        return Path(chosen).expanduser() if chosen else DATA_DIR

    def resolve_offline(self, offline: bool = False) -> bool:
        if offline:
            return True
        env = os.environ.get(ENV_OFFLINE)
        if env is not None:
            return env.strip().lower() in _TRUTHY
        return self.config.offline

    def resolve_format(self, fmt: str | None = None) -> str:
        return fmt or self.config.default_format
