"""Default paths, environment variable names, and constants."""

from __future__ import annotations

import platformdirs

APP_NAME = "projectsync"
APP_AUTHOR = "projectsync"

CONFIG_DIR = platformdirs.user_config_path(APP_NAME, APP_AUTHOR)
CONFIG_FILE = CONFIG_DIR / "config.toml"
DATA_DIR = platformdirs.user_data_path(APP_NAME, APP_AUTHOR)

# Environment variable names
ENV_REMOTE_URL = "PROJECTSYNC_REMOTE_URL"
ENV_API_TOKEN = "PROJECTSYNC_API_TOKEN"
ENV_REMOTE_PROFILE = "PROJECTSYNC_PROFILE"
ENV_DATA_DIR = "PROJECTSYNC_DATA_DIR"
ENV_OFFLINE = "PROJECTSYNC_OFFLINE"

# Storage keys
PROJECTS_KEY = "projects_data"
SYNC_QUEUE_KEY = "sync_queue_data"

# API defaults
DEFAULT_API_BASE = "/api/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_RETRIES = 3

# Output
OUTPUT_FORMATS = ("table", "json", "yaml", "csv")
