"""Constants used across the samsung-remote package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "samsung-remote"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_TV_HOST = "192.168.0.24"
DEFAULT_TV_PORT = 8001

CONTROL_CHANNEL_PATH = "/api/v2/channels/samsung.remote.control"
CONTROL_METHOD = "ms.remote.control"
