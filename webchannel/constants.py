"""Constants used across the webchannel package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "webchannel"
VERSION = "0.1.0"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_DEVICE_NAME = "Wifi0"
DEFAULT_UNIT_NAME = "CPU0"
DEFAULT_CHANNEL_COUNT = 8

DEFAULT_USER_AGENT = f"{APP_NAME}/{VERSION}"
DEFAULT_MAX_RETAINED_TRANSFERS = 64
