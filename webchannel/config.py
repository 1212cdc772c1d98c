"""Configuration loader for webchannel."""

from __future__ import annotations

import logging
from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from . import constants

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DeviceConfig:
    name: str = constants.DEFAULT_DEVICE_NAME
    access_denied: bool = False
    user_agent: str = constants.DEFAULT_USER_AGENT
    max_retained_transfers: int = constants.DEFAULT_MAX_RETAINED_TRANSFERS


@dataclass(slots=True)
class UnitConfig:
    name: str = constants.DEFAULT_UNIT_NAME
    channel_count: int = constants.DEFAULT_CHANNEL_COUNT


@dataclass(slots=True)
class ClientConfig:
    channel: Optional[int] = None  # None selects the lowest free channel


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_network: bool = False


@dataclass(slots=True)
class WebChannelConfig:
    device: DeviceConfig = field(default_factory=DeviceConfig)
    unit: UnitConfig = field(default_factory=UnitConfig)
    client: ClientConfig = field(default_factory=ClientConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    raw: ConfigParser = field(default_factory=ConfigParser)
    path: Path = constants.DEFAULT_CONFIG_PATH


def _parse_channel(value: str) -> Optional[int]:
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        LOGGER.warning("Ignoring invalid client channel %r; using a free channel", value)
        return None


def load_config(path: Optional[Path] = None) -> WebChannelConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "device": {
                "name": constants.DEFAULT_DEVICE_NAME,
                "access_denied": "false",
                "user_agent": constants.DEFAULT_USER_AGENT,
                "max_retained_transfers": str(constants.DEFAULT_MAX_RETAINED_TRANSFERS),
            },
            "unit": {
                "name": constants.DEFAULT_UNIT_NAME,
                "channel_count": str(constants.DEFAULT_CHANNEL_COUNT),
            },
            "client": {
                "channel": "",
            },
            "logging": {
                "level": "INFO",
                "path": "",
                "log_network": "false",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    device = DeviceConfig(
        name=parser.get("device", "name"),
        access_denied=parser.getboolean("device", "access_denied", fallback=False),
        user_agent=parser.get(
            "device", "user_agent", fallback=constants.DEFAULT_USER_AGENT
        ),
        max_retained_transfers=max(
            1,
            parser.getint(
                "device",
                "max_retained_transfers",
                fallback=constants.DEFAULT_MAX_RETAINED_TRANSFERS,
            ),
        ),
    )

    unit = UnitConfig(
        name=parser.get("unit", "name"),
        channel_count=max(
            1,
            parser.getint(
                "unit", "channel_count", fallback=constants.DEFAULT_CHANNEL_COUNT
            ),
        ),
    )

    client = ClientConfig(
        channel=_parse_channel(parser.get("client", "channel", fallback="")),
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_network=parser.getboolean("logging", "log_network", fallback=False),
    )

    return WebChannelConfig(
        device=device,
        unit=unit,
        client=client,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(config: WebChannelConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
