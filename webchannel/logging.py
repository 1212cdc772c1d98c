"""Logging setup for the webchannel command line."""

from __future__ import annotations

import logging
from typing import List

from .config import LoggingConfig

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Per-transfer chatter: the device logs every issue/abort at DEBUG and
# aiohttp's client logger reports connection details.
NETWORK_LOGGERS = ("webchannel.adapters.aiohttp_device", "aiohttp.client")


def _build_handlers(settings: LoggingConfig) -> List[logging.Handler]:
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if settings.path is not None:
        settings.path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(settings.path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure_logging(settings: LoggingConfig) -> None:
    """Install console (and optional file) handlers on the root logger.

    Existing root handlers are replaced so repeated calls do not duplicate
    output. Unless ``settings.log_network`` is set, the per-transfer loggers
    in :data:`NETWORK_LOGGERS` are held at WARNING whatever the root level.
    """

    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    for handler in _build_handlers(settings):
        root.addHandler(handler)
    root.setLevel(getattr(logging, settings.level.upper(), logging.INFO))

    network_level = logging.NOTSET if settings.log_network else logging.WARNING
    for name in NETWORK_LOGGERS:
        logging.getLogger(name).setLevel(network_level)
