"""Adapter modules for concrete devices and processing units."""

from .aiohttp_device import AiohttpWebDevice
from .processing_unit import EventChannelUnit

__all__ = [
    "AiohttpWebDevice",
    "EventChannelUnit",
]
