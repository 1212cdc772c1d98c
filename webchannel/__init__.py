"""Asynchronous web requests delivered through a processing unit event channel."""

from .client import WebClient, create
from .constants import VERSION as __version__
from .core import (
    ChannelOutOfRange,
    CompletionEvent,
    ConfigurationError,
    DeviceNotFound,
    NoFreeChannel,
    ReadOnlyError,
    Request,
    RequestStatus,
    Result,
    UnitNotFound,
    WebChannelError,
)
from .host import Gadget

__all__ = [
    "ChannelOutOfRange",
    "CompletionEvent",
    "ConfigurationError",
    "DeviceNotFound",
    "Gadget",
    "NoFreeChannel",
    "ReadOnlyError",
    "Request",
    "RequestStatus",
    "Result",
    "UnitNotFound",
    "WebChannelError",
    "WebClient",
    "__version__",
    "create",
]
