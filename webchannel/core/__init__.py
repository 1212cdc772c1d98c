"""Core primitives for webchannel."""

from .channels import check_channel_range, find_free_channel, register
from .dispatcher import RequestDispatcher
from .errors import (
    ChannelOutOfRange,
    ConfigurationError,
    DeviceNotFound,
    NoFreeChannel,
    ReadOnlyError,
    UnitNotFound,
    WebChannelError,
)
from .models import CompletionEvent, RequestStatus, Result
from .protocols import DispatchFunction, ProcessingUnit, ResultCallback, WebDevice
from .request import Request

__all__ = [
    "ChannelOutOfRange",
    "CompletionEvent",
    "ConfigurationError",
    "DeviceNotFound",
    "DispatchFunction",
    "NoFreeChannel",
    "ProcessingUnit",
    "ReadOnlyError",
    "Request",
    "RequestDispatcher",
    "RequestStatus",
    "Result",
    "ResultCallback",
    "UnitNotFound",
    "WebChannelError",
    "WebDevice",
    "check_channel_range",
    "find_free_channel",
    "register",
]
