"""Exception types raised by webchannel."""

from __future__ import annotations


class WebChannelError(Exception):
    """Base class for all webchannel errors."""


class ConfigurationError(WebChannelError):
    """Raised while constructing a client; the client cannot be used."""


class NoFreeChannel(ConfigurationError):
    """Every event channel on the processing unit already has a handler."""


class ChannelOutOfRange(ConfigurationError):
    """The requested event channel does not exist on the processing unit."""


class DeviceNotFound(ConfigurationError):
    """No device was given and the host has no default device."""


class UnitNotFound(ConfigurationError):
    """No processing unit was given and the host has no default unit."""


class ReadOnlyError(WebChannelError, AttributeError):
    """Raised on any attempt to assign to a read-only view."""

    def __init__(self, view: str) -> None:
        super().__init__(f"{view} is readonly.")
        self.view = view
