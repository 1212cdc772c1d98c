"""Client façade turning device handles into request objects."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from . import constants
from .core.channels import register
from .core.dispatcher import RequestDispatcher
from .core.errors import DeviceNotFound, ReadOnlyError, UnitNotFound
from .core.protocols import ProcessingUnit, ResultCallback, WebDevice
from .core.request import Request
from .host import Gadget

LOGGER = logging.getLogger(__name__)


class WebClient:
    """Issues web requests on a device and tracks them through one channel.

    Construction binds the client's dispatcher to an event channel of
    ``unit``; completion events the device reports on that channel complete
    the matching :class:`Request`. Every verb returns immediately with a
    request that is still in progress.
    """

    __slots__ = ("_device", "_unit", "_channel", "_dispatcher")

    def __init__(
        self, device: WebDevice, unit: ProcessingUnit, channel: Optional[int] = None
    ) -> None:
        dispatcher = RequestDispatcher(device)
        bound_channel = register(unit, channel, dispatcher.on_event, device)

        object.__setattr__(self, "_device", device)
        object.__setattr__(self, "_unit", unit)
        object.__setattr__(self, "_channel", bound_channel)
        object.__setattr__(self, "_dispatcher", dispatcher)

    def __setattr__(self, name: str, value: Any) -> None:
        raise ReadOnlyError("Web")

    def __delattr__(self, name: str) -> None:
        raise ReadOnlyError("Web")

    def __repr__(self) -> str:
        return f"<WebClient device={self._device} unit={self._unit} channel={self._channel}>"

    @property
    def device(self) -> WebDevice:
        return self._device

    @property
    def unit(self) -> ProcessingUnit:
        return self._unit

    @property
    def channel(self) -> int:
        return self._channel

    @property
    def access_denied(self) -> bool:
        return self._device.access_denied

    @property
    def pending_count(self) -> int:
        return self._dispatcher.pending_count

    def get(self, url: str, callback: Optional[ResultCallback] = None) -> Request:
        return self._track(self._device.web_get(url), callback)

    def post(
        self, url: str, data: str, callback: Optional[ResultCallback] = None
    ) -> Request:
        return self._track(self._device.web_post_data(url, data), callback)

    def put(
        self, url: str, data: str, callback: Optional[ResultCallback] = None
    ) -> Request:
        return self._track(self._device.web_put_data(url, data), callback)

    def post_form(
        self,
        url: str,
        form: Mapping[str, Any],
        callback: Optional[ResultCallback] = None,
    ) -> Request:
        return self._track(self._device.web_post_form(url, form), callback)

    def request(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        content_type: str,
        content_data: str,
        callback: Optional[ResultCallback] = None,
    ) -> Request:
        handle = self._device.web_custom_request(
            url, method, headers, content_type, content_data
        )
        return self._track(handle, callback)

    def clear_cookie_cache(self) -> None:
        self._device.clear_cookie_cache()

    def clear_url_cookie_cache(self, url: str) -> None:
        self._device.clear_url_cookie_cache(url)

    def _track(self, handle: int, callback: Optional[ResultCallback]) -> Request:
        return self._dispatcher.add_request(handle, callback)


def create(
    device: Optional[WebDevice] = None,
    unit: Optional[ProcessingUnit] = None,
    channel: Optional[int] = None,
    *,
    gadget: Optional[Gadget] = None,
    device_name: str = constants.DEFAULT_DEVICE_NAME,
    unit_name: str = constants.DEFAULT_UNIT_NAME,
) -> WebClient:
    """Create a :class:`WebClient`, resolving a missing device or unit.

    Defaults are looked up by name on ``gadget``. Without a gadget, both
    ``device`` and ``unit`` must be given.

    Raises:
        DeviceNotFound: no device given and no default device available.
        UnitNotFound: no unit given and no default unit available.
        ChannelOutOfRange: ``channel`` is not a channel of the unit.
        NoFreeChannel: ``channel`` omitted and every channel is taken.
    """

    if device is None:
        device = gadget.find_device(device_name) if gadget is not None else None
        if device is None:
            raise DeviceNotFound(
                f"Default web device ({device_name}) not found; "
                "add it to your gadget or specify another device."
            )

    if unit is None:
        unit = gadget.find_unit(unit_name) if gadget is not None else None
        if unit is None:
            raise UnitNotFound(
                f"Default processing unit ({unit_name}) not found; "
                "add it to your gadget or specify another unit."
            )

    client = WebClient(device, unit, channel)
    LOGGER.debug("Created %r", client)
    return client
