"""Host environment holding the devices and processing units of a gadget."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import aiohttp

from .adapters import AiohttpWebDevice, EventChannelUnit
from .config import WebChannelConfig
from .core.models import CompletionEvent

LOGGER = logging.getLogger(__name__)


class Gadget:
    """Named registry of devices and processing units.

    Devices that support it are attached to the gadget as their event sink;
    every completion event they emit is offered to all registered units, and
    each unit delivers it on the channels the emitting device owns.
    """

    def __init__(self) -> None:
        self._devices: Dict[str, Any] = {}
        self._units: Dict[str, Any] = {}

    @classmethod
    def from_config(
        cls,
        config: WebChannelConfig,
        *,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "Gadget":
        """Build a gadget with one aiohttp device and one processing unit."""

        gadget = cls()
        gadget.add_device(
            config.device.name, AiohttpWebDevice(config.device, session=session)
        )
        gadget.add_unit(
            config.unit.name,
            EventChannelUnit(config.unit.name, config.unit.channel_count),
        )
        return gadget

    def add_device(self, name: str, device: Any) -> None:
        self._devices[name] = device
        attach = getattr(device, "attach", None)
        if callable(attach):
            attach(self.emit)

    def add_unit(self, name: str, unit: Any) -> None:
        self._units[name] = unit

    def find_device(self, name: str) -> Optional[Any]:
        return self._devices.get(name)

    def find_unit(self, name: str) -> Optional[Any]:
        return self._units.get(name)

    def emit(self, source: Any, event: CompletionEvent) -> None:
        if not self._units:
            LOGGER.debug("No processing units to notify for handle %s", event.handle)
        for unit in self._units.values():
            unit.notify(source, event)

    async def aclose(self) -> None:
        """Close every device that holds network resources."""

        for device in self._devices.values():
            aclose = getattr(device, "aclose", None)
            if aclose is not None:
                await aclose()
