"""In-process processing unit with numbered event channels."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Deque, Dict, Optional, Tuple

from ..constants import DEFAULT_CHANNEL_COUNT, DEFAULT_UNIT_NAME
from ..core.channels import check_channel_range
from ..core.models import CompletionEvent
from ..core.protocols import DispatchFunction

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ChannelSlot:
    owner: Any
    handler: DispatchFunction


class EventChannelUnit:
    """Processing unit whose channels deliver device events on its own tick.

    ``notify`` only queues events. They are handed to channel handlers when
    :meth:`tick` runs, which is scheduled on the running asyncio loop when
    there is one and can otherwise be driven by the host directly.
    """

    def __init__(
        self, name: str = DEFAULT_UNIT_NAME, channel_count: int = DEFAULT_CHANNEL_COUNT
    ) -> None:
        if channel_count < 1:
            raise ValueError("channel_count must be at least 1")
        self.name = name
        self._channel_count = channel_count
        self._slots: Dict[int, ChannelSlot] = {}
        self._queue: Deque[Tuple[int, Any, CompletionEvent]] = deque()
        self._tick_scheduled = False

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<EventChannelUnit {self.name} channels={self._channel_count}>"

    @property
    def channel_count(self) -> int:
        return self._channel_count

    @property
    def queued(self) -> int:
        return len(self._queue)

    def owner_of(self, channel: int) -> Optional[Any]:
        slot = self._slots.get(channel)
        return slot.owner if slot is not None else None

    def handler_of(self, channel: int) -> Optional[DispatchFunction]:
        slot = self._slots.get(channel)
        return slot.handler if slot is not None else None

    def bind(self, channel: int, owner: Any, handler: DispatchFunction) -> None:
        check_channel_range(self, channel)
        self._slots[channel] = ChannelSlot(owner=owner, handler=handler)

    def notify(self, source: Any, event: CompletionEvent) -> None:
        """Queue ``event`` on every channel owned by ``source``."""

        channels = [
            channel for channel, slot in sorted(self._slots.items()) if slot.owner is source
        ]
        if not channels:
            LOGGER.debug(
                "%s has no channel owned by %s; handle %s not queued",
                self.name,
                source,
                event.handle,
            )
            return

        for channel in channels:
            self._queue.append((channel, source, event))

        self._schedule_tick()

    def tick(self) -> int:
        """Deliver every queued event and return how many were delivered."""

        self._tick_scheduled = False
        delivered = 0
        while self._queue:
            channel, source, event = self._queue.popleft()
            handler = self.handler_of(channel)
            if handler is None:
                continue
            try:
                handler(source, event)
            except Exception:
                LOGGER.exception(
                    "Handler on %s event channel %d failed for handle %s",
                    self.name,
                    channel,
                    event.handle,
                )
            delivered += 1
        return delivered

    def fire(self, channel: int, source: Any, event: CompletionEvent) -> None:
        """Invoke the handler of ``channel`` immediately."""

        check_channel_range(self, channel)
        handler = self.handler_of(channel)
        if handler is None:
            LOGGER.debug("%s event channel %d has no handler", self.name, channel)
            return
        handler(source, event)

    def _schedule_tick(self) -> None:
        if self._tick_scheduled:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._tick_scheduled = True
        loop.call_soon(self.tick)
