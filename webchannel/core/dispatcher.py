"""Routing of completion events to pending requests.

One dispatcher belongs to one client. Its :meth:`RequestDispatcher.on_event`
method is the dispatch function bound to the client's event channel, so every
completion event for that client passes through it. The table maps a pending
request handle to the closure that completes that request.

An entry is removed the moment its event is dispatched, or when the request
is aborted first. An event whose handle is not in the table is dropped: the
request it belonged to was aborted, already delivered, or never issued
through this client.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from .models import CompletionEvent, Result
from .protocols import ResultCallback, WebDevice
from .request import Request

LOGGER = logging.getLogger(__name__)

Deliver = Callable[[CompletionEvent], None]


class RequestDispatcher:
    """Table of pending requests for a single client."""

    def __init__(self, device: WebDevice) -> None:
        self._device = device
        self._pending: Dict[int, Deliver] = {}

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def is_pending(self, handle: int) -> bool:
        return handle in self._pending

    def add_request(
        self, handle: int, callback: Optional[ResultCallback] = None
    ) -> Request:
        """Track ``handle`` and return its request view in progress."""

        request = Request(self._device, handle, self)

        def deliver(event: CompletionEvent) -> None:
            result = Result.from_event(event)
            request._complete(result)
            if callback is not None:
                callback(result)

        if handle in self._pending:
            LOGGER.warning(
                "Handle %s is already pending; replacing its request", handle
            )
        self._pending[handle] = deliver
        return request

    def discard(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def on_event(self, sender: Any, event: CompletionEvent) -> None:
        # Popped before delivery so a raising callback leaves no stale entry.
        deliver = self._pending.pop(event.handle, None)
        if deliver is None:
            LOGGER.debug(
                "Dropping completion event for unknown handle %s from %s",
                event.handle,
                sender,
            )
            return
        deliver(event)
