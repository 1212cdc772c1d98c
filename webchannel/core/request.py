"""Per-request view over a pending device transfer."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from .errors import ReadOnlyError
from .models import RequestStatus, Result
from .protocols import WebDevice

if TYPE_CHECKING:
    from .dispatcher import RequestDispatcher

LOGGER = logging.getLogger(__name__)


class Request:
    """Handle to one issued request.

    ``upload_progress`` and ``download_progress`` are evaluated on every
    access by querying the device with this request's handle; their values
    once ``ready`` is true depend on the device. ``ready`` and ``result``
    read the cached lifecycle state. The only mutator is :meth:`abort`.

    Status moves from ``IN_PROGRESS`` to either ``COMPLETED`` (a matching
    completion event was dispatched) or ``ABORTED`` (``abort()`` was called
    first). Both are terminal.
    """

    __slots__ = ("_device", "_dispatcher", "_handle", "_status", "_result")

    def __init__(
        self, device: WebDevice, handle: int, dispatcher: "RequestDispatcher"
    ) -> None:
        object.__setattr__(self, "_device", device)
        object.__setattr__(self, "_dispatcher", dispatcher)
        object.__setattr__(self, "_handle", handle)
        object.__setattr__(self, "_status", RequestStatus.IN_PROGRESS)
        object.__setattr__(self, "_result", None)

    def __setattr__(self, name: str, value: Any) -> None:
        raise ReadOnlyError("Request")

    def __delattr__(self, name: str) -> None:
        raise ReadOnlyError("Request")

    def __repr__(self) -> str:
        return f"<Request handle={self._handle} status={self._status.value}>"

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def status(self) -> RequestStatus:
        return self._status

    @property
    def upload_progress(self) -> float:
        return self._device.get_web_upload_progress(self._handle)

    @property
    def download_progress(self) -> float:
        return self._device.get_web_download_progress(self._handle)

    @property
    def ready(self) -> bool:
        return self._status is not RequestStatus.IN_PROGRESS

    @property
    def result(self) -> Optional[Result]:
        return self._result

    def abort(self) -> bool:
        """Abort the transfer and return the device's success indicator.

        A request still in progress becomes ``ABORTED`` before the device is
        asked to abort, so the transition holds even if the device call fails.
        Any later completion event for the handle is dropped. On a request
        that already finished the status is left alone, but the device call
        is still issued.
        """

        if self._status is RequestStatus.IN_PROGRESS:
            self._dispatcher.discard(self._handle)
            object.__setattr__(self, "_status", RequestStatus.ABORTED)
            LOGGER.debug("Request %s aborted", self._handle)

        return self._device.web_abort(self._handle)

    def _complete(self, result: Result) -> None:
        if self._status is not RequestStatus.IN_PROGRESS:
            return
        object.__setattr__(self, "_result", result)
        object.__setattr__(self, "_status", RequestStatus.COMPLETED)
