"""Protocol definitions for devices, processing units and callbacks."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, Protocol

from .models import CompletionEvent, Result

ResultCallback = Callable[[Result], None]
DispatchFunction = Callable[[Any, CompletionEvent], None]


class WebDevice(Protocol):
    """Network-capable device that performs transfers and reports by handle."""

    @property
    def access_denied(self) -> bool:
        ...

    def web_get(self, url: str) -> int:
        ...

    def web_post_data(self, url: str, data: str) -> int:
        ...

    def web_put_data(self, url: str, data: str) -> int:
        ...

    def web_post_form(self, url: str, form: Mapping[str, Any]) -> int:
        ...

    def web_custom_request(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        content_type: str,
        content_data: str,
    ) -> int:
        ...

    def web_abort(self, handle: int) -> bool:
        """Cancel a transfer; returns whether the device accepted the abort."""
        ...

    def get_web_upload_progress(self, handle: int) -> float:
        ...

    def get_web_download_progress(self, handle: int) -> float:
        ...

    def clear_cookie_cache(self) -> None:
        ...

    def clear_url_cookie_cache(self, url: str) -> None:
        ...


class ProcessingUnit(Protocol):
    """A set of numbered event channels, each holding one dispatch function.

    Channels are numbered ``1..channel_count``. The host invokes a bound
    handler as ``handler(sender, event)`` from its own event tick.
    """

    @property
    def channel_count(self) -> int:
        ...

    def owner_of(self, channel: int) -> Optional[Any]:
        ...

    def handler_of(self, channel: int) -> Optional[DispatchFunction]:
        ...

    def bind(self, channel: int, owner: Any, handler: DispatchFunction) -> None:
        ...
