import itertools
from typing import Any, Iterable, Mapping, Optional

import pytest

from webchannel.adapters import EventChannelUnit


class FakeDevice:
    """Scripted web device recording every call made on it."""

    def __init__(self, name: str = "Wifi0", handles: Optional[Iterable[int]] = None) -> None:
        self.name = name
        self.calls: list[tuple[Any, ...]] = []
        self.access_denied = False
        self.abort_result = True
        self.upload: dict[int, float] = {}
        self.download: dict[int, float] = {}
        self._handles = iter(handles) if handles is not None else itertools.count(1)

    def __str__(self) -> str:
        return self.name

    def _issue(self, *call: Any) -> int:
        self.calls.append(call)
        return next(self._handles)

    def web_get(self, url: str) -> int:
        return self._issue("get", url)

    def web_post_data(self, url: str, data: str) -> int:
        return self._issue("post", url, data)

    def web_put_data(self, url: str, data: str) -> int:
        return self._issue("put", url, data)

    def web_post_form(self, url: str, form: Mapping[str, Any]) -> int:
        return self._issue("post_form", url, dict(form))

    def web_custom_request(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        content_type: str,
        content_data: str,
    ) -> int:
        return self._issue("request", url, method, dict(headers), content_type, content_data)

    def web_abort(self, handle: int) -> bool:
        self.calls.append(("abort", handle))
        return self.abort_result

    def get_web_upload_progress(self, handle: int) -> float:
        self.calls.append(("upload_progress", handle))
        return self.upload.get(handle, 0.0)

    def get_web_download_progress(self, handle: int) -> float:
        self.calls.append(("download_progress", handle))
        return self.download.get(handle, 0.0)

    def clear_cookie_cache(self) -> None:
        self.calls.append(("clear_cookie_cache",))

    def clear_url_cookie_cache(self, url: str) -> None:
        self.calls.append(("clear_url_cookie_cache", url))


@pytest.fixture
def device() -> FakeDevice:
    return FakeDevice()


@pytest.fixture
def unit() -> EventChannelUnit:
    return EventChannelUnit("CPU0", channel_count=4)


@pytest.fixture
def make_device():
    """Build a fake device returning the given handles in order."""
    return FakeDevice
