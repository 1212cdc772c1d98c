"""Web device performing transfers with aiohttp and reporting by handle."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlparse

import aiohttp
from multidict import CIMultiDict

from ..config import DeviceConfig
from ..core.models import CompletionEvent

LOGGER = logging.getLogger(__name__)

EventSink = Callable[[Any, CompletionEvent], None]

ACCESS_DENIED_ERROR = "AccessDenied"


@dataclass(slots=True)
class Transfer:
    handle: int
    method: str
    url: str
    task: Optional[asyncio.Task[None]] = None
    upload_progress: float = 0.0
    download_progress: float = 0.0


class AiohttpWebDevice:
    """Non-blocking web device backed by an ``aiohttp.ClientSession``.

    Every ``web_*`` call schedules the transfer on the running event loop and
    returns its handle at once. When the transfer finishes the device emits a
    :class:`CompletionEvent` to its sink, normally the gadget it was added to.
    Aborted transfers emit nothing.

    Progress of finished or aborted transfers stays queryable until it is
    evicted from a bounded table; unknown handles report ``0.0``.
    """

    CHUNK_SIZE = 16 * 1024

    def __init__(
        self,
        config: Optional[DeviceConfig] = None,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        sink: Optional[EventSink] = None,
    ) -> None:
        self.config = config or DeviceConfig()
        self.name = self.config.name

        self._session: Optional[aiohttp.ClientSession] = session
        self._owns_session = session is None
        self._sink = sink
        self._last_handle = 0
        self._active: Dict[int, Transfer] = {}
        self._finished: OrderedDict[int, Transfer] = OrderedDict()

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"<AiohttpWebDevice {self.name} active={len(self._active)}>"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def attach(self, sink: EventSink) -> None:
        """Route completion events to ``sink``."""

        self._sink = sink

    @property
    def access_denied(self) -> bool:
        return self.config.access_denied

    @property
    def active_count(self) -> int:
        return len(self._active)

    def web_get(self, url: str) -> int:
        return self._issue("GET", url)

    def web_post_data(self, url: str, data: str) -> int:
        return self._issue("POST", url, data=data)

    def web_put_data(self, url: str, data: str) -> int:
        return self._issue("PUT", url, data=data)

    def web_post_form(self, url: str, form: Mapping[str, Any]) -> int:
        return self._issue("POST", url, data=dict(form))

    def web_custom_request(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        content_type: str,
        content_data: str,
    ) -> int:
        request_headers = CIMultiDict(headers)
        if content_type:
            request_headers.setdefault(aiohttp.hdrs.CONTENT_TYPE, content_type)
        return self._issue(
            method.upper(), url, headers=request_headers, data=content_data or None
        )

    def web_abort(self, handle: int) -> bool:
        transfer = self._active.pop(handle, None)
        if transfer is None:
            LOGGER.debug("Abort ignored for unknown or finished handle %s", handle)
            return False

        if transfer.task is not None:
            transfer.task.cancel()
        self._retain(transfer)
        LOGGER.debug("Aborted %s %s (handle=%s)", transfer.method, transfer.url, handle)
        return True

    def get_web_upload_progress(self, handle: int) -> float:
        transfer = self._lookup(handle)
        return transfer.upload_progress if transfer is not None else 0.0

    def get_web_download_progress(self, handle: int) -> float:
        transfer = self._lookup(handle)
        return transfer.download_progress if transfer is not None else 0.0

    def clear_cookie_cache(self) -> None:
        if self._session is not None:
            self._session.cookie_jar.clear()

    def clear_url_cookie_cache(self, url: str) -> None:
        host = urlparse(url).hostname
        if self._session is None or not host:
            return
        self._session.cookie_jar.clear_domain(host)

    async def aclose(self) -> None:
        """Cancel live transfers and close the session if this device owns it."""

        tasks = [t.task for t in self._active.values() if t.task is not None]
        self._active.clear()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _issue(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[CIMultiDict[str]] = None,
        data: Any = None,
    ) -> int:
        loop = asyncio.get_running_loop()

        self._last_handle += 1
        transfer = Transfer(handle=self._last_handle, method=method, url=url)
        self._active[transfer.handle] = transfer
        transfer.task = loop.create_task(self._run(transfer, headers, data))

        LOGGER.debug("Issued %s %s (handle=%s)", method, url, transfer.handle)
        return transfer.handle

    async def _run(
        self, transfer: Transfer, headers: Optional[CIMultiDict[str]], data: Any
    ) -> None:
        if self.access_denied:
            event = CompletionEvent(
                handle=transfer.handle,
                is_error=True,
                error_type=ACCESS_DENIED_ERROR,
                error_message=f"Web access is denied for {self.name}",
            )
        else:
            try:
                event = await self._perform(transfer, headers, data)
            except Exception as exc:
                LOGGER.exception(
                    "Unexpected failure in %s %s (handle=%s)",
                    transfer.method,
                    transfer.url,
                    transfer.handle,
                )
                event = CompletionEvent(
                    handle=transfer.handle,
                    is_error=True,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )

        if self._active.pop(transfer.handle, None) is None:
            return  # aborted while finishing
        self._retain(transfer)
        self._emit(event)

    async def _perform(
        self, transfer: Transfer, headers: Optional[CIMultiDict[str]], data: Any
    ) -> CompletionEvent:
        session = self._ensure_session()
        request_headers: CIMultiDict[str] = CIMultiDict(
            {aiohttp.hdrs.USER_AGENT: self.config.user_agent}
        )
        request_headers.update(headers or {})

        try:
            async with session.request(
                transfer.method, transfer.url, headers=request_headers, data=data
            ) as response:
                transfer.upload_progress = 1.0
                total = response.content_length
                body = bytearray()
                async for chunk in response.content.iter_chunked(self.CHUNK_SIZE):
                    body.extend(chunk)
                    if total:
                        transfer.download_progress = min(1.0, len(body) / total)
                transfer.download_progress = 1.0

                return CompletionEvent(
                    handle=transfer.handle,
                    response_code=response.status,
                    content_type=response.headers.get(aiohttp.hdrs.CONTENT_TYPE, ""),
                    text=_decode(bytes(body), response.charset),
                )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            LOGGER.warning(
                "%s %s failed (handle=%s): %s",
                transfer.method,
                transfer.url,
                transfer.handle,
                exc,
            )
            return CompletionEvent(
                handle=transfer.handle,
                is_error=True,
                error_type=type(exc).__name__,
                error_message=str(exc),
            )

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=None)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        return self._session

    def _emit(self, event: CompletionEvent) -> None:
        if self._sink is None:
            LOGGER.warning(
                "%s has no event sink; completion of handle %s is lost",
                self.name,
                event.handle,
            )
            return
        self._sink(self, event)

    def _lookup(self, handle: int) -> Optional[Transfer]:
        return self._active.get(handle) or self._finished.get(handle)

    def _retain(self, transfer: Transfer) -> None:
        self._finished[transfer.handle] = transfer
        while len(self._finished) > self.config.max_retained_transfers:
            self._finished.popitem(last=False)


def _decode(body: bytes, charset: Optional[str]) -> str:
    try:
        return body.decode(charset or "utf-8", errors="replace")
    except LookupError:
        return body.decode("utf-8", errors="replace")
