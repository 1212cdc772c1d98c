"""Domain models for completion events and request results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

WEB_RESPONSE_EVENT_TYPE = "WebResponseEvent"


class RequestStatus(str, Enum):
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True, slots=True)
class CompletionEvent:
    """Raw notification delivered by a device when a transfer finishes."""

    handle: int
    response_code: int = 0
    content_type: str = ""
    error_message: str = ""
    error_type: str = ""
    is_error: bool = False
    text: str = ""
    type: str = WEB_RESPONSE_EVENT_TYPE


@dataclass(frozen=True, slots=True)
class Result:
    """Immutable outcome of a completed request.

    A non-200 response is not an exception; ``ok`` is simply false and the
    caller inspects ``response_code`` or the error fields.
    """

    ok: bool
    content_type: str
    error_message: str
    error_type: str
    is_error: bool
    response_code: int
    text: str
    type: str

    @classmethod
    def from_event(cls, event: CompletionEvent) -> "Result":
        return cls(
            ok=event.response_code == 200,
            content_type=event.content_type,
            error_message=event.error_message,
            error_type=event.error_type,
            is_error=event.is_error,
            response_code=event.response_code,
            text=event.text,
            type=event.type,
        )
