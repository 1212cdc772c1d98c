"""Tests for routing completion events to pending requests."""

import logging

import pytest

from webchannel.core.dispatcher import RequestDispatcher
from webchannel.core.models import CompletionEvent, RequestStatus, Result


def test_add_request_returns_request_in_progress(device) -> None:
    dispatcher = RequestDispatcher(device)

    request = dispatcher.add_request(7)

    assert request.handle == 7
    assert request.status is RequestStatus.IN_PROGRESS
    assert request.ready is False
    assert request.result is None
    assert dispatcher.is_pending(7)
    assert dispatcher.pending_count == 1


def test_event_completes_request_and_invokes_callback_once(device) -> None:
    dispatcher = RequestDispatcher(device)
    received: list[Result] = []
    request = dispatcher.add_request(7, received.append)

    dispatcher.on_event(device, CompletionEvent(handle=7, response_code=200, text="ok"))

    assert request.ready is True
    assert request.status is RequestStatus.COMPLETED
    assert request.result == Result.from_event(
        CompletionEvent(handle=7, response_code=200, text="ok")
    )
    assert received == [request.result]
    assert not dispatcher.is_pending(7)


def test_duplicate_event_is_a_no_op(device) -> None:
    dispatcher = RequestDispatcher(device)
    received: list[Result] = []
    request = dispatcher.add_request(7, received.append)

    dispatcher.on_event(device, CompletionEvent(handle=7, response_code=200, text="first"))
    first = request.result
    dispatcher.on_event(device, CompletionEvent(handle=7, response_code=500, text="second"))

    assert request.result is first
    assert len(received) == 1


def test_unknown_handle_is_dropped(device, caplog) -> None:
    dispatcher = RequestDispatcher(device)
    request = dispatcher.add_request(1)

    with caplog.at_level(logging.DEBUG, logger="webchannel.core.dispatcher"):
        dispatcher.on_event(device, CompletionEvent(handle=99, response_code=200))

    assert request.ready is False
    assert dispatcher.pending_count == 1
    assert any("unknown handle 99" in r.getMessage() for r in caplog.records)


def test_events_route_to_matching_request_in_any_order(device) -> None:
    dispatcher = RequestDispatcher(device)
    first = dispatcher.add_request(1)
    second = dispatcher.add_request(2)

    dispatcher.on_event(device, CompletionEvent(handle=2, response_code=201, text="two"))

    assert second.result is not None and second.result.text == "two"
    assert first.ready is False

    dispatcher.on_event(device, CompletionEvent(handle=1, response_code=200, text="one"))

    assert first.result is not None and first.result.text == "one"
    assert dispatcher.pending_count == 0


def test_failing_callback_leaves_no_pending_entry(device) -> None:
    dispatcher = RequestDispatcher(device)

    def explode(result: Result) -> None:
        raise RuntimeError("callback failed")

    request = dispatcher.add_request(4, explode)

    with pytest.raises(RuntimeError, match="callback failed"):
        dispatcher.on_event(device, CompletionEvent(handle=4, response_code=200))

    assert request.status is RequestStatus.COMPLETED
    assert not dispatcher.is_pending(4)


def test_discard_removes_pending_handle(device) -> None:
    dispatcher = RequestDispatcher(device)
    dispatcher.add_request(3)

    dispatcher.discard(3)
    dispatcher.discard(3)

    assert dispatcher.pending_count == 0
