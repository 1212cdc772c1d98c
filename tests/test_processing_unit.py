"""Tests for the in-process event channel unit and the gadget host."""

import asyncio
import logging

import pytest

from webchannel.adapters import AiohttpWebDevice, EventChannelUnit
from webchannel.config import load_config
from webchannel.core.errors import ChannelOutOfRange
from webchannel.core.models import CompletionEvent
from webchannel.host import Gadget


def _recorder(log: list, tag: str):
    def handler(sender, event) -> None:
        log.append((tag, sender, event.handle))

    return handler


def test_notify_queues_only_channels_owned_by_source(unit) -> None:
    owner, stranger = object(), object()
    log: list = []
    unit.bind(1, owner, _recorder(log, "one"))
    unit.bind(3, stranger, _recorder(log, "three"))

    unit.notify(owner, CompletionEvent(handle=1))
    unit.notify(owner, CompletionEvent(handle=2))

    assert unit.queued == 2
    assert log == []

    assert unit.tick() == 2
    assert log == [("one", owner, 1), ("one", owner, 2)]
    assert unit.queued == 0


def test_notify_from_unbound_source_is_ignored(unit) -> None:
    unit.notify(object(), CompletionEvent(handle=1))

    assert unit.queued == 0
    assert unit.tick() == 0


def test_tick_continues_after_failing_handler(unit, caplog) -> None:
    owner = object()
    log: list = []

    def explode(sender, event) -> None:
        raise RuntimeError("boom")

    unit.bind(1, owner, explode)
    unit.bind(2, owner, _recorder(log, "two"))

    with caplog.at_level(logging.ERROR, logger="webchannel.adapters.processing_unit"):
        unit.notify(owner, CompletionEvent(handle=8))
        delivered = unit.tick()

    assert delivered == 2
    assert log == [("two", owner, 8)]
    assert any("event channel 1" in r.getMessage() for r in caplog.records)


def test_fire_validates_channel(unit) -> None:
    with pytest.raises(ChannelOutOfRange):
        unit.fire(0, object(), CompletionEvent(handle=1))

    unit.fire(2, object(), CompletionEvent(handle=1))  # unbound: no-op


def test_bind_rejects_out_of_range_channel(unit) -> None:
    with pytest.raises(ChannelOutOfRange):
        unit.bind(5, object(), _recorder([], "x"))


def test_unit_requires_at_least_one_channel() -> None:
    with pytest.raises(ValueError):
        EventChannelUnit("CPU0", channel_count=0)


@pytest.mark.asyncio
async def test_notify_schedules_tick_on_running_loop(unit) -> None:
    owner = object()
    log: list = []
    unit.bind(1, owner, _recorder(log, "one"))

    unit.notify(owner, CompletionEvent(handle=4))
    unit.notify(owner, CompletionEvent(handle=5))
    assert log == []

    await asyncio.sleep(0)

    assert log == [("one", owner, 4), ("one", owner, 5)]


def test_gadget_emit_reaches_every_unit() -> None:
    gadget = Gadget()
    first, second = EventChannelUnit("CPU0", 2), EventChannelUnit("CPU1", 2)
    gadget.add_unit("CPU0", first)
    gadget.add_unit("CPU1", second)
    source = object()
    log: list = []
    first.bind(1, source, _recorder(log, "cpu0"))
    second.bind(2, source, _recorder(log, "cpu1"))

    gadget.emit(source, CompletionEvent(handle=6))
    first.tick()
    second.tick()

    assert log == [("cpu0", source, 6), ("cpu1", source, 6)]


def test_gadget_lookup_returns_none_for_unknown_names() -> None:
    gadget = Gadget()

    assert gadget.find_device("Wifi0") is None
    assert gadget.find_unit("CPU0") is None


def test_gadget_from_config_builds_device_and_unit(tmp_path) -> None:
    config_path = tmp_path / "webchannel.cfg"
    config_path.write_text(
        "[device]\nname = Wifi2\n\n[unit]\nname = CPU4\nchannel_count = 3\n",
        encoding="utf-8",
    )

    gadget = Gadget.from_config(load_config(config_path))

    device = gadget.find_device("Wifi2")
    unit = gadget.find_unit("CPU4")
    assert isinstance(device, AiohttpWebDevice)
    assert isinstance(unit, EventChannelUnit)
    assert unit.channel_count == 3
