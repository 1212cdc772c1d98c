"""Binding of dispatch functions to processing unit event channels."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .errors import ChannelOutOfRange, NoFreeChannel
from .protocols import DispatchFunction, ProcessingUnit

LOGGER = logging.getLogger(__name__)


def find_free_channel(unit: ProcessingUnit) -> int:
    """Return the lowest-numbered channel without a bound handler."""

    for channel in range(1, unit.channel_count + 1):
        if unit.handler_of(channel) is None:
            return channel
    raise NoFreeChannel(
        f"Couldn't find a free event channel in {unit}; "
        "use a different unit or specify an event channel."
    )


def check_channel_range(unit: ProcessingUnit, channel: int) -> None:
    if channel < 1:
        raise ChannelOutOfRange(
            f"Event channel must be bigger than or equal to 1, given: {channel}"
        )
    if channel > unit.channel_count:
        raise ChannelOutOfRange(
            f"Can't use event channel {channel}; "
            f"{unit} only has {unit.channel_count} channels."
        )


def check_registered_owner(unit: ProcessingUnit, channel: int, owner: Any) -> None:
    """Warn when another owner already claimed the channel."""

    registered = unit.owner_of(channel)
    if registered is not None and registered is not owner:
        LOGGER.warning(
            "Replacing registered module %s on %s event channel %d with module %s. "
            "Change the event channel if this was unintentional.",
            registered,
            unit,
            channel,
            owner,
        )


def register(
    unit: ProcessingUnit,
    channel: Optional[int],
    dispatch_fn: DispatchFunction,
    owner: Any,
) -> int:
    """Install ``dispatch_fn`` on a channel of ``unit`` and return the channel.

    When ``channel`` is None the lowest free channel is used. Validation runs
    before anything is bound, so a failed registration leaves the unit as it
    was.
    """

    if channel is None:
        channel = find_free_channel(unit)

    check_channel_range(unit, channel)
    check_registered_owner(unit, channel, owner)

    unit.bind(channel, owner, dispatch_fn)
    LOGGER.debug("Bound %s to %s event channel %d", owner, unit, channel)
    return channel
