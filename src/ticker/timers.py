"""Native timers on the running asyncio event loop.

This module is the default namespace for the six conventional timer names.
Out of the box they schedule directly on the event loop; a ticker created
with ``namespace=ticker.timers`` swaps them for its own methods while it is
running, so code written against these names moves onto the frame clock
without changes.

Delays are in milliseconds and handles are small positive integers, well
below the ids a ticker hands out.

Example:
    >>> from ticker import timers
    >>> async def main():
    ...     timers.set_timeout(print, 250, "later")
    ...     await asyncio.sleep(0.3)
"""

from __future__ import annotations

import asyncio
import itertools
from collections.abc import Callable
from typing import Any

from ticker.scheduling.clock import now_ms

FRAME_INTERVAL_MS = 1000.0 / 60

_handles = itertools.count(1)
_pending: dict[int, asyncio.TimerHandle] = {}


def _schedule(handle: int, delay_ms: float, fn: Callable[..., Any], *args: Any) -> None:
    loop = asyncio.get_running_loop()
    _pending[handle] = loop.call_later(max(delay_ms, 0) / 1000.0, fn, *args)


def _cancel(handle: Any) -> None:
    try:
        timer = _pending.pop(handle, None)
    except TypeError:
        return
    if timer is not None:
        timer.cancel()


def set_timeout(callback: Callable[..., Any], delay: float | None = None, *args: Any) -> int:
    """Call ``callback(*args)`` once after ``delay`` ms."""
    handle = next(_handles)

    def _fire() -> None:
        _pending.pop(handle, None)
        callback(*args)

    _schedule(handle, delay or 0, _fire)
    return handle


def clear_timeout(handle: Any) -> None:
    _cancel(handle)


def set_interval(callback: Callable[..., Any], delay: float | None = None, *args: Any) -> int:
    """Call ``callback(*args)`` every ``delay`` ms until cleared."""
    handle = next(_handles)
    interval = delay or 0

    def _fire() -> None:
        _schedule(handle, interval, _fire)
        callback(*args)

    _schedule(handle, interval, _fire)
    return handle


def clear_interval(handle: Any) -> None:
    _cancel(handle)


def request_animation_frame(callback: Callable[[float], Any]) -> int:
    """Call ``callback(timestamp_ms)`` after one 60 Hz frame."""
    handle = next(_handles)

    def _fire() -> None:
        _pending.pop(handle, None)
        callback(now_ms())

    _schedule(handle, FRAME_INTERVAL_MS, _fire)
    return handle


def cancel_animation_frame(handle: Any) -> None:
    _cancel(handle)


def pending() -> int:
    """Number of native timers still scheduled."""
    return len(_pending)
