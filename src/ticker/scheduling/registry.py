"""Pending callback registry.

All five registration kinds (timeout, interval, counter, animation frame,
animation loop) are the same thing underneath: an action with a delay and a
repeat bound. ``CallbackRegistry`` stores them under opaque integer ids and
does the per-entry time bookkeeping; the ``Ticker`` decides when to advance
them and fires the actions.
"""

from __future__ import annotations

import itertools
import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from typing import Any

from ticker.core.errors import InvalidDelayError, InvalidRepeatCountError

UNBOUNDED = math.inf
DEFAULT_ID_SEED = 10000


class CallbackKind(str, Enum):
    """Which registration operation created an entry."""

    TIMEOUT = "timeout"
    INTERVAL = "interval"
    COUNTER = "counter"
    ANIMATION_FRAME = "animation_frame"
    ANIMATION_LOOP = "animation_loop"


@dataclass
class PendingCallback:
    """One scheduled unit of work.

    ``action`` is called as ``action(*args, time_since_last_fire, fired_count)``.
    Entries with ``every_tick`` set are due on every tick that moves time
    forward, however short the frame.
    """

    id: int
    action: Callable[..., Any]
    args: tuple[Any, ...] = ()
    repeats: float = 1
    delay: float = 1
    kind: CallbackKind = CallbackKind.TIMEOUT
    every_tick: bool = False
    fired_count: int = 0
    accumulated_time: float = 0.0
    last_fire_time: float = 0.0

    @property
    def time_since_last_fire(self) -> float:
        return self.accumulated_time - self.last_fire_time

    @property
    def exhausted(self) -> bool:
        """True once the entry has fired as many times as it may."""
        return self.fired_count >= self.repeats

    def mark_fired(self) -> None:
        self.fired_count += 1
        self.last_fire_time = self.accumulated_time


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and not math.isnan(value)


def validate_delay(delay: Any) -> float:
    """Return ``delay`` if it is a finite positive number, else raise."""
    if not _is_number(delay) or delay <= 0 or math.isinf(delay):
        raise InvalidDelayError(delay)
    return delay


def validate_repeats(repeats: Any) -> float:
    """Return ``repeats`` if it is a positive number (``UNBOUNDED`` allowed), else raise."""
    if not _is_number(repeats) or repeats <= 0:
        raise InvalidRepeatCountError(repeats)
    return repeats


@dataclass
class CallbackRegistry:
    """Mapping of id -> PendingCallback with monotonically increasing ids.

    Ids start at ``id_seed``, well above the handles a native timer hands out,
    and are never reused for the lifetime of the registry.
    """

    id_seed: int = DEFAULT_ID_SEED
    _entries: dict[int, PendingCallback] = field(default_factory=dict, init=False, repr=False)
    _ids: Iterator[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._ids = itertools.count(self.id_seed)

    def add(
        self,
        action: Callable[..., Any],
        args: tuple[Any, ...],
        repeats: float,
        delay: float,
        *,
        kind: CallbackKind = CallbackKind.TIMEOUT,
        every_tick: bool = False,
        offset: float = 0.0,
    ) -> PendingCallback:
        """Validate and store a new entry.

        Args:
            action: Callable invoked on each firing
            args: Extra positional args passed ahead of the scheduler's two
            repeats: Maximum number of firings (``UNBOUNDED`` for no limit)
            delay: Time that must accumulate before each firing
            kind: Registration kind, for logs and health reports
            every_tick: Due on every tick regardless of ``delay``
            offset: Starting accumulated time (zero or negative)

        Raises:
            InvalidDelayError: delay is not a positive number
            InvalidRepeatCountError: repeats is not a positive number
        """
        validate_delay(delay)
        validate_repeats(repeats)

        entry = PendingCallback(
            id=next(self._ids),
            action=action,
            args=tuple(args),
            repeats=repeats,
            delay=delay,
            kind=kind,
            every_tick=every_tick,
            accumulated_time=offset,
        )
        self._entries[entry.id] = entry
        return entry

    def remove(self, callback_id: Any) -> PendingCallback | None:
        """Remove an entry. Unknown ids are ignored."""
        try:
            return self._entries.pop(callback_id, None)
        except TypeError:
            # unhashable ids can never have been issued
            return None

    def get(self, callback_id: int) -> PendingCallback | None:
        return self._entries.get(callback_id)

    def ids(self) -> list[int]:
        """Snapshot of the live ids, in registration order."""
        return list(self._entries)

    def advance(self, entry: PendingCallback, delta: float) -> bool:
        """Charge ``delta`` to an entry. Returns True if it is due to fire."""
        entry.accumulated_time += delta
        return entry.every_tick or entry.time_since_last_fire >= entry.delay

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, callback_id: object) -> bool:
        try:
            return callback_id in self._entries
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PendingCallback]:
        return iter(list(self._entries.values()))
