"""Deterministic frame source driven by hand.

The clock only moves when ``advance()`` is called, which makes every tick
reproducible: tests and simulations decide exactly how much time each frame
represents.

Example:
    >>> source = ManualFrameSource()
    >>> ticker = Ticker(source).start()
    >>> source.advance(16)        # first frame after start: baseline only
    >>> source.run([100] * 5)     # five frames, 100 ms apart
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from typing import Any

from ticker.core.logging import get_logger

from .protocol import FrameCallback, SourceHealth

logger = get_logger(__name__)


class ManualFrameSource:
    """Frame source with a virtual clock.

    Frames requested before ``advance()`` are delivered by that call, once,
    with the new timestamp. Frames requested while delivering wait for the
    next ``advance()``.
    """

    name = "manual"

    def __init__(self, start: float = 0.0) -> None:
        self.time = float(start)
        self._handles = itertools.count(1)
        self._queue: dict[int, FrameCallback] = {}
        self._requested = 0
        self._delivered = 0

    def now(self) -> float:
        return self.time

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._queue[handle] = callback
        self._requested += 1
        return handle

    def cancel_frame(self, handle: Any) -> None:
        self._queue.pop(handle, None)

    @property
    def pending(self) -> int:
        """Number of frame requests waiting for delivery."""
        return len(self._queue)

    def advance(self, ms: float = 0.0) -> int:
        """Move the clock forward by ``ms`` and deliver queued frames.

        Returns:
            Number of frame callbacks delivered.
        """
        if ms < 0:
            raise ValueError("Time cannot move backwards")

        self.time += ms
        due, self._queue = self._queue, {}
        for callback in due.values():
            self._delivered += 1
            callback(self.time)

        logger.debug("manual_frames_delivered", time=self.time, delivered=len(due))
        return len(due)

    def run(self, deltas: Iterable[float]) -> int:
        """Advance once per delta. Returns the total number of frames delivered."""
        return sum(self.advance(delta) for delta in deltas)

    def health(self) -> dict[str, Any]:
        return self.get_health().to_dict()

    def get_health(self) -> SourceHealth:
        return SourceHealth(
            healthy=True,
            source=self.name,
            frames_requested=self._requested,
            frames_delivered=self._delivered,
            pending=len(self._queue),
            extra={"time": self.time},
        )
