"""Frame-rate telemetry derived from observed frame gaps.

All rates are in frames per second and all deltas in milliseconds. Display
refresh rates are assumed to come in 30 Hz tiers (30, 60, 90, 120, 144 rounds
to 150, ...), so the maximum rate is the last observed rate rounded to the
nearest tier. This is a heuristic, not a hardware query.
"""

from __future__ import annotations

import math
from collections import deque

from ticker.core.errors import ConfigError

DEFAULT_HISTORY_SIZE = 120
DEFAULT_FRAME_RATE = 60
REFRESH_TIER = 30


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class FrameRateTelemetry:
    """Bounded, most-recent-first history of instantaneous frame rates.

    Every property is a pure function of the last delta and the history.
    """

    def __init__(self, capacity: int = DEFAULT_HISTORY_SIZE) -> None:
        if capacity <= 0:
            raise ConfigError(f"history size must be positive, got {capacity}", key="history_size")

        self.capacity = capacity
        self._delta = 0.0
        self._history: deque[float] = deque(maxlen=capacity)
        self._deltas: deque[float] = deque(maxlen=capacity)

    def record(self, delta: float) -> None:
        """Record one frame. Zero deltas update the state but add no sample."""
        self._delta = delta
        if delta > 0:
            self._history.appendleft(min(1000.0 / delta, self.max_frame_rate))
            self._deltas.appendleft(delta)

    def reset(self) -> None:
        self._delta = 0.0
        self._history.clear()
        self._deltas.clear()

    @property
    def delta(self) -> float:
        """Gap between the last two frames, in ms."""
        return self._delta

    @property
    def max_frame_rate(self) -> int:
        if not self._delta:
            return DEFAULT_FRAME_RATE
        return _round_half_up(1000.0 / self._delta / REFRESH_TIER) * REFRESH_TIER

    @property
    def frame_rate(self) -> float:
        """Instantaneous frame rate, capped at the refresh tier."""
        if not self._delta:
            return self.max_frame_rate
        return min(1000.0 / self._delta, self.max_frame_rate)

    @property
    def average_frame_rate(self) -> float:
        if not self._history:
            return self.frame_rate
        return sum(self._history) / len(self._history)

    @property
    def score(self) -> int:
        """Average rate as a percentage of the refresh tier, nominally 0-100.

        A tier of 0 (frames slower than ~15 fps) scores 0.
        """
        max_rate = self.max_frame_rate
        if not max_rate:
            return 0
        return _round_half_up(self.average_frame_rate / max_rate * 100)

    @property
    def history(self) -> tuple[float, ...]:
        """Recorded rates, most recent first."""
        return tuple(self._history)

    @property
    def deltas(self) -> tuple[float, ...]:
        """Recorded nonzero deltas, most recent first."""
        return tuple(self._deltas)

    @property
    def samples(self) -> int:
        return len(self._history)
