"""Frame source protocol.

┌──────────────────────────────────────────────────────────────────────────────┐
│  FRAME SOURCE PROTOCOL                                                        │
│                                                                               │
│  A frame source controls WHEN frames happen. The Ticker controls WHAT        │
│  happens on each frame.                                                       │
│                                                                               │
│   ┌──────────────────────┐  request_frame(cb)  ┌──────────────────────┐      │
│   │  Ticker              │ ──────────────────► │  FrameSource         │      │
│   │                      │                     │                      │      │
│   │  - advance entries   │ ◄────────────────── │  - ManualFrameSource │      │
│   │  - fire due actions  │     cb(timestamp)   │  - AsyncioFrameSource│      │
│   │  - record frame rate │                     │                      │      │
│   └──────────────────────┘                     └──────────────────────┘      │
│                                                                               │
│  Every request is single-shot: the Ticker asks for exactly one frame at a    │
│  time and asks again after the tick completes. The chain of requests is the  │
│  run loop.                                                                    │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

FrameCallback = Callable[[float], None]


@runtime_checkable
class FrameSource(Protocol):
    """Protocol for pluggable frame clocks.

    Implementations:
        - ManualFrameSource: virtual clock advanced by hand (tests, simulations)
        - AsyncioFrameSource: real-time frames on an asyncio event loop

    Example (custom source):
        >>> class PygameSource:
        ...     name = "pygame"
        ...
        ...     def now(self):
        ...         return pygame.time.get_ticks()
        ...
        ...     def request_frame(self, callback):
        ...         return self._queue.append(callback) or len(self._queue)
        ...
        ...     def cancel_frame(self, handle):
        ...         ...
        ...
        ...     def health(self):
        ...         return {"healthy": True, "source": "pygame"}
    """

    name: str

    def now(self) -> float:
        """Return a monotonically non-decreasing timestamp in milliseconds."""
        ...

    def request_frame(self, callback: FrameCallback) -> Hashable:
        """Schedule ``callback`` once, at the next frame boundary.

        Returns:
            A handle accepted by ``cancel_frame``.
        """
        ...

    def cancel_frame(self, handle: Hashable) -> None:
        """Cancel a pending frame request. No-op if it already fired."""
        ...

    def health(self) -> dict[str, Any]:
        """Return source health status.

        Returns:
            dict with at least:
                - healthy: bool
                - source: str, source name
                - frames_requested: int
                - frames_delivered: int
        """
        ...


@dataclass
class SourceHealth:
    """Structured frame source health."""

    healthy: bool
    source: str
    frames_requested: int = 0
    frames_delivered: int = 0
    pending: int = 0
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "healthy": self.healthy,
            "source": self.source,
            "frames_requested": self.frames_requested,
            "frames_delivered": self.frames_delivered,
            "pending": self.pending,
            **self.extra,
        }
