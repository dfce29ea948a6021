"""Real-time frame source backed by an asyncio event loop.

┌──────────────────────────────────────────────────────────────────────────────┐
│  ASYNCIO FRAME SOURCE                                                         │
│                                                                               │
│   request_frame(cb)                                                           │
│      │                                                                        │
│      ▼                                                                        │
│   loop.call_later(1 / refresh_rate_hz, _deliver, handle, cb)                 │
│      │                                                                        │
│      ▼                                                                        │
│   _deliver: forget handle, frames_delivered += 1, cb(now_ms())               │
│                                                                               │
│   cancel_frame(handle) → TimerHandle.cancel()                                 │
└──────────────────────────────────────────────────────────────────────────────┘

The loop plays the part of a display's refresh mechanism. Timing is as good as
the event loop's timer resolution; a busy loop shows up as lower frame rates,
which is exactly what the ticker's telemetry is meant to surface.
"""

from __future__ import annotations

import asyncio
import itertools
from typing import Any

from ticker.core.errors import ConfigError
from ticker.core.logging import get_logger

from .clock import now_ms
from .protocol import FrameCallback, SourceHealth

logger = get_logger(__name__)


class AsyncioFrameSource:
    """Frame source that schedules frames on an asyncio event loop.

    Example:
        >>> async def main():
        ...     ticker = Ticker(AsyncioFrameSource(refresh_rate_hz=60)).start()
        ...     await ticker.sleep(500)
        ...     ticker.stop()
        >>> asyncio.run(main())
    """

    name = "asyncio"

    def __init__(
        self,
        refresh_rate_hz: float = 60.0,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if refresh_rate_hz <= 0:
            raise ConfigError(
                f"refresh_rate_hz must be positive, got {refresh_rate_hz}",
                key="refresh_rate_hz",
            )

        self.refresh_rate_hz = float(refresh_rate_hz)
        self.frame_interval = 1.0 / self.refresh_rate_hz
        self._loop = loop
        self._handles = itertools.count(1)
        self._pending: dict[int, asyncio.TimerHandle] = {}
        self._requested = 0
        self._delivered = 0

    def now(self) -> float:
        return now_ms()

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = self._get_loop().call_later(
            self.frame_interval, self._deliver, handle, callback
        )
        self._requested += 1
        return handle

    def cancel_frame(self, handle: Any) -> None:
        timer = self._pending.pop(handle, None)
        if timer is not None:
            timer.cancel()

    def _deliver(self, handle: int, callback: FrameCallback) -> None:
        self._pending.pop(handle, None)
        self._delivered += 1
        callback(self.now())

    def health(self) -> dict[str, Any]:
        return self.get_health().to_dict()

    def get_health(self) -> SourceHealth:
        loop_alive = self._loop is not None and not self._loop.is_closed()
        return SourceHealth(
            healthy=loop_alive,
            source=self.name,
            frames_requested=self._requested,
            frames_delivered=self._delivered,
            pending=len(self._pending),
            extra={"refresh_rate_hz": self.refresh_rate_hz},
        )
