"""Ticker - every timer on one frame clock.

Manifesto:
    Timeouts, intervals, counters and animation loops that each run on their
    own timer drift apart and can't be measured as a whole. The Ticker runs
    all of them off a single chain of frame callbacks, so everything advances
    in lockstep, there is one cancellation routine, and the frame rate the
    host actually achieves is observable.

Tags:
    ticker, scheduling, frame-clock, animation-loop, telemetry

Doc-Types:
    api-reference, architecture-diagram


┌──────────────────────────────────────────────────────────────────────────────┐
│  TICKER ARCHITECTURE                                                          │
│                                                                               │
│   start() ──► baseline = now()  ──► source.request_frame(_on_frame)          │
│                                                                               │
│   ┌────────────────────────────────────────────────────────────────────┐     │
│   │                       _on_frame(timestamp)                         │     │
│   │                                                                    │     │
│   │   1. delta = timestamp - previous frame (0 on first frame)        │     │
│   │   2. _tick(delta): for each id in a snapshot of the registry      │     │
│   │      ├── accumulated_time += delta                                 │     │
│   │      ├── if every_tick or time_since_last_fire >= delay:           │     │
│   │      │      action(*args, time_since_last_fire, fired_count)       │     │
│   │      └── drop the entry once fired_count >= repeats                │     │
│   │   3. telemetry.record(delta)                                       │     │
│   │   4. still running? source.request_frame(_on_frame)                │     │
│   └────────────────────────────────────────────────────────────────────┘     │
│                                                                               │
│   stop() ──► source.cancel_frame(pending) ──► native timers restored         │
│   action raises with isolation off ──► halted (not running), re-raised       │
│                                                                               │
│  Registration kinds (all one registry entry underneath):                      │
│   set_timeout              repeats=1          delay=given (falsy → 1)        │
│   set_interval             repeats=unbounded  delay=given                    │
│   set_counter              repeats=N          delay=given                    │
│   request_animation_frame  repeats=1          delay=1 (next tick)            │
│   set_animation_loop       repeats=unbounded  delay=1000/rate or 1           │
└──────────────────────────────────────────────────────────────────────────────┘

An entry fires at most once per tick. When a frame is late by several delay
periods the entry fires once and its next period is measured from that
firing; missed periods are dropped, not replayed.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Hashable
from dataclasses import dataclass, field
from numbers import Real
from typing import Any

from ticker.core.errors import CallbackError, InvalidDelayError
from ticker.core.logging import get_logger

from .bindings import TimerBindings
from .protocol import FrameSource
from .registry import (
    DEFAULT_ID_SEED,
    UNBOUNDED,
    CallbackKind,
    CallbackRegistry,
    PendingCallback,
)
from .telemetry import DEFAULT_HISTORY_SIZE, FrameRateTelemetry

logger = get_logger(__name__)


@dataclass
class TickerStats:
    """Counters for a ticker's lifetime (or since the last reset)."""

    frame_count: int = 0
    tick_count: int = 0
    callbacks_fired: int = 0
    callbacks_failed: int = 0
    last_frame_time: float | None = None
    last_error: str | None = None


@dataclass
class TickerHealth:
    """Health status for a ticker."""

    healthy: bool
    running: bool
    source: dict[str, Any]
    pending: int = 0
    frame_rate: float = 0.0
    average_frame_rate: float = 0.0
    score: int = 0
    stats: TickerStats = field(default_factory=TickerStats)

    def to_dict(self) -> dict[str, Any]:
        return {
            "healthy": self.healthy,
            "running": self.running,
            "source": self.source,
            "pending": self.pending,
            "frame_rate": self.frame_rate,
            "average_frame_rate": self.average_frame_rate,
            "score": self.score,
            "stats": {
                "frame_count": self.stats.frame_count,
                "tick_count": self.stats.tick_count,
                "callbacks_fired": self.stats.callbacks_fired,
                "callbacks_failed": self.stats.callbacks_failed,
                "last_error": self.stats.last_error,
            },
        }


class Ticker:
    """Single-threaded cooperative scheduler driven by a frame source.

    Example:
        >>> source = ManualFrameSource()
        >>> ticker = Ticker(source).start()
        >>> ticker.set_counter(lambda elapsed, n: print(n), 100, 3)
        10000
        >>> source.run([0, 100, 100, 100])
        0
        1
        2

    Args:
        source: Frame clock (see ``FrameSource``)
        namespace: Optional object whose six conventional timer names are
            redirected to this ticker while it runs
        history_size: Number of frame-rate samples kept for averaging
        id_seed: First id handed out
        isolate_errors: Keep firing other callbacks when one raises
    """

    def __init__(
        self,
        source: FrameSource,
        *,
        namespace: Any = None,
        history_size: int = DEFAULT_HISTORY_SIZE,
        id_seed: int = DEFAULT_ID_SEED,
        isolate_errors: bool = True,
    ) -> None:
        self.source = source
        self.isolate_errors = isolate_errors

        self._registry = CallbackRegistry(id_seed=id_seed)
        self._telemetry = FrameRateTelemetry(history_size)
        self._stats = TickerStats()

        self._running = False
        self._primed = False
        self._frame_time: float | None = None
        self._frame_request: Hashable | None = None

        self._use_native = True
        self._bindings = TimerBindings(namespace, self) if namespace is not None else None

    # === Lifecycle ===

    def start(self) -> Ticker:
        """Start the frame loop and redirect the namespace timers to this ticker."""
        if self._running:
            return self

        self.use_native_functions = False

        self._running = True
        self._primed = False
        self._frame_time = self.source.now()
        self._request_frame()

        logger.info("ticker_started", source=self.source.name, pending=len(self._registry))
        return self

    def stop(self) -> Ticker:
        """Stop the frame loop and restore the native timers.

        Pending callbacks stay registered and keep their progress.
        """
        if self._running:
            self._running = False
            if self._frame_request is not None:
                self.source.cancel_frame(self._frame_request)
                self._frame_request = None
            logger.info("ticker_stopped", frames=self._stats.frame_count, pending=len(self._registry))

        self.use_native_functions = True
        return self

    def _halt(self) -> None:
        """Stop after an action's exception escaped the frame.

        No frame is pending at this point, so the ticker must not keep
        reporting itself as running; ``start()`` resumes it.
        """
        self._running = False
        self.use_native_functions = True
        logger.error(
            "ticker_stopped",
            reason="callback_error",
            frames=self._stats.frame_count,
            pending=len(self._registry),
            last_error=self._stats.last_error,
        )

    @property
    def is_running(self) -> bool:
        return self._running

    def __enter__(self) -> Ticker:
        return self.start()

    def __exit__(self, *args: Any) -> None:
        self.stop()

    # === Mode toggle ===

    @property
    def use_native_functions(self) -> bool:
        """Whether the namespace timers are the originals (True) or this ticker's."""
        return self._use_native

    @use_native_functions.setter
    def use_native_functions(self, value: bool) -> None:
        value = bool(value)
        if value == self._use_native:
            return

        if self._bindings is not None:
            if value:
                self._bindings.uninstall()
            else:
                self._bindings.install()

        self._use_native = value
        logger.debug("timer_mode_changed", mode="native" if value else "managed")

    # === Registration ===

    def set_timeout(self, action: Callable[..., Any], delay: float | None = None, *args: Any) -> int:
        """Call ``action`` once after ``delay`` ms (1 ms when falsy)."""
        return self._register(action, args, 1, delay or 1, CallbackKind.TIMEOUT)

    def set_interval(self, action: Callable[..., Any], delay: float, *args: Any) -> int:
        """Call ``action`` every ``delay`` ms until cancelled."""
        return self._register(action, args, UNBOUNDED, delay, CallbackKind.INTERVAL)

    def set_counter(
        self, action: Callable[..., Any], delay: float, repeats: float, *args: Any
    ) -> int:
        """Call ``action`` every ``delay`` ms, ``repeats`` times."""
        return self._register(action, args, repeats, delay, CallbackKind.COUNTER)

    def request_animation_frame(self, action: Callable[..., Any]) -> int:
        """Call ``action`` on the next tick."""
        return self._register(action, (), 1, 1, CallbackKind.ANIMATION_FRAME, every_tick=True)

    def set_animation_loop(
        self, action: Callable[..., Any], target_rate: float | None = None
    ) -> int:
        """Call ``action`` on every tick, or at most ``target_rate`` times a second."""
        if target_rate:
            if not isinstance(target_rate, Real) or isinstance(target_rate, bool):
                raise InvalidDelayError(target_rate)
            delay = 1000 / target_rate
        else:
            delay = 1
        return self._register(
            action, (), UNBOUNDED, delay, CallbackKind.ANIMATION_LOOP, every_tick=not target_rate
        )

    def cancel(self, callback_id: Any) -> None:
        """Remove a registration of any kind. Unknown ids are ignored."""
        if self._registry.remove(callback_id) is not None:
            logger.debug("callback_cancelled", callback_id=callback_id)

    clear_timeout = cancel
    clear_interval = cancel
    clear_counter = cancel
    cancel_animation_frame = cancel
    clear_animation_loop = cancel

    def _register(
        self,
        action: Callable[..., Any],
        args: tuple[Any, ...],
        repeats: float,
        delay: float,
        kind: CallbackKind,
        every_tick: bool = False,
    ) -> int:
        # Charge only the time since registration, not since the last frame.
        # Next-tick entries fire on the next frame however soon it comes.
        offset = 0.0
        if self._running and self._frame_time is not None and not every_tick:
            offset = min(self._frame_time - self.source.now(), 0.0)

        entry = self._registry.add(
            action, args, repeats, delay, kind=kind, every_tick=every_tick, offset=offset
        )
        logger.debug(
            "callback_registered",
            callback_id=entry.id,
            kind=kind.value,
            delay=delay,
            repeats=repeats,
        )
        return entry.id

    # === Promise-style helpers ===

    def sleep(self, duration: float) -> asyncio.Future[None]:
        """Return a future that resolves after ``duration`` ms.

        Routed through whichever ``set_timeout`` the namespace holds right now.
        Cancelling the future cancels the underlying timer.
        """
        return self._deferred("set_timeout", "clear_timeout", duration)

    def next_frame(self) -> asyncio.Future[None]:
        """Return a future that resolves on the next frame.

        Routed through whichever ``request_animation_frame`` the namespace
        holds right now. Cancelling the future cancels the frame request.
        """
        return self._deferred("request_animation_frame", "cancel_animation_frame")

    def _deferred(self, register: str, cancel: str, *args: Any) -> asyncio.Future[None]:
        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        clear = self._timer(cancel)

        def _resolve(*_: Any) -> None:
            if not future.done():
                future.set_result(None)

        handle = self._timer(register)(_resolve, *args)

        def _on_done(f: asyncio.Future[None]) -> None:
            if f.cancelled():
                clear(handle)

        future.add_done_callback(_on_done)
        return future

    def _timer(self, name: str) -> Callable[..., Any]:
        if self._bindings is not None:
            return self._bindings.resolve(name)
        return getattr(self, name)

    # === Frame loop ===

    def _request_frame(self) -> None:
        self._frame_request = self.source.request_frame(self._on_frame)

    def _on_frame(self, timestamp: float) -> None:
        self._frame_request = None
        if not self._running:
            return

        if self._primed and self._frame_time is not None:
            delta = max(timestamp - self._frame_time, 0.0)
        else:
            delta = 0.0
            self._primed = True
        self._frame_time = timestamp

        self._stats.frame_count += 1
        self._stats.last_frame_time = timestamp

        if delta:
            try:
                self._tick(delta)
            except Exception:
                self._halt()
                raise

        self._telemetry.record(delta)

        if self._running and self._frame_request is None:
            self._request_frame()

    def _tick(self, delta: float) -> None:
        """Advance every registration present at the start of the tick by ``delta``."""
        self._stats.tick_count += 1
        logger.debug("tick", delta=delta, pending=len(self._registry))

        for callback_id in self._registry.ids():
            entry = self._registry.get(callback_id)
            if entry is None:
                continue  # cancelled earlier in this tick
            if self._registry.advance(entry, delta):
                self._fire(entry)

    def _fire(self, entry: PendingCallback) -> None:
        elapsed = entry.time_since_last_fire
        try:
            entry.action(*entry.args, elapsed, entry.fired_count)
        except Exception as e:
            self._stats.callbacks_failed += 1
            error = CallbackError(f"{entry.kind.value} callback {entry.id} raised {e!r}", cause=e)
            error.with_context(
                callback_id=entry.id,
                kind=entry.kind.value,
                frame=self._stats.frame_count,
            )
            self._stats.last_error = error.message
            if not self.isolate_errors:
                raise
            logger.exception("callback_failed", **error.to_dict())
        else:
            self._stats.callbacks_fired += 1
        finally:
            entry.mark_fired()
            if entry.exhausted:
                self._registry.remove(entry.id)

    # === Telemetry ===

    @property
    def delta(self) -> float:
        """Gap between the last two frames, in ms."""
        return self._telemetry.delta

    @property
    def frame_rate(self) -> float:
        return self._telemetry.frame_rate

    @property
    def max_frame_rate(self) -> int:
        return self._telemetry.max_frame_rate

    @property
    def average_frame_rate(self) -> float:
        return self._telemetry.average_frame_rate

    @property
    def score(self) -> int:
        """Average frame rate as a percentage of the refresh tier.

        A sustained drop below a chosen threshold means the host can't keep up
        with the scheduled work.
        """
        return self._telemetry.score

    @property
    def telemetry(self) -> FrameRateTelemetry:
        return self._telemetry

    # === Registry inspection ===

    @property
    def pending(self) -> int:
        """Number of live registrations."""
        return len(self._registry)

    def __contains__(self, callback_id: object) -> bool:
        return callback_id in self._registry

    def get_callback(self, callback_id: int) -> PendingCallback | None:
        return self._registry.get(callback_id)

    # === Health & Stats ===

    def health(self) -> TickerHealth:
        source_health = self.source.health()
        return TickerHealth(
            healthy=self._running and source_health.get("healthy", False),
            running=self._running,
            source=source_health,
            pending=len(self._registry),
            frame_rate=self.frame_rate,
            average_frame_rate=self.average_frame_rate,
            score=self.score,
            stats=self._stats,
        )

    def get_stats(self) -> TickerStats:
        return self._stats

    def reset_stats(self) -> None:
        self._stats = TickerStats()
