"""Frame-driven scheduling for the ticker.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TICKER SCHEDULING                                                            │
│                                                                               │
│  Quick Start:                                                                 │
│  ┌──────────────────────────────────────────────────────────────────────┐   │
│  │   from ticker.scheduling import Ticker, AsyncioFrameSource           │   │
│  │                                                                      │   │
│  │   async def main():                                                  │   │
│  │       ticker = Ticker(AsyncioFrameSource(refresh_rate_hz=60))        │   │
│  │       ticker.start()                                                 │   │
│  │       ticker.set_animation_loop(draw, 30)                            │   │
│  │       await ticker.sleep(1000)                                       │   │
│  │       print(ticker.score)                                            │   │
│  │       ticker.stop()                                                  │   │
│  └──────────────────────────────────────────────────────────────────────┘   │
│                                                                               │
│  Architecture:                                                                │
│   ┌──────────────┐  frame(ts)  ┌──────────────────────────────┐             │
│   │ FrameSource  │ ──────────► │  Ticker                      │             │
│   │ (timing)     │             │  ┌──────────┐ ┌───────────┐  │             │
│   └──────────────┘             │  │ Registry │ │ Telemetry │  │             │
│                                │  └──────────┘ └───────────┘  │             │
│   Sources:                     │        TimerBindings         │             │
│   • ManualFrameSource          │   (optional namespace swap)  │             │
│   • AsyncioFrameSource         └──────────────────────────────┘             │
└──────────────────────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ Rebinding timer names on import
    ✅ Opt in with ``Ticker(source, namespace=...)``
    ❌ Constructing the ticker and its source by hand from settings
    ✅ ``create_ticker(settings)`` factory function
"""

from __future__ import annotations

from typing import Any

from ticker.core.settings import TickerSettings

from .asyncio_source import AsyncioFrameSource
from .bindings import BOUND_NAMES, EXTRA_NAMES, TIMER_NAMES, TimerBindings
from .clock import now_ms
from .health import TickerHealthReport, check_frame_interval_stability, check_ticker_health
from .manual_source import ManualFrameSource
from .protocol import FrameCallback, FrameSource, SourceHealth
from .registry import (
    UNBOUNDED,
    CallbackKind,
    CallbackRegistry,
    PendingCallback,
    validate_delay,
    validate_repeats,
)
from .telemetry import FrameRateTelemetry
from .ticker import Ticker, TickerHealth, TickerStats

__all__ = [
    # Protocol
    "FrameSource",
    "FrameCallback",
    "SourceHealth",
    # Sources
    "ManualFrameSource",
    "AsyncioFrameSource",
    "now_ms",
    # Registry
    "CallbackRegistry",
    "PendingCallback",
    "CallbackKind",
    "UNBOUNDED",
    "validate_delay",
    "validate_repeats",
    # Telemetry
    "FrameRateTelemetry",
    # Ticker
    "Ticker",
    "TickerStats",
    "TickerHealth",
    # Bindings
    "TimerBindings",
    "TIMER_NAMES",
    "EXTRA_NAMES",
    "BOUND_NAMES",
    # Health
    "check_ticker_health",
    "check_frame_interval_stability",
    "TickerHealthReport",
    # Factory
    "create_ticker",
]


def create_ticker(
    settings: TickerSettings | None = None,
    *,
    source: FrameSource | None = None,
    namespace: Any = None,
) -> Ticker:
    """Factory function to create a ticker from settings.

    Args:
        settings: Ticker settings (defaults read from the environment)
        source: Frame source; an AsyncioFrameSource at
            ``settings.refresh_rate_hz`` when omitted
        namespace: Optional timer namespace to redirect while running

    Returns:
        Configured, stopped Ticker

    Example:
        >>> from ticker import timers
        >>> ticker = create_ticker(namespace=timers)
        >>> ticker.start()
    """
    settings = settings or TickerSettings()
    if source is None:
        source = AsyncioFrameSource(refresh_rate_hz=settings.refresh_rate_hz)

    return Ticker(
        source,
        namespace=namespace,
        history_size=settings.history_size,
        id_seed=settings.id_seed,
        isolate_errors=settings.isolate_callback_errors,
    )
