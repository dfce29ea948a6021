"""
ticker - every timer on one frame clock.

Timeouts, intervals, bounded counters, next-frame callbacks and animation
loops all advance off the same chain of frame callbacks, with one
cancellation routine and frame-rate telemetry measured from real frame gaps.

Examples:
    >>> import asyncio
    >>> from ticker import Ticker, AsyncioFrameSource
    >>> async def main():
    ...     ticker = Ticker(AsyncioFrameSource()).start()
    ...     ticker.set_counter(lambda elapsed, n: print("beat", n), 250, 4)
    ...     await ticker.sleep(1100)
    ...     ticker.stop()
    >>> asyncio.run(main())
"""

from ticker.core.errors import (
    CallbackError,
    ConfigError,
    InvalidDelayError,
    InvalidRepeatCountError,
    TickerError,
    ValidationError,
)
from ticker.core.settings import TickerSettings
from ticker.scheduling import (
    AsyncioFrameSource,
    FrameSource,
    ManualFrameSource,
    Ticker,
    TimerBindings,
    check_ticker_health,
    create_ticker,
)

__version__ = "0.1.0"

__all__ = [
    "Ticker",
    "FrameSource",
    "ManualFrameSource",
    "AsyncioFrameSource",
    "TimerBindings",
    "create_ticker",
    "check_ticker_health",
    "TickerSettings",
    "TickerError",
    "ValidationError",
    "InvalidDelayError",
    "InvalidRepeatCountError",
    "ConfigError",
    "CallbackError",
    "__version__",
]
