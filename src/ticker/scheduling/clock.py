"""Millisecond timestamps for frame sources."""

from __future__ import annotations

import time


def now_ms() -> float:
    """Return the high-resolution performance counter in milliseconds.

    Only differences between two readings are meaningful.
    """
    return time.perf_counter() * 1000.0
