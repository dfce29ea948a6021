"""Ticker health checks and frame pacing analysis.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TICKER HEALTH MONITORING                                                     │
│                                                                               │
│  Health Checks:                                                               │
│  1. Running: Is the frame loop alive?                                        │
│  2. Source: Does the frame source report itself healthy?                     │
│  3. Score: Is the average frame rate close to the refresh tier?              │
│  4. Callbacks: Are actions failing?                                          │
│                                                                               │
│  Score:                                                                       │
│  ┌────────────────────────────────────────────────────────────────────┐      │
│  │   refresh tier   60 fps                                            │      │
│  │   average        42 fps                                            │      │
│  │   score          70  ⚠️ WARNING (< 80 threshold)                   │      │
│  └────────────────────────────────────────────────────────────────────┘      │
│                                                                               │
│  The score check only counts once enough samples are in the history, so a    │
│  freshly started ticker is not flagged on its first few frames.              │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ticker.core.logging import get_logger

if TYPE_CHECKING:
    from .ticker import Ticker

logger = get_logger(__name__)


@dataclass
class TickerHealthReport:
    """Complete ticker health report."""

    healthy: bool
    checks: dict[str, bool] = field(default_factory=dict)
    source: dict[str, Any] = field(default_factory=dict)
    timing: dict[str, Any] = field(default_factory=dict)
    callbacks: dict[str, int] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "healthy": self.healthy,
            "checks": self.checks,
            "source": self.source,
            "timing": self.timing,
            "callbacks": self.callbacks,
            "warnings": self.warnings,
            "errors": self.errors,
        }


def check_ticker_health(
    ticker: Ticker,
    score_threshold: int = 80,
    min_samples: int = 30,
) -> TickerHealthReport:
    """Comprehensive ticker health check.

    Args:
        ticker: Ticker to check
        score_threshold: Score below which a warning is raised
        min_samples: Frame-rate samples required before the score counts

    Returns:
        TickerHealthReport with all checks
    """
    report = TickerHealthReport(healthy=True)

    # === Running ===
    report.checks["running"] = ticker.is_running
    if not ticker.is_running:
        report.errors.append("Ticker is not running")

    # === Source ===
    try:
        source_health = ticker.source.health()
        report.source = source_health
        source_ok = bool(source_health.get("healthy", False))
    except Exception as e:
        logger.warning("source_health_failed", error=str(e))
        source_ok = False
        report.errors.append(f"Frame source health check failed: {e}")
    report.checks["source_healthy"] = source_ok
    if not source_ok and ticker.is_running:
        report.errors.append("Frame source is not healthy")

    # === Frame rate ===
    telemetry = ticker.telemetry
    stats = ticker.get_stats()
    report.timing = {
        "frame_rate": telemetry.frame_rate,
        "average_frame_rate": telemetry.average_frame_rate,
        "max_frame_rate": telemetry.max_frame_rate,
        "score": telemetry.score,
        "samples": telemetry.samples,
        "frame_count": stats.frame_count,
    }

    score_ok = telemetry.samples < min_samples or telemetry.score >= score_threshold
    report.checks["score_ok"] = score_ok
    if not score_ok:
        report.warnings.append(
            f"Frame rate score {telemetry.score} below threshold {score_threshold} "
            f"(average {telemetry.average_frame_rate:.1f} of {telemetry.max_frame_rate} fps)"
        )

    # === Callbacks ===
    report.callbacks = {
        "pending": ticker.pending,
        "fired": stats.callbacks_fired,
        "failed": stats.callbacks_failed,
    }
    total = stats.callbacks_fired + stats.callbacks_failed
    if total > 10 and stats.callbacks_failed / total > 0.1:
        report.warnings.append(
            f"High callback failure rate: {stats.callbacks_failed}/{total} "
            f"({stats.callbacks_failed / total * 100:.1f}%)"
        )

    if report.errors:
        report.healthy = False

    return report


def check_frame_interval_stability(
    deltas: Sequence[float],
    expected_interval_ms: float = 1000.0 / 60,
    tolerance: float = 0.5,
) -> dict[str, Any]:
    """Analyze frame pacing from observed frame deltas.

    Args:
        deltas: Frame gaps in ms (``Ticker.telemetry.deltas``)
        expected_interval_ms: Gap the source aims for
        tolerance: Acceptable deviation as fraction (0.5 = 50%)

    Returns:
        Analysis result with jitter and stability metrics
    """
    if len(deltas) < 2:
        return {
            "stable": True,
            "samples": len(deltas),
            "message": "Insufficient data",
        }

    avg = sum(deltas) / len(deltas)
    variance = sum((x - avg) ** 2 for x in deltas) / len(deltas)
    std_dev = variance ** 0.5

    jitter_pct = (std_dev / expected_interval_ms) * 100

    max_deviation = max(abs(x - expected_interval_ms) for x in deltas)
    stable = max_deviation <= expected_interval_ms * tolerance

    return {
        "stable": stable,
        "samples": len(deltas),
        "avg_interval_ms": avg,
        "expected_interval_ms": expected_interval_ms,
        "std_dev_ms": std_dev,
        "jitter_pct": jitter_pct,
        "max_deviation_ms": max_deviation,
        "min_interval_ms": min(deltas),
        "max_interval_ms": max(deltas),
    }
