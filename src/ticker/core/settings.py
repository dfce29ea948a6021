"""Ticker settings.

Configuration is explicit, validated and environment-driven. Every field can
be overridden with a ``TICKER_``-prefixed environment variable or a ``.env``
file in the working directory.

Examples:
    >>> from ticker.core.settings import TickerSettings
    >>> settings = TickerSettings(refresh_rate_hz=120)
    >>> settings.history_size
    120

    $ TICKER_LOG_FORMAT=json TICKER_REFRESH_RATE_HZ=144 ticker run

Tags:
    settings, configuration, pydantic, environment, ticker
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TickerSettings(BaseSettings):
    """Settings for a ticker and its default frame source.

    Fields
    ──────
    debug                   : Enable debug mode (forces ``log_level`` to DEBUG)
    log_level               : Structlog log level
    log_format              : ``console`` for development, ``json`` for aggregation
    refresh_rate_hz         : Frame rate of the asyncio frame source
    history_size            : Number of frame-rate samples kept for averaging
    id_seed                 : First id handed out by the callback registry
    isolate_callback_errors : Keep firing other callbacks when one raises
    score_threshold         : Score below which health checks warn
    """

    model_config = SettingsConfigDict(
        env_prefix="TICKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    debug: bool = False
    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"

    # ── Frame clock ──────────────────────────────────────────────
    refresh_rate_hz: float = Field(default=60.0, gt=0, description="Asyncio frame source rate")
    history_size: int = Field(default=120, gt=0, description="Frame-rate samples kept")

    # ── Registry ─────────────────────────────────────────────────
    id_seed: int = Field(
        default=10000,
        ge=0,
        description="First callback id; kept above typical native timer handles",
    )
    isolate_callback_errors: bool = True

    # ── Health ───────────────────────────────────────────────────
    score_threshold: int = Field(default=80, ge=0, le=100)

    @model_validator(mode="after")
    def _apply_debug(self) -> TickerSettings:
        if self.debug:
            self.log_level = "DEBUG"
        return self
