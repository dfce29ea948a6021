"""
Root Typer application for the ticker CLI.
"""

from __future__ import annotations

import asyncio

import typer
from pydantic import ValidationError as SettingsValidationError
from typer import Typer

from ticker.cli.utils import err_console, output_result
from ticker.core.errors import TickerError
from ticker.core.logging import configure_logging, get_logger
from ticker.core.settings import TickerSettings

app = Typer(
    name="ticker",
    help="ticker: every timer on one frame clock.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

logger = get_logger(__name__)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from ticker import __version__

        typer.echo(f"ticker {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ticker CLI: run the frame loop and inspect its telemetry."""


# ── Commands ─────────────────────────────────────────────────────────────


async def _run(settings: TickerSettings, duration: float, loop_rate: float | None) -> dict:
    from ticker.scheduling import check_frame_interval_stability, check_ticker_health, create_ticker

    ticker = create_ticker(settings)
    frames = 0

    def on_frame(elapsed: float, count: int) -> None:
        nonlocal frames
        frames = count + 1

    ticker.start()
    ticker.set_animation_loop(on_frame, loop_rate)
    try:
        await ticker.sleep(duration * 1000)
        report = check_ticker_health(ticker, score_threshold=settings.score_threshold)
    finally:
        ticker.stop()

    result = report.to_dict()
    result["loop_calls"] = frames
    result["pacing"] = check_frame_interval_stability(
        ticker.telemetry.deltas, expected_interval_ms=1000.0 / settings.refresh_rate_hz
    )
    return result


@app.command("run")
def run(
    duration: float = typer.Option(2.0, "--duration", "-t", help="Seconds to run."),
    rate: float | None = typer.Option(None, "--rate", "-r", help="Frame source rate in Hz."),
    loop_rate: float | None = typer.Option(
        None, "--loop-rate", help="Animation loop target rate (every frame if omitted)."
    ),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Run a ticker for a while and print its health report."""
    overrides = {"refresh_rate_hz": rate} if rate is not None else {}
    try:
        settings = TickerSettings(**overrides)
    except SettingsValidationError as e:
        err_console.print(f"[bold red]Invalid settings[/bold red]: {e.error_count()} error(s)")
        for error in e.errors():
            loc = ".".join(str(p) for p in error["loc"])
            err_console.print(f"  {loc}: {error['msg']}")
        raise typer.Exit(code=2) from e
    configure_logging(level=settings.log_level, format=settings.log_format, force=True)

    try:
        result = asyncio.run(_run(settings, duration, loop_rate))
    except TickerError as e:
        err_console.print(f"[bold red]Error[/bold red] ({e.category.value}): {e.message}")
        raise typer.Exit(code=1) from e

    logger.info("ticker_run_complete", frames=result["timing"]["frame_count"], score=result["timing"]["score"])
    output_result(result, as_json=json_out, title="Ticker")


@app.command("config")
def show_config(json_out: bool = typer.Option(False, "--json")) -> None:
    """Show the resolved settings."""
    output_result(TickerSettings(), as_json=json_out, title="Settings")
