"""
ticker CLI - run a ticker against the asyncio frame source and report telemetry.

Entry point: ``ticker`` (registered in pyproject.toml).
"""

from ticker.cli.app import app

__all__ = ["app"]
