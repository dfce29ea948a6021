"""
Shared pytest fixtures and configuration for ticker tests.

This module provides:
- A deterministic frame source and a ticker wired to it
- A throwaway timer namespace for binding tests
- Auto-marking of tests by location
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from types import SimpleNamespace

import pytest

from ticker.scheduling import ManualFrameSource, Ticker


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path) or "_integration" in item.name:
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def source() -> ManualFrameSource:
    """Virtual clock starting at t=0."""
    return ManualFrameSource()


@pytest.fixture
def ticker(source: ManualFrameSource) -> Generator[Ticker, None, None]:
    """Ticker on the manual source, started and primed.

    The first frame after start is baseline only, so it is delivered here;
    tests can feed real deltas straight away.
    """
    t = Ticker(source)
    t.start()
    source.advance(0)
    yield t
    t.stop()


@pytest.fixture
def namespace() -> SimpleNamespace:
    """A host namespace with six sentinel timer functions."""

    def _native(name):
        def fn(*args, **kwargs):
            return (name, args)

        fn.__name__ = name
        return fn

    return SimpleNamespace(
        set_timeout=_native("set_timeout"),
        clear_timeout=_native("clear_timeout"),
        set_interval=_native("set_interval"),
        clear_interval=_native("clear_interval"),
        request_animation_frame=_native("request_animation_frame"),
        cancel_animation_frame=_native("cancel_animation_frame"),
    )


class Recorder:
    """Callable that records every invocation's positional args."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def __call__(self, *args) -> None:
        self.calls.append(args)

    @property
    def count(self) -> int:
        return len(self.calls)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_recorder() -> type[Recorder]:
    """Factory for tests that need more than one recorder."""
    return Recorder
