"""Host-global timer adapter.

Code that calls the six conventional timer names on a shared namespace
(``timers.set_timeout(...)``, ``timers.request_animation_frame(...)``) can be
moved onto a Ticker's frame clock without changing a line: ``install()``
rebinds the names to the ticker's methods and ``uninstall()`` puts the
originals back exactly as they were.

Example:
    >>> from ticker import timers
    >>> bindings = TimerBindings(timers, ticker)
    >>> bindings.install()
    >>> timers.set_timeout(print, 100, "hello")   # now a ticker callback
    10000
    >>> bindings.uninstall()                       # native asyncio timers again
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ticker.core.logging import get_logger

if TYPE_CHECKING:
    from .ticker import Ticker

logger = get_logger(__name__)

TIMER_NAMES = (
    "set_timeout",
    "clear_timeout",
    "set_interval",
    "clear_interval",
    "request_animation_frame",
    "cancel_animation_frame",
)

# Ticker-only helpers published alongside the six while managed.
EXTRA_NAMES = (
    "set_counter",
    "clear_counter",
    "set_animation_loop",
    "clear_animation_loop",
    "sleep",
    "next_frame",
)

BOUND_NAMES = TIMER_NAMES + EXTRA_NAMES

_ABSENT = object()


class TimerBindings:
    """Swap the timer names on ``namespace`` between originals and a ticker.

    ``install()`` binds the six conventional names plus the ticker-only
    helpers in ``EXTRA_NAMES``.

    The originals are captured once, when the bindings are created, and are
    what ``uninstall()`` restores. Names the namespace did not have are
    deleted again on uninstall.
    """

    def __init__(self, namespace: Any, ticker: Ticker) -> None:
        self.namespace = namespace
        self.ticker = ticker
        self.originals: dict[str, Any] = {
            name: getattr(namespace, name, _ABSENT) for name in BOUND_NAMES
        }
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    def managed(self) -> dict[str, Any]:
        """The ticker methods that replace the originals."""
        return {name: getattr(self.ticker, name) for name in BOUND_NAMES}

    def install(self) -> None:
        if self._installed:
            return
        for name, fn in self.managed().items():
            setattr(self.namespace, name, fn)
        self._installed = True
        logger.debug("timer_bindings_installed", namespace=_describe(self.namespace))

    def uninstall(self) -> None:
        if not self._installed:
            return
        for name, original in self.originals.items():
            if original is _ABSENT:
                if hasattr(self.namespace, name):
                    delattr(self.namespace, name)
            else:
                setattr(self.namespace, name, original)
        self._installed = False
        logger.debug("timer_bindings_restored", namespace=_describe(self.namespace))

    def resolve(self, name: str) -> Any:
        """Return whatever ``name`` is currently bound to on the namespace."""
        return getattr(self.namespace, name)


def _describe(namespace: Any) -> str:
    return getattr(namespace, "__name__", type(namespace).__name__)
