"""Tests for Ticker.sleep() and Ticker.next_frame()."""

import asyncio
from types import SimpleNamespace

import pytest

from ticker.scheduling import Ticker


class TestManagedDeferred:
    """Futures resolved by the ticker itself."""

    @pytest.mark.asyncio
    async def test_sleep_resolves_after_duration(self, ticker, source):
        fut = ticker.sleep(100)
        assert not fut.done()

        source.advance(60)
        assert not fut.done()
        source.advance(40)
        assert fut.done()
        assert await fut is None

    @pytest.mark.asyncio
    async def test_next_frame(self, ticker, source):
        fut = ticker.next_frame()
        assert ticker.pending == 1

        source.advance(16)
        await fut
        assert ticker.pending == 0

    @pytest.mark.asyncio
    async def test_cancel_removes_registration(self, ticker, source):
        fut = ticker.sleep(100)
        frame = ticker.next_frame()
        assert ticker.pending == 2

        fut.cancel()
        frame.cancel()
        await asyncio.sleep(0)

        assert ticker.pending == 0
        source.advance(200)
        assert fut.cancelled()

    @pytest.mark.asyncio
    async def test_cancelled_waiter_gets_cancelled_error(self, ticker, source):
        async def waiter():
            await ticker.sleep(1000)

        task = asyncio.create_task(waiter())
        await asyncio.sleep(0)
        assert ticker.pending == 1

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert ticker.pending == 0


class TestRouting:
    """Deferreds follow the bindings in force when they are created."""

    @staticmethod
    def native_namespace(log):
        def set_timeout(callback, delay=None, *args):
            log.append(("set_timeout", delay))
            callback(*args)
            return 1

        def request_animation_frame(callback):
            log.append(("request_animation_frame",))
            callback(0.0)
            return 2

        def noop(handle):
            log.append(("cancel", handle))

        return SimpleNamespace(
            set_timeout=set_timeout,
            clear_timeout=noop,
            set_interval=noop,
            clear_interval=noop,
            request_animation_frame=request_animation_frame,
            cancel_animation_frame=noop,
        )

    @pytest.mark.asyncio
    async def test_native_mode_uses_originals(self, source):
        log = []
        ticker = Ticker(source, namespace=self.native_namespace(log))

        await ticker.sleep(250)
        await ticker.next_frame()

        assert log == [("set_timeout", 250), ("request_animation_frame",)]
        assert ticker.pending == 0

    @pytest.mark.asyncio
    async def test_managed_mode_uses_ticker(self, source):
        log = []
        ticker = Ticker(source, namespace=self.native_namespace(log)).start()
        source.advance(0)

        fut = ticker.sleep(250)
        assert ticker.pending == 1
        assert log == []

        source.advance(250)
        await fut
        ticker.stop()

    @pytest.mark.asyncio
    async def test_binding_chosen_at_call_time(self, source):
        log = []
        ticker = Ticker(source, namespace=self.native_namespace(log)).start()
        source.advance(0)

        fut = ticker.sleep(100)
        ticker.use_native_functions = True  # switching afterwards changes nothing

        assert not fut.done()
        source.advance(100)
        assert fut.done()
        assert log == []
        ticker.stop()
