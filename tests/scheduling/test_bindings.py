"""Tests for TimerBindings and the native/managed mode toggle."""

from types import SimpleNamespace

from ticker import timers
from ticker.scheduling import BOUND_NAMES, EXTRA_NAMES, TIMER_NAMES, Ticker, TimerBindings


def snapshot(ns):
    return {name: getattr(ns, name, None) for name in TIMER_NAMES}


class TestTimerBindings:
    """Install/uninstall on a namespace."""

    def test_install_and_uninstall(self, source, namespace):
        ticker = Ticker(source)
        originals = snapshot(namespace)
        bindings = TimerBindings(namespace, ticker)

        bindings.install()
        assert bindings.installed
        assert namespace.set_timeout == ticker.set_timeout
        assert namespace.cancel_animation_frame == ticker.cancel_animation_frame

        bindings.uninstall()
        assert not bindings.installed
        for name in TIMER_NAMES:
            assert getattr(namespace, name) is originals[name]

    def test_idempotent(self, source, namespace):
        bindings = TimerBindings(namespace, Ticker(source))
        originals = snapshot(namespace)

        bindings.uninstall()
        assert snapshot(namespace) == originals

        bindings.install()
        bindings.install()
        bindings.uninstall()
        assert all(getattr(namespace, n) is originals[n] for n in TIMER_NAMES)

    def test_missing_names_removed_again(self, source):
        ns = SimpleNamespace(unrelated=1)
        bindings = TimerBindings(ns, Ticker(source))

        bindings.install()
        assert all(hasattr(ns, name) for name in TIMER_NAMES)

        bindings.uninstall()
        assert not any(hasattr(ns, name) for name in TIMER_NAMES)
        assert ns.unrelated == 1

    def test_extra_helpers_published_and_removed(self, source):
        ns = SimpleNamespace()
        ticker = Ticker(source, namespace=ns)

        ticker.start()
        assert all(hasattr(ns, name) for name in EXTRA_NAMES)
        assert ns.set_counter == ticker.set_counter
        assert ns.clear_animation_loop == ticker.clear_animation_loop
        assert ns.sleep == ticker.sleep
        assert ns.next_frame == ticker.next_frame

        ticker.stop()
        assert not any(hasattr(ns, name) for name in BOUND_NAMES)

    def test_existing_extra_name_restored(self, source):
        def own_sleep(ms):
            return ms

        ns = SimpleNamespace(sleep=own_sleep)
        bindings = TimerBindings(ns, Ticker(source))

        bindings.install()
        assert ns.sleep is not own_sleep
        bindings.uninstall()
        assert ns.sleep is own_sleep

    def test_counter_through_namespace(self, source, recorder):
        ns = SimpleNamespace()
        ticker = Ticker(source, namespace=ns).start()
        source.advance(0)

        ns.set_counter(recorder, 10, 2)
        source.run([10, 10, 10])

        assert recorder.count == 2
        ticker.stop()

    def test_managed_calls_reach_ticker(self, source, namespace, recorder):
        ticker = Ticker(source, namespace=namespace).start()
        source.advance(0)

        callback_id = namespace.set_timeout(recorder, 10, "x")
        assert callback_id in ticker
        source.advance(10)
        assert recorder.calls == [("x", 10, 0)]

        loop_id = namespace.request_animation_frame(recorder)
        namespace.cancel_animation_frame(loop_id)
        assert loop_id not in ticker
        ticker.stop()


class TestModeToggle:
    """Ticker.use_native_functions."""

    def test_native_until_started(self, source, namespace):
        originals = snapshot(namespace)
        ticker = Ticker(source, namespace=namespace)

        assert ticker.use_native_functions is True
        assert snapshot(namespace) == originals

    def test_start_and_stop_swap_bindings(self, source, namespace):
        originals = snapshot(namespace)
        ticker = Ticker(source, namespace=namespace)

        ticker.start()
        assert ticker.use_native_functions is False
        assert namespace.set_interval == ticker.set_interval

        ticker.stop()
        assert ticker.use_native_functions is True
        assert all(getattr(namespace, n) is originals[n] for n in TIMER_NAMES)

    def test_toggle_round_trip_restores_same_bindings(self, source, namespace):
        ticker = Ticker(source, namespace=namespace).start()
        managed = snapshot(namespace)

        ticker.use_native_functions = True
        ticker.use_native_functions = False

        assert snapshot(namespace) == managed
        ticker.stop()

    def test_toggle_does_not_touch_loop(self, source, namespace):
        ticker = Ticker(source, namespace=namespace).start()
        ticker.use_native_functions = True

        assert ticker.is_running
        assert source.pending == 1
        ticker.stop()

    def test_setting_same_value_is_noop(self, source, namespace):
        ticker = Ticker(source, namespace=namespace)
        ticker.use_native_functions = True
        ticker.use_native_functions = 1

        assert ticker.use_native_functions is True
        assert not ticker._bindings.installed

    def test_without_namespace_flag_still_toggles(self, source):
        ticker = Ticker(source)
        ticker.use_native_functions = False
        assert ticker.use_native_functions is False

    def test_timers_module_restored(self, source):
        originals = snapshot(timers)
        ticker = Ticker(source, namespace=timers)
        try:
            ticker.start()
            assert timers.set_timeout == ticker.set_timeout
        finally:
            ticker.stop()

        assert all(getattr(timers, n) is originals[n] for n in TIMER_NAMES)
