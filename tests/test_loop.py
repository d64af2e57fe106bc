"""
Tests for the LoopDriver.

Single iterations are driven with run_once() and a fake clock; the
thread lifecycle is exercised with a real thread and a short interval.
"""

import threading
import time

import pytest

from flappy.engine import SimulationEngine
from flappy.loop import LoopDriver, LoopState
from flappy.renderer import Renderer


class FakeClock:
    """Clock returning preset times in seconds."""

    def __init__(self, *times):
        self._times = list(times)

    def __call__(self):
        return self._times.pop(0)


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def fresh_engine(world):
    return SimulationEngine(world=world, seed=1)


def make_driver(engine, host, **kwargs):
    kwargs.setdefault('frame_interval_ms', 1)
    return LoopDriver(engine, Renderer(engine), host, **kwargs)


class TestRunOnce:
    """Tests for a single loop iteration."""

    def test_invalid_surface_skips_iteration(self, fresh_engine, make_host):
        host = make_host(valid=False)
        driver = make_driver(fresh_engine, host)
        assert not driver.run_once()
        assert driver.skipped_frames == 1
        assert driver.frames == 0
        assert fresh_engine.width == 0
        assert host.posts == 0

    def test_iteration_initializes_steps_and_draws(self, fresh_engine, make_host):
        host = make_host(width=1080, height=1920)
        driver = make_driver(fresh_engine, host)
        assert driver.run_once()
        assert (fresh_engine.width, fresh_engine.height) == (1080, 1920)
        assert fresh_engine.tick_count == 1
        assert host.posts == 1
        assert driver.frames == 1

    def test_skipped_iteration_retried_when_surface_returns(self, fresh_engine, make_host):
        host = make_host(valid=False)
        driver = make_driver(fresh_engine, host)
        driver.run_once()
        host.valid = True
        assert driver.run_once()
        assert fresh_engine.tick_count == 1

    def test_delta_is_measured_and_capped(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host(), clock=FakeClock(10.0, 10.016, 11.0))
        driver.run_once()
        assert driver.last_delta_ms == 0.0
        driver.run_once()
        assert driver.last_delta_ms == pytest.approx(16.0)
        driver.run_once()
        assert driver.last_delta_ms == 50.0

    def test_physics_ignores_delta(self, world, make_host):
        """Test a slow clock and a fast clock simulate the same world."""
        slow = SimulationEngine(world=world, seed=1)
        fast = SimulationEngine(world=world, seed=1)
        slow_driver = make_driver(slow, make_host(), clock=FakeClock(*[i * 0.5 for i in range(30)]))
        fast_driver = make_driver(fast, make_host(), clock=FakeClock(*[i * 0.001 for i in range(30)]))
        for _ in range(30):
            slow_driver.run_once()
            fast_driver.run_once()
        assert slow.avatar.y == fast.avatar.y
        assert slow.avatar.vy == fast.avatar.vy


class TestLifecycle:
    """Tests for start/stop on a real thread."""

    def test_starts_stopped(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host())
        assert driver.state is LoopState.STOPPED
        assert not driver.is_running

    def test_start_runs_frames(self, fresh_engine, make_host):
        host = make_host()
        driver = make_driver(fresh_engine, host)
        driver.start()
        try:
            assert driver.state is LoopState.RUNNING
            assert wait_for(lambda: driver.frames >= 3)
            assert fresh_engine.tick_count >= 3
        finally:
            driver.stop()

    def test_stop_joins_thread(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host())
        driver.start()
        assert wait_for(lambda: driver.frames >= 1)
        threads_before = [t for t in threading.enumerate() if t.name == 'flappy-loop']
        assert threads_before

        driver.stop()
        assert driver.state is LoopState.STOPPED
        assert not any(t.is_alive() for t in threads_before)

        frames = driver.frames
        time.sleep(0.05)
        assert driver.frames == frames

    def test_stop_when_stopped_is_noop(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host())
        driver.stop()
        assert driver.state is LoopState.STOPPED

    def test_double_start_keeps_one_thread(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host())
        driver.start()
        try:
            driver.start()
            loops = [t for t in threading.enumerate() if t.name == 'flappy-loop' and t.is_alive()]
            assert len(loops) == 1
        finally:
            driver.stop()

    def test_restart_after_stop(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host())
        driver.start()
        assert wait_for(lambda: driver.frames >= 1)
        driver.stop()
        frames = driver.frames

        driver.start()
        try:
            assert wait_for(lambda: driver.frames > frames)
        finally:
            driver.stop()

    def test_context_manager(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host())
        with driver:
            assert driver.is_running
            assert wait_for(lambda: driver.frames >= 1)
        assert driver.state is LoopState.STOPPED

    def test_invalid_surface_keeps_loop_alive(self, fresh_engine, make_host):
        host = make_host(valid=False)
        driver = make_driver(fresh_engine, host)
        with driver:
            assert wait_for(lambda: driver.skipped_frames >= 3)
            assert fresh_engine.tick_count == 0
            host.valid = True
            assert wait_for(lambda: driver.frames >= 1)

    def test_stop_survives_interrupted_join(self, fresh_engine, make_host, monkeypatch):
        """Test Ctrl+C during the join does not abort stop()."""
        driver = make_driver(fresh_engine, make_host())
        driver.start()
        assert wait_for(lambda: driver.frames >= 1)
        thread = driver._thread
        real_join = thread.join
        calls = []

        def interrupted_join(*args, **kwargs):
            calls.append(args)
            if len(calls) == 1:
                raise KeyboardInterrupt
            return real_join(*args, **kwargs)

        monkeypatch.setattr(thread, 'join', interrupted_join)
        driver.stop()

        assert len(calls) >= 2
        assert not thread.is_alive()
        assert driver.state is LoopState.STOPPED

    def test_failing_iteration_stops_loop(self, fresh_engine, make_host):
        host = make_host()
        driver = make_driver(fresh_engine, host)

        def broken(surface, world):
            raise RuntimeError("boom")

        driver._renderer.render = broken
        driver.start()
        assert wait_for(lambda: driver.state is LoopState.STOPPED)
        for thread in threading.enumerate():
            if thread.name == 'flappy-loop':
                thread.join(timeout=2.0)
                assert not thread.is_alive()
        # Surface was still posted for the failed frame
        assert host.posts == 1
        driver.stop()


class TestInput:
    """Tests for input dispatch."""

    def test_dispatch_while_stopped_reaches_engine(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host())
        driver.dispatch_primary_action()
        assert fresh_engine.avatar.vy == -18.0

    def test_dispatch_while_running(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host())
        with driver:
            assert wait_for(lambda: driver.frames >= 1)
            for _ in range(50):
                driver.dispatch_primary_action()
                time.sleep(0.001)
        assert fresh_engine.tick_count >= 1
        # Constant flapping keeps the avatar off the ground
        assert not fresh_engine.terminal

    def test_dispatch_after_game_over_restarts(self, fresh_engine, make_host):
        driver = make_driver(fresh_engine, make_host())
        for _ in range(57):
            driver.run_once()
        assert fresh_engine.terminal
        driver.dispatch_primary_action()
        assert not fresh_engine.terminal
        assert fresh_engine.avatar.y == 960.0
