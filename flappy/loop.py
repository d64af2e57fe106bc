"""
Loop driver - runs the simulation and renderer on a background thread.

A best-effort fixed-cadence loop: each iteration steps the engine once,
draws one frame, then waits a fixed interval. The measured frame delta
is kept for diagnostics only; physics always advances by one fixed tick.
"""

import threading
import time
from enum import Enum
from typing import Callable, Optional

from flappy import config
from flappy.engine import SimulationEngine
from flappy.logging import get_logger
from flappy.renderer import Renderer
from flappy.surface import SurfaceHost

log = get_logger('loop')


class LoopState(Enum):
    """Lifecycle of the loop thread."""
    STOPPED = "stopped"
    RUNNING = "running"


class LoopDriver:
    """Owns the loop thread and forwards input to the engine.

    Examples:
        >>> driver = LoopDriver(engine, Renderer(engine), host)
        >>> driver.start()
        >>> driver.dispatch_primary_action()
        >>> driver.stop()  # returns once the loop thread has exited
    """

    def __init__(
        self,
        engine: SimulationEngine,
        renderer: Renderer,
        host: SurfaceHost,
        frame_interval_ms: float = config.FRAME_SLEEP_MS,
        max_delta_ms: float = config.MAX_FRAME_DELTA_MS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize the driver.

        Args:
            engine: Simulation to step
            renderer: Renderer to draw each frame with
            host: Surface provider
            frame_interval_ms: Wait between iterations (16ms targets ~60 per second)
            max_delta_ms: Cap for the measured frame delta
            clock: Monotonic clock in seconds
        """
        self._engine = engine
        self._renderer = renderer
        self._host = host
        self._frame_interval = frame_interval_ms / 1000.0
        self._max_delta_ms = max_delta_ms
        self._clock = clock

        self._state = LoopState.STOPPED
        self._state_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_time: Optional[float] = None

        # Diagnostics
        self.frames = 0
        self.skipped_frames = 0
        self.last_delta_ms = 0.0

    @property
    def state(self) -> LoopState:
        with self._state_lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is LoopState.RUNNING

    def start(self) -> None:
        """Start the loop thread (STOPPED -> RUNNING)."""
        with self._state_lock:
            if self._state is LoopState.RUNNING:
                log.warning("Loop already running")
                return
            self._stop_event = threading.Event()
            self._last_time = None
            self._state = LoopState.RUNNING
            self._thread = threading.Thread(
                target=self._run, args=(self._stop_event,), name='flappy-loop', daemon=True,
            )
            self._thread.start()
        log.info("Loop started")

    def stop(self) -> None:
        """Stop the loop thread (RUNNING -> STOPPED).

        Blocks until the loop thread has exited, unless called from the
        loop thread itself.
        """
        with self._state_lock:
            self._state = LoopState.STOPPED
            self._stop_event.set()
            thread = self._thread
            self._thread = None

        if thread is None:
            return
        if thread is not threading.current_thread():
            self._join(thread)
        log.info("Loop stopped after %d frames", self.frames)

    def _join(self, thread: threading.Thread) -> None:
        """Wait for the loop thread, riding out interrupts."""
        while thread.is_alive():
            try:
                thread.join()
            except KeyboardInterrupt:
                log.debug("Interrupted while joining loop thread, waiting again")

    def dispatch_primary_action(self) -> None:
        """Forward a tap/click/key press to the engine."""
        self._engine.on_primary_action()

    def run_once(self) -> bool:
        """Run a single loop iteration.

        Returns:
            True if the engine was stepped and a frame drawn, False if the
            host surface was not valid and the iteration was skipped
        """
        if not self._host.is_valid():
            self.skipped_frames += 1
            log.trace("Surface not valid, iteration skipped")
            return False

        now = self._clock()
        if self._last_time is None:
            delta_ms = 0.0
        else:
            delta_ms = min((now - self._last_time) * 1000.0, self._max_delta_ms)
        self._last_time = now
        self.last_delta_ms = delta_ms

        width, height = self._host.size()
        self._engine.initialize(width, height)
        self._engine.step()
        self._renderer.draw(self._host)
        self.frames += 1
        return True

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                log.exception("Loop iteration failed, stopping loop")
                with self._state_lock:
                    if stop_event is self._stop_event:
                        self._state = LoopState.STOPPED
                        self._thread = None
                    stop_event.set()
                return
            stop_event.wait(self._frame_interval)

    def __enter__(self) -> 'LoopDriver':
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
