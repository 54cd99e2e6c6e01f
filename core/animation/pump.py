"""
Frame Pump - background thread that drives the AnimationEngine

The engine itself never sleeps; it only accumulates the elapsed time it is
given. The pump measures that time with time.monotonic(), calls tick() and,
whenever anything wrote to the buffers (including the snapshot restored on
leaving a mode) hands them to an output callback (LED
driver, preview socket, ...).

Every engine call from the pump happens under `lock`. The REST layer shares
the same lock so mode changes never interleave with a half-drawn frame.
"""

import logging
import threading
import time
from typing import Callable, Optional

from .manager import AnimationEngine
from .types import StripBuffers

logger = logging.getLogger(__name__)

OutputCallback = Callable[[StripBuffers], None]


class FramePump:
    """
    Ticks an AnimationEngine at a fixed polling interval.

    Attributes:
        engine: The AnimationEngine being driven
        lock: Lock serialising engine access
        interval_ms: Polling interval (shorter than the frame length)
        frames_rendered: Frames produced since start()
        frames_published: Times the buffers were handed to the output
    """

    def __init__(
        self,
        engine: AnimationEngine,
        output: Optional[OutputCallback] = None,
        interval_ms: int = 10,
        lock: Optional[threading.Lock] = None,
    ):
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.engine = engine
        self.output = output
        self.interval_ms = interval_ms
        self.lock = lock if lock is not None else threading.Lock()

        self.frames_rendered = 0
        self.frames_published = 0
        self._running = False
        self._stop_flag = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_tick = 0.0

    @property
    def running(self) -> bool:
        return self._running

    def start(self):
        """Start the pump thread"""
        if self._running:
            return

        self._stop_flag.clear()
        self._running = True
        self._last_tick = time.monotonic()

        self._thread = threading.Thread(target=self._pump_loop, name="sputter-frame-pump", daemon=True)
        self._thread.start()
        logger.info(f"Frame pump started ({self.interval_ms} ms interval)")

    def stop(self):
        """Stop the pump thread"""
        if not self._running:
            return

        self._stop_flag.set()
        self._running = False

        if self._thread:
            self._thread.join(timeout=1.0)
            self._thread = None

        logger.info("Frame pump stopped")

    def pump_once(self, delta_ms: int) -> bool:
        """
        Tick the engine by delta_ms and publish the buffers if anything
        wrote to them, including manual channel paints between frames.

        Returns True when the engine rendered a frame.
        Useful for testing or for callers that own their own loop.
        """
        with self.lock:
            rendered = self.engine.tick(delta_ms)
            if rendered:
                self.frames_rendered += 1
            if self.engine.buffers.take_changes():
                self.frames_published += 1
                if self.output is not None:
                    self.output(self.engine.buffers)
        return rendered

    def _pump_loop(self):
        interval = self.interval_ms / 1000.0
        while not self._stop_flag.is_set():
            now = time.monotonic()
            delta_ms = int((now - self._last_tick) * 1000)
            if delta_ms > 0:
                # Carry the sub-millisecond remainder into the next tick
                self._last_tick += delta_ms / 1000.0
                try:
                    self.pump_once(delta_ms)
                except Exception as e:
                    logger.exception(f"Frame pump error: {e}")
            self._stop_flag.wait(interval)

    def get_status(self) -> dict:
        return {
            'running': self._running,
            'interval_ms': self.interval_ms,
            'frames_rendered': self.frames_rendered,
            'frames_published': self.frames_published,
        }
