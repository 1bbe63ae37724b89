"""
Wall-clock driven animation loop.

Each tick recomputes elapsed time as (now - start) from a monotonic
source rather than accumulating a fixed step, so frame jitter or
dropped frames never shift the oscillator phase. Ticks are driven by a
frame scheduler; exactly one tick is pending at any time.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional


FRAME_INTERVAL_MS = 16


class Scheduler(ABC):
    """
    Abstract frame scheduler.

    Decides when the next tick runs. Implementations must run callbacks
    one at a time, never overlapping.
    """

    @abstractmethod
    def schedule(self, callback: Callable[[], None]) -> Any:
        """
        Request callback on the next available frame.

        Args:
            callback: Function with no arguments

        Returns:
            handle: Token accepted by cancel()
        """
        pass

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback. Unknown or fired handles are ignored."""
        pass


class TkScheduler(Scheduler):
    """Frame scheduler on top of the tkinter event loop (widget.after)."""

    def __init__(self, widget, interval_ms: int = FRAME_INTERVAL_MS):
        """
        Initialize scheduler.

        Args:
            widget: Any tkinter widget (usually the root window)
            interval_ms: Delay between frames in milliseconds
        """
        self.widget = widget
        self.interval_ms = interval_ms

    def schedule(self, callback: Callable[[], None]) -> Any:
        return self.widget.after(self.interval_ms, callback)

    def cancel(self, handle: Any) -> None:
        self.widget.after_cancel(handle)


class ManualScheduler(Scheduler):
    """
    Scheduler whose frames are fired explicitly with step().

    Used for offline recording and tests.
    """

    def __init__(self):
        self._pending: Dict[int, Callable[[], None]] = {}
        self._next_handle = 0

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for the next frame."""
        return len(self._pending)

    def schedule(self, callback: Callable[[], None]) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel(self, handle: Any) -> None:
        self._pending.pop(handle, None)

    def step(self, n_frames: int = 1) -> int:
        """
        Fire pending callbacks for n frames.

        Callbacks scheduled during a frame run on the following frame.

        Args:
            n_frames: Number of frames to advance

        Returns:
            Number of callbacks fired
        """
        fired = 0
        for _ in range(n_frames):
            batch = self._pending
            self._pending = {}
            for callback in batch.values():
                callback()
                fired += 1
        return fired


class SimulationClock:
    """
    Cancellable repeating tick bound to a monotonic clock.

    Attributes:
        scheduler: Frame scheduler driving the ticks
        time_source: Monotonic time function returning seconds
        elapsed_time: Seconds since start() (0 before the first tick)
        ticks: Number of ticks handled since start()
    """

    def __init__(self, scheduler: Scheduler,
                 time_source: Callable[[], float] = time.perf_counter):
        """
        Initialize clock.

        Args:
            scheduler: Frame scheduler
            time_source: Monotonic clock in seconds (default time.perf_counter)
        """
        self.scheduler = scheduler
        self.time_source = time_source
        self.elapsed_time = 0.0
        self.ticks = 0

        self._start: Optional[float] = None
        self._handle: Any = None
        self._generation = 0
        self._running = False
        self._listeners: List[Callable[[float], None]] = []

    @property
    def running(self) -> bool:
        return self._running

    def add_listener(self, callback: Callable[[float], None]) -> None:
        """
        Register a tick listener.

        Args:
            callback: Function (elapsed_time) -> None, called once per tick
        """
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[float], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def start(self) -> None:
        """Start (or restart) the loop; elapsed time resets to zero."""
        self.stop()
        self._generation += 1
        self._running = True
        self._start = self.time_source()
        self.elapsed_time = 0.0
        self.ticks = 0
        self._schedule(self._generation)

    def stop(self) -> None:
        """Cancel the pending tick. Safe to call repeatedly."""
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None
        self._running = False
        # Invalidate closures already handed to the scheduler
        self._generation += 1

    def _schedule(self, generation: int) -> None:
        self._handle = self.scheduler.schedule(lambda: self._tick(generation))

    def _tick(self, generation: int) -> None:
        if not self._running or generation != self._generation:
            return

        self._handle = None
        self.elapsed_time = self.time_source() - self._start
        self.ticks += 1

        for callback in list(self._listeners):
            callback(self.elapsed_time)

        # A listener may have stopped or restarted the clock
        if self._running and generation == self._generation:
            self._schedule(generation)

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(running={self._running}, "
                f"elapsed_time={self.elapsed_time:.3f})")
