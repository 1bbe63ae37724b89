"""
Simple harmonic motion simulation engine.

Wires the parameter store, the animation clock and the waveform sampler
together, and hands their outputs to renderers:

    input -> ParameterStore -> (every tick)  position(A, f, phi, t)
                            -> (on change)   WaveformSampler table

Also runs offline recordings with a manual scheduler for plotting and
animation export.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Callable

from oscillator.parameters import ParameterStore, SimulationParameters, DEFAULT_PARAMETERS
from oscillator.harmonic import position
from .clock import SimulationClock, Scheduler, ManualScheduler
from .sampler import WaveformSampler, WaveformTable


@dataclass(frozen=True)
class SimulationState:
    """
    Snapshot handed to the body renderer on each tick.

    Attributes:
        elapsed_time: Seconds since the clock started
        parameters: Parameters at the time of the snapshot
    """
    elapsed_time: float
    parameters: SimulationParameters

    @property
    def position(self) -> float:
        """Displacement, derived on every read."""
        return position(self.parameters, self.elapsed_time)


@dataclass
class SimulationRecording:
    """
    Container for an offline recording.

    Attributes:
        time: Tick times (seconds)
        positions: Position at each tick
        parameters: Parameters used for the recording
        waveform: Waveform table for those parameters
        metadata: Additional recording information
    """
    time: np.ndarray
    positions: np.ndarray
    parameters: SimulationParameters
    waveform: WaveformTable
    metadata: Dict[str, Any] = field(default_factory=dict)

    def compute_metrics(self) -> Dict[str, float]:
        """
        Compute summary metrics.

        Returns:
            Dictionary with peak displacement, max error against the
            closed form, and mean frame interval
        """
        metrics = {}
        if len(self.positions) == 0:
            return metrics

        metrics['peak_displacement'] = float(np.max(np.abs(self.positions)))
        expected = position(self.parameters, self.time)
        metrics['max_error'] = float(np.max(np.abs(self.positions - expected)))
        if len(self.time) > 1:
            metrics['mean_frame_interval'] = float(np.mean(np.diff(self.time)))
        return metrics


class HarmonicSimulator:
    """
    Real-time simple harmonic motion simulator.

    Position is recomputed each tick from the latest parameters and
    elapsed time (O(1) per frame). The waveform table is regenerated
    only after a parameter change (O(n_samples) per edit).
    """

    def __init__(self, scheduler: Scheduler,
                 time_source: Optional[Callable[[], float]] = None,
                 parameters: SimulationParameters = DEFAULT_PARAMETERS,
                 sampler: Optional[WaveformSampler] = None):
        """
        Initialize simulator.

        Args:
            scheduler: Frame scheduler driving the clock
            time_source: Monotonic clock (defaults to the clock's own default)
            parameters: Initial parameters
            sampler: Waveform sampler (default 8 s window, 0.02 s step)
        """
        self.store = ParameterStore(parameters)
        if time_source is None:
            self.clock = SimulationClock(scheduler)
        else:
            self.clock = SimulationClock(scheduler, time_source)
        self.sampler = sampler if sampler is not None else WaveformSampler()

        self._frame_listeners: List[Callable[[SimulationState], None]] = []
        self._waveform_listeners: List[Callable[[WaveformTable], None]] = []

        self.store.subscribe(self._on_parameters_changed)
        self.clock.add_listener(self._on_tick)

    @property
    def parameters(self) -> SimulationParameters:
        return self.store.parameters

    @property
    def elapsed_time(self) -> float:
        return self.clock.elapsed_time

    @property
    def state(self) -> SimulationState:
        """Current snapshot (position derived from it on read)."""
        return SimulationState(self.clock.elapsed_time, self.store.parameters)

    @property
    def position(self) -> float:
        """Instantaneous displacement."""
        return position(self.store.parameters, self.clock.elapsed_time)

    @property
    def waveform(self) -> WaveformTable:
        """Waveform table for the current parameters."""
        return self.sampler.table(self.store.parameters)

    def on_frame(self, callback: Callable[[SimulationState], None]) -> None:
        """
        Register a body renderer.

        Args:
            callback: Function (SimulationState) -> None, called every tick
        """
        self._frame_listeners.append(callback)

    def on_waveform(self, callback: Callable[[WaveformTable], None]) -> None:
        """
        Register a chart renderer.

        Args:
            callback: Function (WaveformTable) -> None, called after each
                parameter change
        """
        self._waveform_listeners.append(callback)

    def set_parameter(self, name: str, value: float) -> SimulationParameters:
        """Apply an input control event (clamped)."""
        return self.store.set(name, value)

    def start(self) -> None:
        self.clock.start()

    def stop(self) -> None:
        self.clock.stop()

    def _on_tick(self, elapsed_time: float) -> None:
        state = SimulationState(elapsed_time, self.store.parameters)
        for callback in list(self._frame_listeners):
            callback(state)

    def _on_parameters_changed(self, params: SimulationParameters) -> None:
        self.sampler.invalidate()
        if not self._waveform_listeners:
            return
        table = self.sampler.table(params)
        for callback in list(self._waveform_listeners):
            callback(table)

    def record(self, duration: float, fps: int = 60) -> SimulationRecording:
        """
        Record the motion offline at a fixed frame rate.

        Runs the real clock loop on a manual scheduler with a synthetic
        time source, so recorded positions go through the same tick path
        as the live animation.

        Args:
            duration: Recording length (seconds)
            fps: Frames per second

        Returns:
            SimulationRecording with tick times and positions
        """
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")

        n_frames = int(round(duration * fps))
        frame_period = 1.0 / fps
        frame = [0]

        scheduler = ManualScheduler()
        clock = SimulationClock(scheduler, lambda: frame[0] * frame_period)

        times = []
        positions = []
        params = self.store.parameters

        def capture(elapsed_time: float) -> None:
            times.append(elapsed_time)
            positions.append(position(params, elapsed_time))

        clock.add_listener(capture)
        clock.start()
        for _ in range(n_frames + 1):
            scheduler.step()
            frame[0] += 1
        clock.stop()

        metadata = {
            'duration': duration,
            'fps': fps,
            'n_frames': len(times),
            'parameters': params.as_dict()
        }

        return SimulationRecording(
            time=np.array(times),
            positions=np.array(positions),
            parameters=params,
            waveform=self.sampler.table(params),
            metadata=metadata
        )

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}({self.store.parameters}, "
                f"running={self.clock.running})")
